"""Renderers polled by the application loop."""
