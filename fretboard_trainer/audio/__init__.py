"""Audio capture and note recognition."""
