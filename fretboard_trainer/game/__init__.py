"""Practice game state engine."""
