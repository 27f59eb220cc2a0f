"""Local filesystem and subprocess effects."""
