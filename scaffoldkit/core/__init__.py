"""Core — domain models, engine, config, and persistence."""
