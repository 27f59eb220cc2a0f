"""CLI command groups registered on the root ``cli`` group."""
