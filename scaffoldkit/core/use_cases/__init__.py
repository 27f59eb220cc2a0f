"""Use cases — one module per CLI-facing operation.

Each use case returns a result dataclass with an ``error`` field
instead of raising, so the CLI can render text or JSON uniformly.
"""
