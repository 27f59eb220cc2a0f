"""Action handlers — one module per action kind.

``base`` holds the handler contract and the per-run HandlerContext.
"""
