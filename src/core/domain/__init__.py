"""Domain models and pure functions.

Why:
- Pure, strict data structures (Pydantic v2) and I/O-free helpers live here.
- The domain knows nothing about HTTP, the CLI or cloud SDKs.
"""
