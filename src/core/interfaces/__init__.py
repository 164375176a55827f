"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by the CLI and by adapters.
- Inverts dependencies: the core depends on abstractions, not on Rich or
  the BigQuery SDK.
"""
