"""Core interfaces/abstractions.

Why:
- Define contracts (Protocol) implemented by concrete adapters.
- The pipeline depends on these, so tests can run it against fakes.
"""
