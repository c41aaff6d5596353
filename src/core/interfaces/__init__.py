"""Core interfaces/abstractions.

Why:
- Defines contracts (Protocol) implemented by concrete adapters.
- The core depends on abstractions, so tests can inject fakes.
"""
