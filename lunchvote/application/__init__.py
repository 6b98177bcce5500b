"""
Application layer - Use cases and orchestration for Lunch Vote.

This layer contains:
- The ballot engine (state machine and its gating rules)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- May import from lunchvote.domain and lunchvote.config
- May import lunchvote.infrastructure.adapters only for default port
  implementations
- Must NOT import from lunchvote.api
"""
