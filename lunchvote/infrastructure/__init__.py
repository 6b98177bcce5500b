"""Infrastructure layer for Lunch Vote.

Concrete adapters for application ports plus cross-cutting observability
and monitoring concerns.
"""
