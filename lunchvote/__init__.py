"""
Lunch Vote - Phased venue ballot engine

A coordinator nominates venues and registers friends, then opens a single
round of plurality voting that closes on quorum or when the deadline tick
passes, whichever comes first.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
