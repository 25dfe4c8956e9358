"""
Clinic patient queue journey service.

Tracks each patient visit through the clinic stages, guards the legal
status transitions and keeps an append-only journey audit trail.
"""

__version__ = "0.1.0"
