"""Retry infrastructure for record-source page fetches."""

from outreach.resilience.retry import is_transient, resilient_api_call

__all__ = [
    "is_transient",
    "resilient_api_call",
]
