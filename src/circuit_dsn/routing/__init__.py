"""Remote autorouting through the Freerouting API."""

from __future__ import annotations

from .freerouting import FreeroutingClient, FreeroutingError, FreeroutingTimeoutError
from .session import SessionSummary, summarize_session

__all__ = [
    "FreeroutingClient",
    "FreeroutingError",
    "FreeroutingTimeoutError",
    "SessionSummary",
    "summarize_session",
]
