"""
Custom exceptions for the leaderboard engine with user-friendly error messages.
"""

from typing import Any, Optional


class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class FetchFailure(LeaderboardException):
    """Raised when the data service cannot be reached or answers non-2xx."""
    def __init__(self, endpoint: str, details: str = None, status: Optional[int] = None):
        self.endpoint = endpoint
        self.status = status
        status_text = f" (HTTP {status})" if status is not None else ""
        super().__init__(
            f"Fetch of {endpoint} failed{status_text}: {details}",
            f"❌ Failed to load {endpoint.strip('/')}. Please try again later."
        )

class ShapeMismatch(LeaderboardException):
    """A field in a data service row was missing or had an unexpected type."""
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(
            f"Unexpected value for '{field}': {value!r}",
            "❌ Received malformed leaderboard data."
        )
