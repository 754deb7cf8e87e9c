"""
Custom exceptions for the invite leaderboard with user-friendly error messages.
"""

class LeaderboardException(Exception):
    """Base exception for leaderboard-related errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class DataUnavailableError(LeaderboardException):
    """Raised when an aggregate invite query fails or returns malformed rows."""
    def __init__(self, operation: str, details: str = None):
        super().__init__(
            f"Invite data unavailable during {operation}: {details}",
            "❌ Could not load invite data. Please try again later."
        )
        self.operation = operation

class MemberNotInGuildError(LeaderboardException):
    """Raised when member info is requested for a user outside the guild."""
    def __init__(self, user_id: int):
        super().__init__(
            f"User {user_id} is not a member of this guild",
            "❌ User is not part of your guild"
        )
        self.user_id = user_id
