"""Error taxonomy shared by the service layer and the API."""

from __future__ import annotations


class FantasyError(Exception):
    """Base class for failures reported back to the caller."""

    code = "fantasy_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FantasyError):
    code = "validation_error"


class BudgetExceeded(FantasyError):
    code = "budget_exceeded"

    def __init__(self, total_credits: int, credit_cap: int):
        super().__init__(
            f"Team costs {total_credits} credits which exceeds the cap of {credit_cap}"
        )
        self.total_credits = total_credits
        self.credit_cap = credit_cap


class DuplicateTeam(FantasyError):
    code = "duplicate_team"
    status_code = 409


class NotFound(FantasyError):
    code = "not_found"
    status_code = 404


class ContestUnavailable(FantasyError):
    code = "contest_unavailable"
    status_code = 409


class PermissionDenied(FantasyError):
    code = "permission_denied"
    status_code = 403


class AuthenticationError(FantasyError):
    code = "authentication_error"
    status_code = 401


__all__ = [
    "AuthenticationError",
    "BudgetExceeded",
    "ContestUnavailable",
    "DuplicateTeam",
    "FantasyError",
    "NotFound",
    "PermissionDenied",
    "ValidationError",
]
