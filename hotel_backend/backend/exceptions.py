# backend/exceptions.py

"""
DOMAIN ERRORS (SHARED)

Centralized error taxonomy for the payment / promotion / service-usage engine.

Every error carries:
- code: stable machine-readable code for API clients
- http_status: status the API layer reports it with

RULES:
- Services raise these; they never build HTTP responses.
- Views translate them with `error_response` (verbatim message).
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response


class DomainError(Exception):
    """Base exception for all engine failures reported to the caller."""

    code = "DOMAIN_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class NotFoundError(DomainError):
    """Booking / room / service / promotion missing."""

    code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class BadRequestError(DomainError):
    code = "BAD_REQUEST"
    http_status = status.HTTP_400_BAD_REQUEST


class InvalidScenarioError(BadRequestError):
    """Payment request does not match any allocation scenario."""

    code = "INVALID_SCENARIO"


class InvalidTransitionError(BadRequestError):
    """Raised when a status change is not in the transition table."""

    code = "INVALID_TRANSITION"


class ConflictError(DomainError):
    """A concurrent writer won; the unit of work was rolled back."""

    code = "CONFLICT"
    http_status = status.HTTP_409_CONFLICT


# ======================================================
# API ERROR NORMALIZATION
# ======================================================

def error_response(*, code: str, message: str, http_status: int):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_error_response(exc: DomainError):
    return error_response(
        code=exc.code,
        message=str(exc),
        http_status=exc.http_status,
    )
