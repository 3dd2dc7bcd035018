"""Shared FastAPI dependencies for the engine routes."""

from __future__ import annotations

from fastapi import Depends, Request

from advisor_engine.core.errors import InvalidInputError
from advisor_engine.services.engine import FinancialEngine

# user ids are stored in a signed 32-bit primary key
MAX_USER_ID = 2**31 - 1


def get_engine(request: Request) -> FinancialEngine:
    return request.app.state.engine


def invalid_user_id() -> InvalidInputError:
    return InvalidInputError("User ID must be a valid number", error="Invalid user ID")


def parse_user_id(user_id: str) -> int:
    """Validate the ``user_id`` path segment as a positive integer in key range."""

    candidate = user_id.strip()
    if not (candidate.isascii() and candidate.isdigit()):
        raise invalid_user_id()
    value = int(candidate)
    if not 0 < value <= MAX_USER_ID:
        raise invalid_user_id()
    return value


def failure_label(label: str):
    """Name the operation reported in the error label when a route fails unexpectedly."""

    def _label(request: Request) -> None:
        request.state.failure_label = label

    return Depends(_label)


__all__ = ["MAX_USER_ID", "failure_label", "get_engine", "invalid_user_id", "parse_user_id"]
