"""Errors shared by the business services."""

from __future__ import annotations

from typing import ClassVar


class BiteError(Exception):
    """Base class of the shared business errors.

    An optional detail is appended to the default message after a colon.
    """

    default_message: ClassVar[str] = "error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        if detail is None:
            message = self.default_message
        else:
            message = f"{self.default_message}: {detail}"
        super().__init__(message)


class ExistsError(BiteError):
    """Something already exists."""

    default_message = "already exists"


class NotExistError(BiteError):
    """Something does not exist."""

    default_message = "does not exist"


class InvalidRequestError(BiteError):
    """A request is not valid."""

    default_message = "invalid request"


class InternalError(BiteError):
    """An internal failure whose details are hidden from clients."""

    default_message = "internal error: please try again later or contact support"