"""
Service results.

Service operations return either `Ok(value)` or a `ServiceError`. The HTTP layer
(`vinped.api.exceptions.error_response`) is the only place that turns a
`ServiceError` into a status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(StrEnum):
    VALIDATION = "validation_error"
    CONFLICT = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str
    details: str | None = None


Result = Union[Ok[T], ServiceError]