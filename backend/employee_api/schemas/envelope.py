"""Envelope Schema — the {data, status, error} wrapper around every upstream response.

Invariants:
    - status is one of the two ResponseStatus sentences, nothing else validates
    - Unknown fields ignored on read

Design Decisions:
    - Generic model: the client reads Envelope[Any] so status is known before
      data is typed against the operation (list[Employee], bool, ...)
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from employee_api.core.domain_types import ResponseStatus

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """Upstream response wrapper."""
    model_config = ConfigDict(extra="ignore")

    data: T | None = None
    status: ResponseStatus
    error: str | None = None

    @property
    def is_handled(self) -> bool:
        return self.status == ResponseStatus.HANDLED
