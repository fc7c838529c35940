"""User-facing notices returned by console actions."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from core.exceptions import AppException

T = TypeVar("T")


class NoticeVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class Notice:
    """A single message describing the outcome of an attempted action."""

    title: str
    description: str
    variant: NoticeVariant = NoticeVariant.DEFAULT

    @classmethod
    def failure(cls, description: str) -> "Notice":
        return cls(title="Error", description=description, variant=NoticeVariant.DESTRUCTIVE)


@dataclass(frozen=True, slots=True)
class ActionResult(Generic[T]):
    """Outcome of a console mutation.

    Failures are reported here instead of raised; ``error`` keeps the caught
    exception so the API can choose a status code.
    """

    notice: Notice
    data: T
    error: AppException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
