"""
Tagged result values.

Operations that aggregate many failure causes into a single user-facing
outcome return either ``BoxedSuccess(data)`` or ``BoxedError(tag, message)``
instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class BoxedSuccess(Generic[T]):
    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class BoxedError(Generic[E]):
    error: E
    message: str = ""

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        tag = getattr(self.error, "value", self.error)
        return f"{tag}: {self.message}" if self.message else str(tag)


BoxedResponse = Union[BoxedSuccess[T], BoxedError[E]]


def is_boxed_error(result: object) -> bool:
    return isinstance(result, BoxedError)
