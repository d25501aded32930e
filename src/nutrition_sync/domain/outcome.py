"""Result variants recording which backing served a call."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Remote(Generic[T]):
    """Value produced by the remote backend."""

    value: T


@dataclass(frozen=True)
class LocalFallback(Generic[T]):
    """Value produced by the local cache after the remote path was skipped or failed."""

    value: T


Outcome = Remote[T] | LocalFallback[T]
