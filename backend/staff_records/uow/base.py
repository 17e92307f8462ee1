"""Transaction boundary contract used by services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any


class UnitOfWork(ABC):
    """
    One workflow, one transaction.

    Implementations expose the repositories as attributes, all bound to the
    same session. Leaving the ``with`` block normally makes the work durable;
    leaving it with an exception discards every step.
    """

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...

    @abstractmethod
    def savepoint(self) -> AbstractContextManager[Any]:
        """Nested scope whose failure undoes only its own statements."""
