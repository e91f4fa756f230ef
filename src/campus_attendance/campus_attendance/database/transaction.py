from __future__ import annotations

from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol


class TransactionManager(Protocol):
    """Anything that can wrap a block of repository calls in one transaction."""

    def transaction(self) -> ContextManager[None]:
        raise NotImplementedError


class NullTransaction:
    """No-op manager for in-memory repositories."""

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield
