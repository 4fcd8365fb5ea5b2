"""Abstract collection interface — identity → versioned record storage for one resource kind."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

R = TypeVar("R")


class Collection(ABC, Generic[R]):
    """
    Storage only: no validation, no uniqueness, no locking.
    The owning store serialises access.
    """

    @abstractmethod
    def get(self, identity: str) -> Optional[R]:
        """Return the record stored under identity, or None."""
        ...

    @abstractmethod
    def list_all(self) -> List[R]:
        """Return a new list holding every stored record (order unspecified)."""
        ...

    @abstractmethod
    def put(self, identity: str, record: R) -> None:
        """Insert or replace the record stored under identity."""
        ...

    @abstractmethod
    def remove(self, identity: str) -> bool:
        """Delete the record. Returns True if something was removed."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...
