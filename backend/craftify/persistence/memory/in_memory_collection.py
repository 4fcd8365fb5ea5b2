"""Process-local implementation of Collection."""
from __future__ import annotations
from typing import Dict, Generic, List, Optional, TypeVar

from craftify.persistence.interfaces.collection import Collection

R = TypeVar("R")


class InMemoryCollection(Collection[R], Generic[R]):

    def __init__(self) -> None:
        self._records: Dict[str, R] = {}

    def get(self, identity: str) -> Optional[R]:
        return self._records.get(identity)

    def list_all(self) -> List[R]:
        return list(self._records.values())

    def put(self, identity: str, record: R) -> None:
        self._records[identity] = record

    def remove(self, identity: str) -> bool:
        return self._records.pop(identity, None) is not None

    def count(self) -> int:
        return len(self._records)
