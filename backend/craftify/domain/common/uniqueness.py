"""Natural-key uniqueness checks (case-insensitive)."""
from __future__ import annotations
from typing import Iterable, Optional

from craftify.domain.common.records import VersionedRecord


def fold_key(key: Optional[str]) -> Optional[str]:
    """Normalise a natural key for comparison. Blank keys fold to None."""
    if key is None:
        return None
    folded = key.strip().casefold()
    return folded or None


def keys_equal(a: Optional[str], b: Optional[str]) -> bool:
    fa, fb = fold_key(a), fold_key(b)
    return fa is not None and fa == fb


def check_available(
    records: Iterable[VersionedRecord],
    candidate_key: str,
    exclude_identity: Optional[str] = None,
) -> bool:
    """
    True when no record other than `exclude_identity` holds `candidate_key`.
    Callers must hold the collection's write lock across this check and the write that follows.
    """
    for record in records:
        if exclude_identity is not None and record.identity == exclude_identity:
            continue
        if keys_equal(record.natural_key, candidate_key):
            return False
    return True
