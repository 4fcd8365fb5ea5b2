"""
Resource store — composes the collection, query plan, uniqueness index and concurrency gate
into list/get/create/update/delete for one resource kind.

Every mutation runs its whole check-then-write sequence under the store lock, so a uniqueness
check and the insert/rename that depends on it can never interleave with another writer.
Reads copy the (immutable) records out under the lock and then work on that snapshot.
"""
from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from typing import Generic, Iterable, List, Mapping, Optional, Tuple, TypeVar

from craftify.domain.common.concurrency import GateOutcome, authorize, describe
from craftify.domain.common.query import Page, QueryConfig, QueryPlan, validate_paging
from craftify.domain.common.records import VersionedRecord
from craftify.domain.common.result import Result
from craftify.domain.common.uniqueness import check_available, fold_key, keys_equal
from craftify.persistence.interfaces.collection import Collection

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=VersionedRecord)


class ResourceStore(ABC, Generic[R]):
    kind: str = "Resource"
    natural_key_field: str = "name"
    update_requires_token: bool = True
    delete_requires_token: bool = True

    def __init__(self, collection: Collection[R], plan: QueryPlan[R], max_page_size: int = 500):
        self._collection = collection
        self._plan = plan
        self._max_page_size = max_page_size
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Kind-specific hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _validate(self, data: dict) -> Result[dict]:
        """Validate and normalise a create/update payload."""
        ...

    @abstractmethod
    def _build(self, fields: dict) -> Result[R]:
        """Assign an identity and build the version-0 record. Called with the lock held."""
        ...

    @abstractmethod
    def _revise(self, record: R, fields: dict) -> R:
        """Return the next version of `record` with `fields` applied."""
        ...

    def _delete_blocked(self, record: R, force: bool) -> Optional[str]:
        """Return a reason when the record may not be deleted, else None."""
        return None

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def snapshot(self) -> List[R]:
        with self._lock:
            return self._collection.list_all()

    def count(self) -> int:
        with self._lock:
            return self._collection.count()

    def list(self, config: QueryConfig) -> Result[Page[R]]:
        paging = validate_paging(config.page, config.size, self._max_page_size)
        if not paging.is_success:
            return Result.fail(paging.error, paging.kind, paging.field_errors)
        return Result.ok(self._plan.run(self.snapshot(), config))

    def select(
        self,
        q: Optional[str] = None,
        filters: Optional[Mapping[str, Optional[str]]] = None,
        identities: Optional[Iterable[str]] = None,
    ) -> List[R]:
        """All records matching the list predicates, in default sort order. No paging."""
        records = self.snapshot()
        if identities is not None:
            wanted = set(identities)
            records = [r for r in records if r.identity in wanted]
        selected = self._plan.select(records, q, filters or {})
        return self._plan.order(selected, self._plan.resolve_sort(None))

    def get(self, identity: str) -> Result[R]:
        with self._lock:
            record = self._collection.get(identity)
        if record is None:
            return Result.not_found(f"{self.kind} '{identity}' not found.")
        return Result.ok(record)

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create(self, data: dict) -> Result[R]:
        validation = self._validate(data)
        if not validation.is_success:
            return Result.fail(validation.error, validation.kind, validation.field_errors)

        with self._lock:
            built = self._build(validation.value)
            if not built.is_success:
                return built
            record = built.value
            if not check_available(self._collection.list_all(), record.natural_key):
                logger.info("Create %s rejected: %s '%s' already exists", self.kind, self.natural_key_field, record.natural_key)
                return Result.conflict(
                    f"{self.kind} with {self.natural_key_field} '{record.natural_key}' already exists."
                )
            self._collection.put(record.identity, record)

        logger.info("Created %s '%s' (%s=%s)", self.kind, record.identity, self.natural_key_field, record.natural_key)
        return Result.ok(record)

    # ------------------------------------------------------------------
    # UPDATE
    # ------------------------------------------------------------------
    def update(self, identity: str, supplied_token: Optional[str], data: dict) -> Result[R]:
        with self._lock:
            current = self._collection.get(identity)
            if current is None:
                return Result.not_found(f"{self.kind} '{identity}' not found.")
            if self.update_requires_token or supplied_token is not None:
                gate = self._authorize(current, supplied_token)
                if not gate.is_success:
                    return gate
            return self._apply_update(current, data)

    def upsert(self, data: dict, create_only: bool = False) -> Result[Tuple[R, bool]]:
        """
        Create, or update the record whose natural key matches `data` case-insensitively.
        Lookup, merge and write happen under one lock acquisition. No concurrency token;
        for trusted batch callers such as import. Returns (record, created).
        """
        key = data.get(self.natural_key_field)
        with self._lock:
            current = self._find_by_key(key)
            if current is None:
                created = self.create(data)
                if not created.is_success:
                    return Result.fail(created.error, created.kind, created.field_errors)
                return Result.ok((created.value, True))
            if create_only:
                return Result.conflict(
                    f"{self.kind} with {self.natural_key_field} '{current.natural_key}' already exists."
                )
            updated = self._apply_update(current, self._carry_over(current, data))
            if not updated.is_success:
                return Result.fail(updated.error, updated.kind, updated.field_errors)
            return Result.ok((updated.value, False))

    def _find_by_key(self, key: Optional[str]) -> Optional[R]:
        if fold_key(key) is None:
            return None
        for record in self._collection.list_all():
            if keys_equal(record.natural_key, key):
                return record
        return None

    def _carry_over(self, record: R, data: dict) -> dict:
        """Fill fields the partial payload does not carry from the stored record."""
        return data

    def _apply_update(self, current: R, data: dict) -> Result[R]:
        validation = self._validate(data)
        if not validation.is_success:
            return Result.fail(validation.error, validation.kind, validation.field_errors)

        revised = self._revise(current, validation.value)
        if not keys_equal(revised.natural_key, current.natural_key) and not check_available(
            self._collection.list_all(), revised.natural_key, exclude_identity=current.identity
        ):
            logger.info("Update %s '%s' rejected: %s '%s' already exists", self.kind, current.identity, self.natural_key_field, revised.natural_key)
            return Result.conflict(
                f"Another {self.kind.lower()} with {self.natural_key_field} '{revised.natural_key}' already exists."
            )
        self._collection.put(current.identity, revised)
        logger.info("Updated %s '%s' to version %d", self.kind, current.identity, revised.version)
        return Result.ok(revised)

    # ------------------------------------------------------------------
    # DELETE
    # ------------------------------------------------------------------
    def delete(self, identity: str, supplied_token: Optional[str] = None, force: bool = False) -> Result[R]:
        with self._lock:
            current = self._collection.get(identity)
            if current is None:
                return Result.not_found(f"{self.kind} '{identity}' not found.")
            if self.delete_requires_token or supplied_token is not None:
                gate = self._authorize(current, supplied_token)
                if not gate.is_success:
                    return gate
            reason = self._delete_blocked(current, force)
            if reason:
                logger.info("Delete %s '%s' rejected: %s", self.kind, identity, reason)
                return Result.conflict(reason)
            self._collection.remove(identity)

        logger.info("Deleted %s '%s'", self.kind, identity)
        return Result.ok(current)

    def count_batch_delete(self, identities: Iterable[Optional[str]]) -> int:
        """
        Acknowledge a batch delete request. Returns the number of distinct, non-blank
        identities listed. Nothing is removed: a real delete must pass the token gate.
        """
        distinct = {i.strip() for i in identities if i is not None and i.strip()}
        logger.info("Batch delete acknowledged for %d %s identities", len(distinct), self.kind)
        return len(distinct)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _authorize(self, record: R, supplied_token: Optional[str]) -> Result[R]:
        outcome = authorize(record, supplied_token)
        if outcome is GateOutcome.OK:
            return Result.ok(record)
        logger.info("Precondition failed on %s '%s': token %s (%s)", self.kind, record.identity, supplied_token, outcome.value)
        return Result.precondition_failed(describe(outcome, record))
