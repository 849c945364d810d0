"""Snapshot store: the process-wide keyed state of the lifecycle engine.

Holds three maps (orders, shipments, documents) keyed by identity. Writers
build a new state and swap it in with a single reference assignment, so a
reader always sees a whole batch or none of it and never waits on a writer.

Entities are copied on the way in and on the way out: callers mutate their
own copy (``get`` → change → ``put``/``commit``), never the stored record.
"""

import threading
import weakref
from collections.abc import Iterable, Mapping
from enum import Enum

import structlog
from pydantic import BaseModel

from lifecycle.document.document import Document, DocumentKind, document_id_for
from lifecycle.exceptions import NotFound, ValidationError
from lifecycle.order.order import Order
from lifecycle.shipment.shipment import Shipment, shipment_id_for

logger = structlog.get_logger(__name__)


class EntityKind(Enum):
    ORDER = "orders"
    SHIPMENT = "shipments"
    DOCUMENT = "documents"


_MODELS = {
    EntityKind.ORDER: Order,
    EntityKind.SHIPMENT: Shipment,
    EntityKind.DOCUMENT: Document,
}

_IDENTITY_FIELDS = {
    EntityKind.ORDER: "order_id",
    EntityKind.SHIPMENT: "shipment_id",
    EntityKind.DOCUMENT: "document_id",
}


def identity_of(kind: EntityKind, entity: BaseModel) -> str:
    return getattr(entity, _IDENTITY_FIELDS[kind])


class SnapshotStore:
    def __init__(self, lock_mode: str = "per_order"):
        if lock_mode not in ("per_order", "global"):
            raise ValueError(f"Unknown lock mode: {lock_mode}")
        self.lock_mode = lock_mode
        self._state: dict[EntityKind, dict[str, BaseModel]] = {kind: {} for kind in EntityKind}
        self._write_lock = threading.Lock()
        self._locks_guard = threading.Lock()
        self._order_locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()
        self._global_lock = threading.RLock()

    # -------------------------------------------------------------------
    # Locking
    # -------------------------------------------------------------------
    def lock_for(self, order_id: str) -> threading.RLock:
        """Mutual-exclusion lock for everything that writes ``order_id``.

        Per-order locks are only kept while some caller holds a reference.
        """
        if self.lock_mode == "global":
            return self._global_lock
        with self._locks_guard:
            lock = self._order_locks.get(order_id)
            if lock is None:
                lock = self._order_locks[order_id] = threading.RLock()
            return lock

    # -------------------------------------------------------------------
    # Coercion
    # -------------------------------------------------------------------
    @staticmethod
    def _coerce(kind: EntityKind, entity_id: str, entity) -> BaseModel:
        model = _MODELS[kind]
        if isinstance(entity, Mapping):
            entity = model.model_validate(entity)
        elif not isinstance(entity, model):
            raise ValidationError({kind.value: [f"Expected {model.__name__}, got {type(entity).__name__}"]})
        else:
            entity = entity.model_copy(deep=True)

        if identity_of(kind, entity) != entity_id:
            raise ValidationError(
                {kind.value: [f"Key {entity_id!r} does not match entity identity {identity_of(kind, entity)!r}"]}
            )
        return entity

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get(self, kind: EntityKind, entity_id: str):
        entity = self._state[kind].get(entity_id)
        if entity is None:
            raise NotFound(f"{_MODELS[kind].__name__} {entity_id} not found", kind=kind.value, id=entity_id)
        return entity.model_copy(deep=True)

    def contains(self, kind: EntityKind, entity_id: str) -> bool:
        return entity_id in self._state[kind]

    def count(self, kind: EntityKind) -> int:
        return len(self._state[kind])

    def shipment_for(self, order_id: str) -> Shipment:
        return self.get(EntityKind.SHIPMENT, shipment_id_for(order_id))

    def documents_for(self, order_id: str) -> list[Document]:
        return [
            doc.model_copy(deep=True) for doc in self._state[EntityKind.DOCUMENT].values() if doc.order_id == order_id
        ]

    def has_label(self, order_id: str) -> bool:
        return document_id_for(order_id, DocumentKind.LABEL) in self._state[EntityKind.DOCUMENT]

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def put(self, kind: EntityKind, entity_id: str, entity) -> None:
        """Insert or overwrite a single entity."""
        self.commit([(kind, entity_id, entity)])

    def commit(self, writes: Iterable[tuple[EntityKind, str, object]]) -> None:
        """Apply a batch of upserts as one atomic unit.

        Every entity is validated before the state is swapped; if any of them
        is rejected the store is left exactly as it was.
        """
        prepared = [(kind, entity_id, self._coerce(kind, entity_id, entity)) for kind, entity_id, entity in writes]
        if not prepared:
            return

        with self._write_lock:
            state = dict(self._state)
            for kind in {kind for kind, _, _ in prepared}:
                state[kind] = dict(state[kind])
            for kind, entity_id, entity in prepared:
                state[kind][entity_id] = entity
            self._state = state

        logger.debug("Batch committed", writes=[f"{kind.value}/{entity_id}" for kind, entity_id, _ in prepared])

    def replace_all(self, kind: EntityKind, mapping: Mapping[str, object]) -> None:
        """Replace the whole collection for ``kind`` (bulk import at start-up)."""
        entities = {entity_id: self._coerce(kind, entity_id, entity) for entity_id, entity in mapping.items()}
        with self._write_lock:
            state = dict(self._state)
            state[kind] = entities
            self._state = state
        logger.info("Collection replaced", kind=kind.value, count=len(entities))

    # -------------------------------------------------------------------
    # Snapshot export / import
    # -------------------------------------------------------------------
    def export_snapshot(self) -> dict[str, dict[str, dict]]:
        """Kind → id → entity, JSON-compatible."""
        state = self._state
        return {
            kind.value: {entity_id: entity.model_dump(mode="json") for entity_id, entity in state[kind].items()}
            for kind in EntityKind
        }

    def import_snapshot(self, snapshot: Mapping[str, Mapping[str, object]]) -> None:
        """Replace all three collections at once from an exported snapshot."""
        unknown = set(snapshot) - {kind.value for kind in EntityKind}
        if unknown:
            raise ValidationError({"snapshot": [f"Unknown entity kinds: {', '.join(sorted(unknown))}"]})

        state = {
            kind: {
                entity_id: self._coerce(kind, entity_id, entity)
                for entity_id, entity in snapshot.get(kind.value, {}).items()
            }
            for kind in EntityKind
        }
        with self._write_lock:
            self._state = state
        logger.info(
            "Snapshot imported",
            orders=len(state[EntityKind.ORDER]),
            shipments=len(state[EntityKind.SHIPMENT]),
            documents=len(state[EntityKind.DOCUMENT]),
        )

    def snapshot_view(self) -> dict[EntityKind, list]:
        """Copies of every collection, all taken from the same committed state."""
        state = self._state
        return {kind: [entity.model_copy(deep=True) for entity in state[kind].values()] for kind in EntityKind}

    def list(self, kind: EntityKind):
        """All entities of ``kind`` in insertion order."""
        return [entity.model_copy(deep=True) for entity in self._state[kind].values()]
