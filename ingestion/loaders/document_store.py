"""
Path-addressed document store on top of SQLAlchemy async sessions.

Documents live in a single ``documents`` table keyed by their path
(``artists/<id>/tracks/<id>``). References between documents are stored as
path strings. Writes are staged on a ``WriteBatch`` and applied inside one
session transaction, so a batch either lands completely or not at all.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import CommitError, DocumentStoreError
from core.ids import new_document_id
from models.base import utcnow
from models.document import Document
import logging

logger = logging.getLogger(__name__)


class DocumentRef:
    """Reference to a single document by path."""

    def __init__(self, path: str):
        self.path = path.strip("/")
        if not self.path or len(self.path.split("/")) % 2:
            raise ValueError(f"Invalid document path: {path!r}")

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> "CollectionRef":
        return CollectionRef(self.path.rsplit("/", 1)[0])

    def collection(self, name: str) -> "CollectionRef":
        return CollectionRef(f"{self.path}/{name}")

    def __eq__(self, other) -> bool:
        return isinstance(other, DocumentRef) and other.path == self.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        return f"DocumentRef({self.path!r})"


class CollectionRef:
    """Reference to a (sub-)collection by path."""

    def __init__(self, path: str):
        self.path = path.strip("/")
        if not self.path or len(self.path.split("/")) % 2 == 0:
            raise ValueError(f"Invalid collection path: {path!r}")

    def document(self, doc_id: Optional[str] = None) -> DocumentRef:
        """Reference a document; a random id is allocated when omitted."""
        return DocumentRef(f"{self.path}/{doc_id or new_document_id()}")

    def __repr__(self) -> str:
        return f"CollectionRef({self.path!r})"


class ArrayUnion:
    """
    Field value that adds elements to an array field, skipping any that are
    already present.
    """

    def __init__(self, *values: Any):
        self.values: Tuple[Any, ...] = tuple(values)

    def __repr__(self) -> str:
        return f"ArrayUnion{self.values!r}"


def to_storable(value: Any) -> Any:
    """Convert refs, datetimes and enums into JSON-friendly values."""
    if isinstance(value, DocumentRef):
        return value.path
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_storable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_storable(v) for v in value]
    return value


def _merge_fields(current: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(current)
    for key, value in changes.items():
        if isinstance(value, ArrayUnion):
            existing = list(merged.get(key) or [])
            for item in to_storable(list(value.values)):
                if item not in existing:
                    existing.append(item)
            merged[key] = existing
        else:
            merged[key] = to_storable(value)
    return merged


@dataclass
class _Write:
    kind: str  # "set" or "create"
    ref: DocumentRef
    data: Dict[str, Any]
    merge: bool = False


class WriteBatch:
    """
    Accumulates writes in memory and applies them in one transaction.

    Operations are applied in the order they were staged; a later write to
    the same document sees the effect of earlier ones.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self._writes: List[_Write] = []

    def __len__(self) -> int:
        return len(self._writes)

    def set(self, ref: DocumentRef, data: Dict[str, Any], merge: bool = False) -> "WriteBatch":
        """Write ``data`` to ``ref``; with ``merge`` only the given fields change."""
        self._writes.append(_Write("set", ref, dict(data), merge))
        return self

    def create(self, ref: DocumentRef, data: Dict[str, Any]) -> "WriteBatch":
        """Insert ``data`` at ``ref`` unless a document already exists there."""
        self._writes.append(_Write("create", ref, dict(data)))
        return self

    @property
    def paths(self) -> List[str]:
        return list(dict.fromkeys(w.ref.path for w in self._writes))

    async def commit(self) -> int:
        """
        Apply all staged writes atomically.

        Returns:
            Number of operations applied

        Raises:
            CommitError: if anything fails; the transaction is rolled back
        """
        paths = self.paths

        try:
            docs: Dict[str, Document] = {}
            if paths:
                result = await self.db.execute(
                    select(Document).where(Document.path.in_(paths))
                )
                docs = {doc.path: doc for doc in result.scalars().all()}

            for write in self._writes:
                doc = docs.get(write.ref.path)

                if write.kind == "create" and doc is not None:
                    continue

                base = doc.data if (doc is not None and write.merge) else {}
                data = _merge_fields(base or {}, write.data)

                if doc is None:
                    doc = Document(
                        path=write.ref.path,
                        collection=write.ref.parent.path,
                        data=data
                    )
                    self.db.add(doc)
                    docs[write.ref.path] = doc
                else:
                    doc.data = data
                    doc.updated_at = utcnow()

            await self.db.commit()

        except Exception as e:
            logger.error(f"Write batch commit failed, rolling back {len(self._writes)} writes: {str(e)}")
            await self.db.rollback()
            raise CommitError(
                "Failed to commit write batch",
                context={
                    "operations": len(self._writes),
                    "documents": len(paths)
                },
                original_exception=e
            )

        logger.info(f"Committed {len(self._writes)} writes across {len(paths)} documents")
        count = len(self._writes)
        self._writes = []
        return count


class DocumentStore:
    """
    Read access and batch creation for the document store.

    The store wraps an ``AsyncSession`` handed in by the caller; it never
    opens sessions of its own.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def collection(self, path: str) -> CollectionRef:
        return CollectionRef(path)

    def document(self, path: str) -> DocumentRef:
        return DocumentRef(path)

    def batch(self) -> WriteBatch:
        return WriteBatch(self.db)

    async def get(self, ref: DocumentRef) -> Optional[Dict[str, Any]]:
        """Return the document body at ``ref`` or ``None``."""
        try:
            result = await self.db.execute(
                select(Document.data).where(Document.path == ref.path)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            raise DocumentStoreError(
                "Failed to read document",
                context={"operation": "get", "path": ref.path},
                original_exception=e
            )

    async def exists(self, ref: DocumentRef) -> bool:
        return await self.get(ref) is not None

    async def list(self, collection: CollectionRef) -> Dict[str, Dict[str, Any]]:
        """Return ``{document id: body}`` for every document in ``collection``."""
        try:
            result = await self.db.execute(
                select(Document.path, Document.data)
                .where(Document.collection == collection.path)
                .order_by(Document.created_at, Document.path)
            )
            return {DocumentRef(path).id: data for path, data in result.all()}
        except Exception as e:
            raise DocumentStoreError(
                "Failed to list collection",
                context={"operation": "list", "path": collection.path},
                original_exception=e
            )
