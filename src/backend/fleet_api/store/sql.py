"""SQL-backed document store.

Documents are rows of the ``documents`` table holding a JSON payload, so the
store stays schema-less. Filters and sorts are pushed down as JSON path
expressions, which SQLAlchemy renders for both PostgreSQL and SQLite.

Each collection operation runs in its own session and transaction.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Sequence

import structlog
from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from fleet_api.core.exceptions import DuplicateKeyError, StoreError
from fleet_api.models.base import Base
from fleet_api.models.document import Document, DocumentKey
from fleet_api.store.base import Collection, DocumentStore, Filter, Record, Sort

logger = structlog.get_logger()


def _json_field(field: str, value: Any = None):
    """JSON path expression for ``field`` typed after the compared value."""
    element = Document.data[field]
    if isinstance(value, bool):
        return element.as_boolean()
    if isinstance(value, (int, float)):
        return element.as_float()
    return element.as_string()


def _conditions(filter: Filter | None) -> list:
    conditions = []
    for field, value in (filter or {}).items():
        column = _json_field(field, value)
        if value is None:
            conditions.append(column.is_(None))
        else:
            conditions.append(column == value)
    return conditions


def _to_record(document: Document) -> Record:
    return {"id": document.id, **document.data}


class SQLCollection(Collection):
    """Collection stored as rows of the ``documents`` table."""

    def __init__(self, name: str, session_factory: async_sessionmaker[AsyncSession], unique_fields: tuple[str, ...]):
        self.name = name
        self._session_factory = session_factory
        self._unique_fields = unique_fields

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            try:
                yield session
            except StoreError:
                raise
            except SQLAlchemyError as e:
                logger.error("Document store operation failed", collection=self.name, error=str(e))
                raise StoreError(f"Document store failure: {e}") from e

    async def find(self, filter: Filter | None = None, sort: Sort | None = None) -> list[Record]:
        query = select(Document).where(Document.collection == self.name, *_conditions(filter))
        for field, direction in sort or ():
            column = _json_field(field)
            query = query.order_by(column.desc() if direction < 0 else column.asc())
        query = query.order_by(Document.created_at, Document.id)

        async with self._session() as session:
            result = await session.execute(query)
            return [_to_record(d) for d in result.scalars().all()]

    async def find_by_id(self, identity: str) -> Record | None:
        async with self._session() as session:
            document = await self._get(session, identity)
            return _to_record(document) if document is not None else None

    async def insert(self, record: Record) -> Record:
        identity = record.get("id") or str(uuid.uuid4())
        data = {k: v for k, v in record.items() if k != "id"}

        async with self._session() as session:
            session.add(Document(id=identity, collection=self.name, data=data))
            try:
                await session.flush()
                session.add_all(self._keys(identity, data, self._unique_fields))
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise await self._duplicate_error(session, data, identity) from e

        return {"id": identity, **data}

    async def update_by_id(self, identity: str, patch: Mapping[str, Any]) -> Record | None:
        changes = {k: v for k, v in patch.items() if k != "id"}

        async with self._session() as session:
            document = await self._get(session, identity)
            if document is None:
                return None

            previous = document.data
            data = {**previous, **changes}
            # Only index entries whose value actually changes are rewritten
            moved = tuple(
                f for f in self._unique_fields
                if f in changes and previous.get(f) != changes[f]
            )
            try:
                if moved:
                    await session.execute(
                        delete(DocumentKey).where(
                            DocumentKey.document_id == identity,
                            DocumentKey.field.in_(moved),
                        )
                    )
                    session.add_all(self._keys(identity, data, moved))
                document.data = data
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise await self._duplicate_error(session, changes, identity) from e

        return {"id": identity, **data}

    async def delete_by_id(self, identity: str) -> Record | None:
        async with self._session() as session:
            document = await self._get(session, identity)
            if document is None:
                return None
            record = _to_record(document)
            await session.execute(delete(DocumentKey).where(DocumentKey.document_id == identity))
            await session.delete(document)
            await session.commit()
            return record

    async def count(self, filter: Filter | None = None) -> int:
        query = (
            select(func.count())
            .select_from(Document)
            .where(Document.collection == self.name, *_conditions(filter))
        )
        async with self._session() as session:
            result = await session.execute(query)
            return result.scalar() or 0

    async def _get(self, session: AsyncSession, identity: str) -> Document | None:
        document = await session.get(Document, identity)
        if document is None or document.collection != self.name:
            return None
        return document

    def _keys(self, identity: str, data: Record, fields: Sequence[str]) -> list[DocumentKey]:
        return [
            DocumentKey(
                collection=self.name,
                field=field,
                value=str(data[field]),
                document_id=identity,
            )
            for field in fields
            if data.get(field) is not None
        ]

    async def _duplicate_error(self, session: AsyncSession, data: Record, identity: str) -> StoreError:
        """Work out which unique value collided after a failed write."""
        for field in self._unique_fields:
            value = data.get(field)
            if value is None:
                continue
            result = await session.execute(
                select(DocumentKey.id).where(
                    DocumentKey.collection == self.name,
                    DocumentKey.field == field,
                    DocumentKey.value == str(value),
                    DocumentKey.document_id != identity,
                )
            )
            if result.first() is not None:
                return DuplicateKeyError(self.name, field, value)
        return StoreError(f"Integrity violation writing {self.name}/{identity}")


class SQLDocumentStore(DocumentStore):
    """DocumentStore on an async SQLAlchemy engine."""

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        unique_fields: Mapping[str, Sequence[str]] | None = None,
    ):
        super().__init__(unique_fields)
        self.engine = engine
        self.session_factory = session_factory or async_sessionmaker(engine, expire_on_commit=False)

    def collection(self, name: str) -> SQLCollection:
        return SQLCollection(name, self.session_factory, self.unique_fields.get(name, ()))

    async def create_schema(self) -> None:
        """Create the document tables if they do not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> None:
        try:
            async with self.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreError(f"Document store unreachable: {e}") from e

    async def close(self) -> None:
        await self.engine.dispose()
