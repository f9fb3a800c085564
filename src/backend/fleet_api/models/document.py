"""Tables backing the SQL document store.

Every entity is kept as one schema-less JSON document in ``documents``.
``document_keys`` holds one row per unique-indexed field value so that
uniqueness is enforced by the database, not by a read-then-write check.
There are no foreign keys between documents.
"""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from fleet_api.models.base import Base, TimestampMixin


class Document(Base, TimestampMixin):
    """A single JSON document in a named collection."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Document {self.collection}/{self.id}>"


class DocumentKey(Base):
    """Unique index entry: (collection, field, value) -> document."""

    __tablename__ = "document_keys"
    __table_args__ = (
        UniqueConstraint("collection", "field", "value", name="uq_document_keys_value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), nullable=False)
    field: Mapped[str] = mapped_column(String(64), nullable=False)
    value: Mapped[str] = mapped_column(String(512), nullable=False)
    document_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
