from sqlalchemy import Column, String, DateTime, Index
from models.base import Base, JSONDocument, utcnow


class Document(Base):
    """
    One document of the shared document store.

    Design:
    - Documents are addressed by slash-separated paths, e.g.
      ``artists/<id>`` or ``artists/<id>/tracks/<id>``
    - ``collection`` is the parent path (``artists/<id>/tracks``) so that
      sub-collections can be listed without LIKE scans
    - ``data`` holds the document body; references to other documents are
      stored as their path strings
    """
    __tablename__ = "documents"

    path = Column(String(512), primary_key=True)
    collection = Column(String(512), nullable=False, index=True)

    data = Column(JSONDocument, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_document_collection_created", "collection", "created_at"),
    )
