from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from ..models.document import Document
from .base import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document model. Every query is scoped by owner."""

    def __init__(self, db: Session):
        super().__init__(Document, db)

    def get_by_user_and_id(self, user_id: int, document_id: int) -> Optional[Document]:
        """Get a document by user ID and document ID"""
        return self.db.query(Document).filter(
            Document.id == document_id,
            Document.user_id == user_id
        ).first()

    def get_by_user_id(self, user_id: int) -> List[Document]:
        """Get all documents for a user"""
        return self.db.query(Document).filter(Document.user_id == user_id).all()

    def list_recent_non_empty(self, user_id: int, limit: int) -> List[Document]:
        """Newest documents with non-empty content, newest first"""
        return (
            self.db.query(Document)
            .filter(
                Document.user_id == user_id,
                Document.content.isnot(None),
                Document.content != ""
            )
            .order_by(Document.created_at.desc(), Document.id.desc())
            .limit(limit)
            .all()
        )

    def search(
        self,
        user_id: int,
        offset: int,
        limit: int,
        file_type: Optional[str] = None,
        search: Optional[str] = None
    ) -> Tuple[List[Document], int]:
        """Page through a user's documents, optionally filtered; returns (page, total)"""
        query = self.db.query(Document).filter(Document.user_id == user_id)
        if file_type:
            query = query.filter(Document.file_type == file_type)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Document.title.ilike(pattern),
                Document.content.ilike(pattern)
            ))
        total = query.count()
        documents = (
            query.order_by(Document.created_at.desc(), Document.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return documents, total
