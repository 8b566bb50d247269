from typing import List, Optional, Tuple
import math
from sqlalchemy.orm import Session
from ..repositories import DocumentRepository
from ..models import Document
from ..schemas import DocumentListResponse, Pagination
from ..exceptions import NotFoundError, ValidationError
from ..core.events import event_bus, DocumentUploadedEvent, DocumentDeletedEvent
from ..config import settings
from .content_extractor import extract_text, ALLOWED_MEDIA_TYPES
from .storage_service import LocalFileStorage
import logging

logger = logging.getLogger(__name__)

UNSUPPORTED_TYPE_MESSAGE = "File type not supported. Allowed types: TXT, DOC, DOCX, MD, JSON, CSV"


def normalize_media_type(media_type: Optional[str]) -> str:
    """Drop parameters such as charset and lowercase the type"""
    return (media_type or "").split(";")[0].strip().lower()


class DocumentService:
    """Service for document operations. Every lookup is scoped to the owning user."""

    def __init__(self, db: Session, storage: LocalFileStorage):
        self.document_repo = DocumentRepository(db)
        self.storage = storage
        self.db = db

    def list_documents(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        file_type: Optional[str] = None,
        search: Optional[str] = None
    ) -> DocumentListResponse:
        """Page through a user's documents, newest first"""
        logger.debug(f"Listing documents for user {user_id}: page={page}, limit={limit}")
        documents, total = self.document_repo.search(
            user_id,
            offset=(page - 1) * limit,
            limit=limit,
            file_type=file_type,
            search=search
        )
        return DocumentListResponse(
            documents=documents,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit)
            )
        )

    def get_document(self, user_id: int, document_id: int) -> Document:
        """Get a document owned by the user"""
        logger.debug(f"Getting document {document_id} for user {user_id}")
        document = self.document_repo.get_by_user_and_id(user_id, document_id)
        if not document:
            raise NotFoundError("Document", str(document_id))
        return document

    def list_context_documents(self, user_id: int, limit: int) -> List[Document]:
        """Most recently created documents with extracted text, newest first"""
        return self.document_repo.list_recent_non_empty(user_id, limit)

    @staticmethod
    def ensure_within_size_limit(size: Optional[int]) -> None:
        """Reject uploads above the configured maximum; an unknown size passes"""
        if size is not None and size > settings.max_upload_bytes:
            max_mb = settings.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"File size too large. Maximum {max_mb}MB allowed.")

    def upload_document(
        self,
        user_id: int,
        filename: Optional[str],
        media_type: Optional[str],
        data: bytes,
        title: Optional[str] = None
    ) -> Document:
        """
        Validate, store and index an uploaded file

        Text extraction is best-effort and never rejects the upload.

        Raises:
            ValidationError: No file, file too large, or media type not allowed
        """
        if not filename:
            raise ValidationError("No file provided")
        self.ensure_within_size_limit(len(data))
        media_type = normalize_media_type(media_type)
        if media_type not in ALLOWED_MEDIA_TYPES:
            logger.warning(f"Upload rejected for user {user_id}: unsupported type {media_type!r}")
            raise ValidationError(UNSUPPORTED_TYPE_MESSAGE)

        content = extract_text(data, media_type, filename)
        stored_name = self.storage.save(filename, data)

        try:
            document = self.document_repo.create(
                user_id=user_id,
                title=(title or "").strip() or filename,
                content=content,
                file_path=stored_name,
                file_type=media_type,
                file_size=len(data)
            )
            self.document_repo.commit()
            self.db.refresh(document)
        except Exception as e:
            logger.error(f"Error saving uploaded document '{filename}': {e}")
            self.document_repo.rollback()
            self.storage.delete(stored_name)
            raise

        logger.info(f"Document uploaded successfully: {document.id}")
        event_bus.publish(DocumentUploadedEvent(
            document_id=document.id,
            user_id=user_id,
            title=document.title,
            file_type=document.file_type,
            file_size=document.file_size
        ))
        return document

    def read_document_file(self, user_id: int, document_id: int) -> Tuple[Document, bytes]:
        """Owned document together with its stored bytes"""
        document = self.get_document(user_id, document_id)
        if not self.storage.exists(document.file_path):
            logger.error(f"Stored file missing for document {document_id}: {document.file_path}")
            raise NotFoundError("File")
        return document, self.storage.read(document.file_path)

    def delete_document(self, user_id: int, document_id: int) -> None:
        """Delete an owned document; its stored file is removed by the deletion event handler"""
        logger.info(f"Deleting document {document_id} for user {user_id}")

        try:
            document = self.document_repo.get_by_user_and_id(user_id, document_id)
            if not document:
                raise NotFoundError("Document", str(document_id))

            event = DocumentDeletedEvent(
                document_id=document.id,
                user_id=user_id,
                title=document.title,
                file_path=document.file_path
            )
            self.document_repo.delete_instance(document)
            self.document_repo.commit()
        except Exception as e:
            logger.error(f"Error deleting document: {e}")
            self.document_repo.rollback()
            raise

        logger.info(f"Document deleted successfully: {document_id}")
        event_bus.publish(event)
