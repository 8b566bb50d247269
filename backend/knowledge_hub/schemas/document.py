from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime


class DocumentSummary(BaseModel):
    id: int
    title: str
    file_type: str
    file_size: int
    created_at: datetime

    class Config:
        from_attributes = True


class Document(DocumentSummary):
    user_id: int
    content: Optional[str] = None
    updated_at: Optional[datetime] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class DocumentListResponse(BaseModel):
    documents: List[Document]
    pagination: Pagination


class DocumentUploadResponse(BaseModel):
    message: str
    document: DocumentSummary
