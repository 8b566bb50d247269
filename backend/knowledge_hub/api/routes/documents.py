from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from typing import Optional
from urllib.parse import quote
from ...core.security import get_current_user
from ...models import User
from ...schemas import (
    Document as DocumentSchema,
    DocumentListResponse,
    DocumentUploadResponse,
    SuccessResponse
)
from ...services import DocumentService
from ...config import settings
from ..dependencies import get_document_service

router = APIRouter(prefix="/documents", tags=["documents"])


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an upload without holding more than the size limit plus one byte

    A declared size above the limit is rejected before anything is read; the
    extra byte lets the service reject bodies whose size was not declared.
    """
    DocumentService.ensure_within_size_limit(file.size)
    return await file.read(settings.max_upload_bytes + 1)


def attachment_header(filename: str) -> str:
    """Content-Disposition with an ASCII fallback name and the UTF-8 name (RFC 5987)"""
    fallback = "".join(
        char for char in filename
        if char.isascii() and char.isprintable() and char not in '"\\'
    ).strip() or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get("", response_model=DocumentListResponse)
def list_documents(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    file_type: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """List the current user's documents, newest first"""
    return document_service.list_documents(
        current_user.id,
        page=page,
        limit=limit,
        file_type=file_type,
        search=search
    )


@router.post("/upload", response_model=DocumentUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Upload a document and extract its text"""
    data = await read_upload(file) if file is not None else b""
    document = document_service.upload_document(
        current_user.id,
        filename=file.filename if file is not None else None,
        media_type=file.content_type if file is not None else None,
        data=data,
        title=title
    )
    return {"message": "File uploaded successfully", "document": document}


@router.get("/{document_id}", response_model=DocumentSchema)
def get_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Get a specific document"""
    return document_service.get_document(current_user.id, document_id)


@router.get("/{document_id}/download")
def download_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Download the originally uploaded file"""
    document, data = document_service.read_document_file(current_user.id, document_id)
    return Response(
        content=data,
        media_type=document.file_type,
        headers={"Content-Disposition": attachment_header(document.title)}
    )


@router.delete("/{document_id}", response_model=SuccessResponse)
def delete_document(
    document_id: int,
    current_user: User = Depends(get_current_user),
    document_service: DocumentService = Depends(get_document_service)
):
    """Delete a document and its stored file"""
    document_service.delete_document(current_user.id, document_id)
    return {"success": True}
