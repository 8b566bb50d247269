import asyncio
import io
import json
from urllib.parse import quote

import pytest

from docx import Document as DocxDocument
from fastapi import status

from conftest import upload
from knowledge_hub.api.routes.documents import read_upload
from knowledge_hub.exceptions import ValidationError
from knowledge_hub.models import Document
from knowledge_hub.services import get_file_storage

DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def make_docx(*paragraphs):
    document = DocxDocument()
    for paragraph in paragraphs:
        document.add_paragraph(paragraph)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_upload_text_document(client, auth_headers):
    response = upload(client, auth_headers, title="Q3 notes")
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["message"] == "File uploaded successfully"
    assert body["document"]["title"] == "Q3 notes"
    assert body["document"]["file_type"] == "text/plain"
    assert body["document"]["file_size"] == len(b"Quarterly revenue grew by 12%.")

    document = client.get(f"/api/documents/{body['document']['id']}", headers=auth_headers).json()
    assert document["content"] == "Quarterly revenue grew by 12%."


def test_upload_title_defaults_to_filename(client, auth_headers):
    response = upload(client, auth_headers, filename="readme.md", media_type="text/markdown")
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["document"]["title"] == "readme.md"


def test_upload_strips_media_type_parameters(client, auth_headers):
    response = upload(client, auth_headers, media_type="text/plain; charset=utf-8")
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["document"]["file_type"] == "text/plain"


def test_upload_json_is_pretty_printed(client, auth_headers):
    response = upload(
        client,
        auth_headers,
        filename="data.json",
        data=b'{"a":1,"b":[1,2]}',
        media_type="application/json"
    )
    document_id = response.json()["document"]["id"]
    content = client.get(f"/api/documents/{document_id}", headers=auth_headers).json()["content"]
    assert content == json.dumps({"a": 1, "b": [1, 2]}, indent=2)


def test_upload_docx_extracts_paragraphs(client, auth_headers):
    response = upload(
        client,
        auth_headers,
        filename="report.docx",
        data=make_docx("First paragraph", "Second paragraph"),
        media_type=DOCX_TYPE
    )
    assert response.status_code == status.HTTP_201_CREATED
    document_id = response.json()["document"]["id"]
    content = client.get(f"/api/documents/{document_id}", headers=auth_headers).json()["content"]
    assert "First paragraph\nSecond paragraph" in content


def test_upload_corrupt_docx_is_accepted_with_placeholder(client, auth_headers):
    response = upload(
        client,
        auth_headers,
        filename="broken.docx",
        data=b"this is not a zip archive",
        media_type=DOCX_TYPE
    )
    assert response.status_code == status.HTTP_201_CREATED
    document_id = response.json()["document"]["id"]
    content = client.get(f"/api/documents/{document_id}", headers=auth_headers).json()["content"]
    assert content.startswith("[Error extracting content from broken.docx:")


def test_upload_legacy_doc_stores_placeholder(client, auth_headers):
    response = upload(
        client,
        auth_headers,
        filename="old.doc",
        data=b"\xd0\xcf\x11\xe0",
        media_type="application/msword"
    )
    assert response.status_code == status.HTTP_201_CREATED
    document_id = response.json()["document"]["id"]
    content = client.get(f"/api/documents/{document_id}", headers=auth_headers).json()["content"]
    assert content.startswith("[DOC file - content extraction not supported")


def test_upload_unsupported_type(client, auth_headers):
    response = upload(client, auth_headers, filename="image.png", data=b"\x89PNG", media_type="image/png")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {
        "error": "File type not supported. Allowed types: TXT, DOC, DOCX, MD, JSON, CSV"
    }


def test_upload_too_large(client, auth_headers):
    data = b"a" * (10 * 1024 * 1024 + 1)
    response = upload(client, auth_headers, data=data)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "File size too large. Maximum 10MB allowed."}


class RecordingUpload:
    """UploadFile stand-in that records how many bytes were asked for"""

    def __init__(self, size):
        self.size = size
        self.reads = []

    async def read(self, size=-1):
        self.reads.append(size)
        return b"a" * size


def test_declared_oversize_upload_is_rejected_before_reading():
    upload_file = RecordingUpload(size=50 * 1024 * 1024)

    with pytest.raises(ValidationError) as exc_info:
        asyncio.run(read_upload(upload_file))

    assert exc_info.value.detail == "File size too large. Maximum 10MB allowed."
    assert upload_file.reads == []


def test_upload_read_is_capped_when_size_is_unknown():
    upload_file = RecordingUpload(size=None)

    data = asyncio.run(read_upload(upload_file))

    # One byte past the limit is enough for the size check to reject the body
    assert upload_file.reads == [10 * 1024 * 1024 + 1]
    assert len(data) == 10 * 1024 * 1024 + 1


def test_upload_without_file(client, auth_headers):
    response = client.post("/api/documents/upload", data={"title": "nothing"}, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "No file provided"}


def test_list_documents_pagination(client, auth_headers):
    for index in range(5):
        upload(client, auth_headers, filename=f"note-{index}.txt", data=f"note {index}".encode())

    response = client.get("/api/documents?page=2&limit=2", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "pages": 3}
    # Newest first: page 2 holds the third and second most recent uploads
    assert [document["title"] for document in body["documents"]] == ["note-2.txt", "note-1.txt"]


def test_list_documents_filters(client, auth_headers):
    upload(client, auth_headers, filename="budget.txt", data=b"budget for marketing")
    upload(client, auth_headers, filename="plan.md", data=b"launch plan", media_type="text/markdown")

    by_type = client.get("/api/documents?file_type=text/markdown", headers=auth_headers).json()
    assert [document["title"] for document in by_type["documents"]] == ["plan.md"]

    by_search = client.get("/api/documents?search=marketing", headers=auth_headers).json()
    assert [document["title"] for document in by_search["documents"]] == ["budget.txt"]
    assert by_search["pagination"]["total"] == 1


def test_list_documents_rejects_bad_paging(client, auth_headers):
    response = client.get("/api/documents?limit=0", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    response = client.get("/api/documents?limit=101", headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_documents_are_private(client, auth_headers, other_auth_headers):
    document_id = upload(client, auth_headers).json()["document"]["id"]

    assert client.get("/api/documents", headers=other_auth_headers).json()["pagination"]["total"] == 0
    response = client.get(f"/api/documents/{document_id}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Document not found"}
    response = client.delete(f"/api/documents/{document_id}", headers=other_auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert client.get(f"/api/documents/{document_id}", headers=auth_headers).status_code == status.HTTP_200_OK


def test_download_document(client, auth_headers):
    document_id = upload(client, auth_headers, title="notes.txt").json()["document"]["id"]
    response = client.get(f"/api/documents/{document_id}/download", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.content == b"Quarterly revenue grew by 12%."
    assert response.headers["content-type"].startswith("text/plain")
    assert 'filename="notes.txt"' in response.headers["content-disposition"]


def test_download_document_missing_file(client, db, auth_headers):
    document_id = upload(client, auth_headers).json()["document"]["id"]
    get_file_storage().delete(db.get(Document, document_id).file_path)

    response = client.get(f"/api/documents/{document_id}/download", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "File not found"}


def test_delete_document_removes_stored_file(client, db, auth_headers):
    document_id = upload(client, auth_headers).json()["document"]["id"]
    stored_name = db.get(Document, document_id).file_path
    storage = get_file_storage()
    assert storage.exists(stored_name)

    response = client.delete(f"/api/documents/{document_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}
    assert not storage.exists(stored_name)
    assert client.get(f"/api/documents/{document_id}", headers=auth_headers).status_code == status.HTTP_404_NOT_FOUND


def test_download_document_with_non_ascii_title(client, auth_headers):
    title = '报告 "Q3" notes.txt'
    document_id = upload(client, auth_headers, title=title).json()["document"]["id"]

    response = client.get(f"/api/documents/{document_id}/download", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.content == b"Quarterly revenue grew by 12%."
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="Q3 notes.txt";')
    assert f"filename*=UTF-8''{quote(title, safe='')}" in disposition
