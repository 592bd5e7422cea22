"""
Document upload routes
Handles lesson plan upload and background encoding
"""
from pathlib import Path

from fastapi import APIRouter, BackgroundTasks, File, HTTPException, UploadFile
from loguru import logger

from api.dependencies import Documents
from data.catalog import ACCEPTED_MIME_TYPES, MAX_DOCUMENT_BYTES

router = APIRouter(prefix="/api/documents", tags=["Documents"])


def resolve_mime_type(filename: str) -> str:
    """Media type from the extension; PDF and images only"""
    suffix = Path(filename).suffix.lower()
    if suffix not in ACCEPTED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Only PDF, PNG and JPG files are supported")
    return ACCEPTED_MIME_TYPES[suffix]


@router.post("")
async def upload_document(
    background_tasks: BackgroundTasks,
    documents: Documents,
    file: UploadFile = File(...),
):
    """
    Upload a lesson plan file (PDF or image, up to 10MB)

    Encoding runs in the background; poll the status endpoint until it is 'ready'.
    """
    filename = file.filename or ""
    mime_type = resolve_mime_type(filename)

    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(data) > MAX_DOCUMENT_BYTES:
        raise HTTPException(status_code=413, detail="File exceeds the 10MB limit")

    document = documents.register(filename, mime_type, len(data))
    background_tasks.add_task(documents.encode, document.document_id, data)
    logger.info(f"Document uploaded: {filename} ({len(data)} bytes) -> {document.document_id}")

    return {
        "document_id": document.document_id,
        "file_name": document.file_name,
        "mime_type": document.mime_type,
        "size": document.size,
        "status": document.status
    }


@router.get("/{document_id}")
async def get_document_status(document_id: str, documents: Documents):
    """Encoding status of an uploaded document"""
    document = documents.get(document_id)
    if not document:
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    return {
        "document_id": document.document_id,
        "file_name": document.file_name,
        "mime_type": document.mime_type,
        "size": document.size,
        "status": document.status
    }


@router.delete("/{document_id}")
async def delete_document(document_id: str, documents: Documents):
    """Forget an uploaded document"""
    if not documents.delete(document_id):
        raise HTTPException(status_code=404, detail=f"Document {document_id} not found")
    return {"deleted": document_id}
