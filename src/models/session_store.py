"""
In-memory session storage for uploaded documents and generated lesson plans
"""
import asyncio
import base64
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from loguru import logger

from models.lesson_plan_models import DocumentUpload, LessonPlanResponse


@dataclass
class StoredDocument:
    document_id: str
    file_name: str
    mime_type: str
    size: int
    data_base64: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status(self) -> str:
        return "ready" if self.data_base64 else "processing"

    def to_upload(self) -> DocumentUpload:
        return DocumentUpload(
            file_name=self.file_name,
            mime_type=self.mime_type,
            data_base64=self.data_base64
        )


class DocumentStore:
    def __init__(self):
        self._documents: Dict[str, StoredDocument] = {}

    def register(self, file_name: str, mime_type: str, size: int) -> StoredDocument:
        """Create a record in 'processing' state"""
        document = StoredDocument(
            document_id=str(uuid.uuid4()),
            file_name=file_name,
            mime_type=mime_type,
            size=size
        )
        self._documents[document.document_id] = document
        return document

    async def encode(self, document_id: str, data: bytes) -> None:
        """Base64-encode the uploaded bytes off the event loop"""
        document = self._documents.get(document_id)
        if document is None:
            logger.warning(f"Document {document_id} removed before encoding finished")
            return
        encoded = await asyncio.to_thread(base64.b64encode, data)
        document.data_base64 = encoded.decode("ascii")
        logger.info(f"Document encoded: {document.file_name} ({document.size} bytes)")

    def get(self, document_id: str) -> Optional[StoredDocument]:
        return self._documents.get(document_id)

    def delete(self, document_id: str) -> bool:
        return self._documents.pop(document_id, None) is not None


class ResultStore:
    def __init__(self):
        self._results: Dict[str, LessonPlanResponse] = {}

    def add(self, plan: LessonPlanResponse) -> str:
        result_id = str(uuid.uuid4())
        self._results[result_id] = plan
        return result_id

    def get(self, result_id: str) -> Optional[LessonPlanResponse]:
        return self._results.get(result_id)

    def discard(self, result_id: str) -> bool:
        return self._results.pop(result_id, None) is not None
