"""
Request Builder
Validate the lesson form and assemble a single generation request
"""
import base64
import binascii
import json
from typing import Dict, List, Optional, Tuple

from data.catalog import MAX_DOCUMENT_BYTES
from data.prompts.lesson_plan_prompts import (
    SYSTEM_INSTRUCTION, LESSON_PLAN_RESPONSE_SCHEMA, SCHOOL_LEVEL_LABELS,
    DEFAULT_SCHOOL_LEVEL_LABEL, UNKNOWN_GRADE_LABEL, DEFAULT_TECH_APPS,
    DEFAULT_INTEGRATION, LESSON_CONTEXT_HEADER, LESSON_REQUIREMENTS
)
from models.lesson_plan_models import (
    LessonConfig, LessonInput, DocumentUpload, BinaryPart, GenerationRequest
)

TEMPERATURE = 0.5

MISSING_FILE_MESSAGE = "Vui lòng tải lên giáo án"
PROCESSING_FILE_MESSAGE = "Đang xử lý file..."
MISSING_SUBJECT_MESSAGE = "Vui lòng chọn môn học"
INVALID_GRADE_MESSAGE = "Lớp không thuộc cấp học đã chọn"
INVALID_FILE_MESSAGE = "File tải lên không hợp lệ"
FILE_TOO_LARGE_MESSAGE = "File vượt quá dung lượng cho phép (10MB)"


class LessonInputValidationError(Exception):
    """Raised with every field-level problem found in the submitted form"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))


def strip_data_url(payload: str) -> str:
    """Drop a 'data:<mime>;base64,' prefix if present"""
    parts = payload.split(",", 1)
    if len(parts) == 2 and parts[1]:
        return parts[1]
    return payload


def decode_document(document: DocumentUpload) -> bytes:
    return base64.b64decode(strip_data_url(document.data_base64 or ""), validate=True)


def _check_document(document: Optional[DocumentUpload]) -> Tuple[Optional[str], Optional[bytes]]:
    if document is None:
        return MISSING_FILE_MESSAGE, None
    if not document.is_encoded:
        return PROCESSING_FILE_MESSAGE, None
    if not document.mime_type:
        return INVALID_FILE_MESSAGE, None
    try:
        data = decode_document(document)
    except (binascii.Error, ValueError):
        return INVALID_FILE_MESSAGE, None
    if not data:
        return INVALID_FILE_MESSAGE, None
    if len(data) > MAX_DOCUMENT_BYTES:
        return FILE_TOO_LARGE_MESSAGE, None
    return None, data


def validate_lesson_input(lesson_input: LessonInput) -> bytes:
    """
    Check the form before anything is sent to the remote service

    Returns:
        Decoded document bytes

    Raises:
        LessonInputValidationError: listing all failed fields at once
    """
    errors: Dict[str, str] = {}

    file_error, data = _check_document(lesson_input.document)
    if file_error:
        errors["file"] = file_error

    config = lesson_input.config
    if not config.subject.strip():
        errors["subject"] = MISSING_SUBJECT_MESSAGE

    grades = config.grade_options()
    if grades and config.grade not in grades:
        errors["grade"] = INVALID_GRADE_MESSAGE
    elif not grades and config.grade:
        errors["grade"] = INVALID_GRADE_MESSAGE

    if errors:
        raise LessonInputValidationError(errors)
    return data  # type: ignore[return-value]


def school_level_label(level: str) -> str:
    return SCHOOL_LEVEL_LABELS.get(level, DEFAULT_SCHOOL_LEVEL_LABEL)


def build_prompt(config: LessonConfig) -> str:
    """Render every configuration field into the text prompt"""
    resources = json.dumps(config.resources.model_dump(), separators=(",", ":"))
    custom_resource = f", {config.custom_resource}" if config.custom_resource else ""

    lines: List[str] = [
        LESSON_CONTEXT_HEADER,
        f"- Cấp học: {school_level_label(config.school_level)}",
        f"- Lớp: {config.grade or UNKNOWN_GRADE_LABEL}",
        f"- Môn học: {config.subject}",
        f"- Quy mô: {config.class_size}",
        f"- Thời lượng: {config.time_constraint} phút",
        f"- Thiết bị: {resources} {custom_resource}".rstrip(),
        f"- Công nghệ/Ứng dụng mong muốn: {config.tech_apps or DEFAULT_TECH_APPS}",
        f"- Tích hợp liên môn: {config.integration or DEFAULT_INTEGRATION}",
        f"- Mục tiêu phát triển năng lực: {', '.join(config.competencies())}",
    ]
    if config.simulation_topic and config.simulation_topic.strip():
        lines.append(f"- Ý tưởng mô phỏng: {config.simulation_topic.strip()}")

    return "\n".join(lines) + "\n\n" + LESSON_REQUIREMENTS + "\n"


def build_generation_request(lesson_input: LessonInput) -> GenerationRequest:
    """
    Validate the input and assemble the generation request

    Args:
        lesson_input: Lesson configuration and uploaded document

    Returns:
        GenerationRequest with document part, prompt, system instruction and schema
    """
    data = validate_lesson_input(lesson_input)
    document = lesson_input.document

    return GenerationRequest(
        binary_part=BinaryPart(data=data, mime_type=document.mime_type),  # type: ignore[union-attr]
        prompt=build_prompt(lesson_input.config),
        system_instruction=SYSTEM_INSTRUCTION,
        response_schema=LESSON_PLAN_RESPONSE_SCHEMA,
        temperature=TEMPERATURE,
    )
