"""
Lesson plan routes
Handles generation, result retrieval/reset and file exports
"""
from typing import Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse
from loguru import logger
from pydantic import BaseModel

from api.dependencies import Settings, Documents, Results, OutputDir, Transport, FallbackModels
from data.catalog import (
    SUBJECT_OPTIONS, COMPETENCY_OPTIONS, CLASS_SIZE_OPTIONS, TIME_OPTIONS, MATH_RENDER_OPTIONS
)
from data.prompts.lesson_plan_prompts import SCHOOL_LEVEL_LABELS
from llm.fallback import ModelFallbackExecutor, RateLimitExceededError
from models.lesson_plan_models import (
    GRADE_OPTIONS, DocumentUpload, LessonConfig, LessonInput, LessonPlanResponse
)
from utils.basetools.export_tools import (
    WORD_MEDIA_TYPE, HTML_MEDIA_TYPE, export_to_word, export_simulation, remove_exports,
    word_export_filename, simulation_export_filename
)
from utils.request_builder import LessonInputValidationError, build_generation_request

router = APIRouter(prefix="/api/lesson-plans", tags=["Lesson Plans"])

API_KEY_REQUIRED_MESSAGE = "Lấy API key để sử dụng app"


class GenerateLessonPlanRequest(BaseModel):
    config: LessonConfig
    document_id: Optional[str] = None
    document: Optional[DocumentUpload] = None


class LessonPlanResult(BaseModel):
    result_id: str
    plan: LessonPlanResponse


def get_plan_or_404(results, result_id: str) -> LessonPlanResponse:
    plan = results.get(result_id)
    if not plan:
        raise HTTPException(status_code=404, detail=f"Lesson plan {result_id} not found")
    return plan


@router.get("/options")
async def get_form_options():
    """Option lists for the lesson configuration form"""
    return {
        "school_levels": [{"id": k, "label": v} for k, v in SCHOOL_LEVEL_LABELS.items()],
        "grades": GRADE_OPTIONS,
        "subjects": SUBJECT_OPTIONS,
        "competencies": COMPETENCY_OPTIONS,
        "class_sizes": CLASS_SIZE_OPTIONS,
        "time_options": TIME_OPTIONS,
        "math_rendering": MATH_RENDER_OPTIONS
    }


@router.post("/generate")
async def generate_lesson_plan(
    body: GenerateLessonPlanRequest,
    settings_store: Settings,
    documents: Documents,
    results: Results,
    transport_factory: Transport,
    fallback_models: FallbackModels,
):
    """
    Upgrade an uploaded lesson plan

    - **config**: Lesson configuration (school level, grade, subject, ...)
    - **document_id**: ID returned by the upload endpoint, or
    - **document**: Inline document with base64 payload

    Returns: result_id and the generated LessonPlanResponse
    """
    document = body.document
    if body.document_id:
        stored = documents.get(body.document_id)
        if not stored:
            raise HTTPException(status_code=404, detail=f"Document {body.document_id} not found")
        document = stored.to_upload()

    try:
        request = build_generation_request(LessonInput(config=body.config, document=document))
    except LessonInputValidationError as e:
        logger.warning(f"Lesson input rejected: {e.errors}")
        raise HTTPException(status_code=422, detail={"errors": e.errors})

    settings = settings_store.settings
    if settings.needs_configuration:
        raise HTTPException(status_code=428, detail=API_KEY_REQUIRED_MESSAGE)

    executor = ModelFallbackExecutor(transport_factory(settings.api_key), fallback_models)
    try:
        plan = await executor.generate(request, settings.model)
    except RateLimitExceededError as e:
        raise HTTPException(status_code=429, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating lesson plan: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))

    result_id = results.add(plan)
    logger.info(f"Lesson plan stored: {result_id}")
    return LessonPlanResult(result_id=result_id, plan=plan).model_dump(by_alias=True)


@router.get("/{result_id}")
async def get_lesson_plan(result_id: str, results: Results):
    """Fetch a generated lesson plan"""
    plan = get_plan_or_404(results, result_id)
    return LessonPlanResult(result_id=result_id, plan=plan).model_dump(by_alias=True)


@router.delete("/{result_id}")
async def reset_lesson_plan(result_id: str, results: Results, output_dir: OutputDir):
    """Discard a generated lesson plan and its exported files"""
    if not results.discard(result_id):
        raise HTTPException(status_code=404, detail=f"Lesson plan {result_id} not found")
    if remove_exports(output_dir / result_id):
        logger.info(f"Exports removed for lesson plan {result_id}")
    return {"deleted": result_id}


@router.get("/{result_id}/export/word")
async def export_word(result_id: str, results: Results, output_dir: OutputDir):
    """Download the improvement appendix as a Word-compatible .doc"""
    plan = get_plan_or_404(results, result_id)
    file_path = export_to_word(plan, output_dir / result_id)
    logger.info(f"Word export written: {file_path}")
    return FileResponse(path=str(file_path), filename=word_export_filename(plan), media_type=WORD_MEDIA_TYPE)


@router.get("/{result_id}/export/simulation")
async def export_simulation_html(result_id: str, results: Results, output_dir: OutputDir):
    """Download the simulation as a standalone .html"""
    plan = get_plan_or_404(results, result_id)
    if not plan.simulation:
        raise HTTPException(status_code=404, detail="This lesson plan has no simulation")
    file_path = export_simulation(plan.simulation, output_dir / result_id)
    logger.info(f"Simulation export written: {file_path}")
    return FileResponse(
        path=str(file_path),
        filename=simulation_export_filename(plan.simulation),
        media_type=HTML_MEDIA_TYPE
    )
