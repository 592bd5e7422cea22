"""
Settings routes
Read and update the Gemini credential and preferred model
"""
from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel

from api.dependencies import Settings
from data.catalog import MODEL_CATALOG
from utils.settings_store import AppSettings, SettingsUpdate

router = APIRouter(prefix="/api/settings", tags=["Settings"])


class SettingsResponse(BaseModel):
    model: str
    api_key_masked: str
    needs_configuration: bool


def to_response(settings: AppSettings) -> SettingsResponse:
    return SettingsResponse(
        model=settings.model,
        api_key_masked=settings.masked_api_key(),
        needs_configuration=settings.needs_configuration
    )


@router.get("", response_model=SettingsResponse)
async def get_settings(store: Settings):
    """Current settings; needs_configuration tells the client to prompt for a key"""
    return to_response(store.settings)


@router.put("", response_model=SettingsResponse)
async def update_settings(update: SettingsUpdate, store: Settings):
    """
    Save the API key and preferred model

    - **api_key**: Google Gemini API key (required)
    - **model**: Preferred model identifier, tried first on generation
    """
    if update.model not in {m["id"] for m in MODEL_CATALOG}:
        logger.warning(f"Saving model outside the catalog: {update.model}")
    return to_response(store.save(update))


@router.get("/models")
async def list_models():
    """Known Gemini models, in fallback order"""
    return {"models": MODEL_CATALOG}
