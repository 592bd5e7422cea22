"""
Shared dependencies for API routes
"""
from pathlib import Path
from typing import Annotated, Callable, Tuple

from fastapi import Depends

from api import app_context
from data.catalog import FALLBACK_MODELS
from llm.base import GeminiTransport, GenerationTransport
from models.session_store import DocumentStore, ResultStore
from utils.settings_store import SettingsStore

TransportFactory = Callable[[str], GenerationTransport]


def get_settings_store() -> SettingsStore:
    return app_context.settings_store


def get_document_store() -> DocumentStore:
    return app_context.document_store


def get_result_store() -> ResultStore:
    return app_context.result_store


def get_output_dir() -> Path:
    return app_context.OUTPUT_DIR


def gemini_transport(api_key: str) -> GenerationTransport:
    """Reuse the Gemini client for the configured key, replacing it when the key changes"""
    transport = app_context.gemini_transports.get(api_key)
    if transport is None:
        transport = GeminiTransport(api_key)
        app_context.gemini_transports.clear()
        app_context.gemini_transports[api_key] = transport
    return transport


def get_transport_factory() -> TransportFactory:
    return gemini_transport


def get_fallback_models() -> Tuple[str, ...]:
    return FALLBACK_MODELS


# Dependency shortcuts
Settings = Annotated[SettingsStore, Depends(get_settings_store)]
Documents = Annotated[DocumentStore, Depends(get_document_store)]
Results = Annotated[ResultStore, Depends(get_result_store)]
OutputDir = Annotated[Path, Depends(get_output_dir)]
Transport = Annotated[TransportFactory, Depends(get_transport_factory)]
FallbackModels = Annotated[Tuple[str, ...], Depends(get_fallback_models)]
