from typing import List, Optional, Protocol

from google import genai
from google.genai import types
from loguru import logger

from models.lesson_plan_models import GenerationRequest


class GenerationTransport(Protocol):
    """Anything able to send a GenerationRequest to a named model"""

    async def generate(self, request: GenerationRequest, model_id: str) -> Optional[str]:
        ...


class GeminiTransport:
    def __init__(self, api_key: str, client: Optional[genai.Client] = None):
        if not api_key:
            raise ValueError("Gemini API key not found. Please configure it in settings.")
        self.client = client or genai.Client(api_key=api_key)

    def build_contents(self, request: GenerationRequest) -> List[types.Part]:
        """Document part first, then the text prompt."""
        parts: List[types.Part] = []
        if request.binary_part is not None:
            parts.append(types.Part.from_bytes(
                data=request.binary_part.data,
                mime_type=request.binary_part.mime_type,
            ))
        parts.append(types.Part(text=request.prompt))
        return parts

    def build_config(self, request: GenerationRequest) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            system_instruction=request.system_instruction,
            response_mime_type="application/json",
            response_schema=request.response_schema,
            temperature=request.temperature,
        )

    async def generate(self, request: GenerationRequest, model_id: str) -> Optional[str]:
        logger.info(f"Calling Gemini model {model_id}: {request.log_summary()}")
        response = await self.client.aio.models.generate_content(
            model=model_id,
            contents=types.Content(role="user", parts=self.build_contents(request)),
            config=self.build_config(request),
        )
        return response.text
