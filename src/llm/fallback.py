"""
Model Fallback Executor
Try an ordered list of Gemini models until one returns a usable lesson plan
"""
import json
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger
from pydantic import ValidationError

from data.catalog import FALLBACK_MODELS
from llm.base import GenerationTransport
from models.lesson_plan_models import GenerationRequest, LessonPlanResponse

CONTROL_CHARS = re.compile(r"[\u0000-\u001F]+")

RATE_LIMIT_MESSAGE = "429 RESOURCE_EXHAUSTED: Hệ thống đang quá tải, vui lòng thử lại sau hoặc đổi API Key."
ALL_MODELS_FAILED_MESSAGE = "Không thể tạo giáo án sau khi thử tất cả các model."
EMPTY_RESPONSE_MESSAGE = "AI trả về phản hồi rỗng."


class LessonPlanGenerationError(Exception):
    """Generation failed on every model"""

    def __init__(self, message: str, attempts: Optional[List["ModelAttempt"]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class RateLimitExceededError(LessonPlanGenerationError):
    """The last model refused the call because of quota / rate limiting"""


class EmptyResponseError(Exception):
    pass


class ResponseParseError(Exception):
    pass


@dataclass
class ModelAttempt:
    model_id: str
    error: Exception


def build_model_order(preferred: Optional[str], fallback_models: Iterable[str] = FALLBACK_MODELS) -> Tuple[str, ...]:
    """Preferred model first, then the fallback sequence without duplicates"""
    order: List[str] = []
    for model_id in [preferred, *fallback_models]:
        if model_id and model_id not in order:
            order.append(model_id)
    return tuple(order)


def is_rate_limit_error(error: BaseException) -> bool:
    if getattr(error, "code", None) == 429:
        return True
    message = str(error)
    return "429" in message or "RESOURCE_EXHAUSTED" in message


def parse_lesson_plan(text: str) -> LessonPlanResponse:
    """
    Parse the model's JSON text into a LessonPlanResponse

    A payload that fails to parse gets exactly one repair pass that strips
    control characters before it is declared unusable.
    """
    try:
        return LessonPlanResponse.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as first_error:
        logger.warning(f"JSON parse error, retrying without control characters: {first_error}")
        cleaned = CONTROL_CHARS.sub("", text)
        try:
            return LessonPlanResponse.model_validate(json.loads(cleaned))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ResponseParseError(f"Invalid lesson plan JSON: {e}") from e


class ModelFallbackExecutor:
    def __init__(self, transport: GenerationTransport, fallback_models: Sequence[str] = FALLBACK_MODELS):
        self.transport = transport
        self.fallback_models = tuple(fallback_models)

    async def attempt(self, request: GenerationRequest, model_id: str) -> LessonPlanResponse:
        text = await self.transport.generate(request, model_id)
        if not text:
            raise EmptyResponseError(EMPTY_RESPONSE_MESSAGE)
        return parse_lesson_plan(text)

    async def generate(self, request: GenerationRequest, preferred_model: Optional[str] = None) -> LessonPlanResponse:
        """
        Run the request against each model in turn

        Args:
            request: Assembled generation request
            preferred_model: Model chosen by the operator, tried first

        Returns:
            The first successfully parsed LessonPlanResponse

        Raises:
            RateLimitExceededError: if the last failure was a rate limit
            LessonPlanGenerationError: if no model was available at all
            Exception: the last underlying failure otherwise
        """
        attempts: List[ModelAttempt] = []

        for model_id in build_model_order(preferred_model, self.fallback_models):
            logger.info(f"Trying model: {model_id}")
            try:
                plan = await self.attempt(request, model_id)
            except Exception as e:
                logger.error(f"Model {model_id} failed: {e}")
                attempts.append(ModelAttempt(model_id=model_id, error=e))
                continue
            logger.info(f"Model {model_id} produced lesson plan: {plan.summary.topic}")
            return plan

        if not attempts:
            raise LessonPlanGenerationError(ALL_MODELS_FAILED_MESSAGE)

        last_error = attempts[-1].error
        logger.error(f"All {len(attempts)} models failed, last error: {last_error}")
        if is_rate_limit_error(last_error):
            raise RateLimitExceededError(RATE_LIMIT_MESSAGE, attempts) from last_error
        raise last_error
