"""
Model request orchestration: prompt selection, candidate-model fallback and
response normalization for sketch-to-code tasks.
"""

import asyncio
import re
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from napkin2web.config import Settings
from napkin2web.errors import (
    ClientInputError,
    ContentRejectedError,
    Napkin2WebError,
    ProviderExhaustedError,
    ProviderTransientError,
    is_rate_limit_error,
)
from napkin2web.models import (
    ConvertRequest,
    ConvertResponse,
    GenerationTask,
    ImagePayload,
    ModelAttempt,
    TaskKind,
    TaskOutcome,
)
from napkin2web.pipeline.prompts import (
    ANALYZE_PROMPT,
    CLASSIFICATION_PROMPT,
    NOT_SKETCH_LABEL,
    SKETCH_LABEL,
    build_conversion_prompt,
    build_edit_prompt,
)
from napkin2web.utils.llm_logger import LoggedLLM, get_logger


REJECTION_MESSAGE = "This is not a UI sketch. Please upload a hand-drawn interface."

CODE_FENCE_PATTERN = re.compile(
    r"```(?:(?:html|typescript|tsx|ts|javascript|jsx|js|nextjs)\b)?",
    re.IGNORECASE,
)


def create_chat_model(settings: Settings, model_name: str, session_id: Optional[str] = None) -> LoggedLLM:
    """
    Create a chat model for one candidate model name.

    Args:
        settings: Service settings (provider, key, sampling options).
        model_name: Candidate model identifier.
        session_id: Optional session ID for log files.

    Returns:
        LoggedLLM wrapper around the provider's LangChain chat model.
    """
    api_key = settings.require_api_key()

    # One provider retry at most; falling back to the next candidate is the retry policy.
    if settings.provider == "gemini":
        llm = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=settings.temperature,
            max_output_tokens=settings.max_tokens,
            max_retries=1,
        )
    elif settings.provider == "openai":
        llm = ChatOpenAI(
            model=model_name,
            api_key=api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            max_retries=1,
        )
    elif settings.provider == "anthropic":
        llm = ChatAnthropic(
            model=model_name,
            api_key=api_key,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            max_retries=1,
        )
    else:
        raise ValueError(f"Unsupported provider: {settings.provider}")

    return LoggedLLM(
        llm_instance=llm,
        component="orchestrator",
        provider=settings.provider,
        model=model_name,
        session_id=session_id,
    )


class ResponseParser:
    """Turns chat model responses into plain text or clean code."""

    @staticmethod
    def response_text(response: Any) -> str:
        """
        Extract the text of a chat model response.

        Handles both plain string content and lists of content parts.
        """
        content = getattr(response, "content", response)
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            chunks = []
            for part in content:
                if isinstance(part, str):
                    chunks.append(part)
                elif isinstance(part, dict) and part.get("type") == "text":
                    chunks.append(part.get("text", ""))
            return "".join(chunks)
        return str(content)

    @staticmethod
    def strip_code_fences(text: str) -> str:
        """
        Remove markdown code fences (bare or language-tagged) and surrounding
        whitespace from generated code.
        """
        return CODE_FENCE_PATTERN.sub("", text).strip()


def build_image_part(image: ImagePayload, provider: str) -> dict:
    """Content part carrying an image in the provider's format."""
    if provider == "anthropic":
        return {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": image.media_type,
                "data": image.data,
            },
        }
    return {"type": "image_url", "image_url": {"url": image.to_data_uri()}}


def validate_task(task: GenerationTask):
    """
    Check that a task carries the fields its kind needs.

    Raises:
        ClientInputError: A required field is missing.
    """
    if task.kind in (TaskKind.CLASSIFY, TaskKind.ANALYZE) and not task.has_image:
        raise ClientInputError("Image required")
    if task.kind == TaskKind.CONVERT and not task.has_image and not task.ui_description:
        raise ClientInputError("Image or uiDescription required")
    if task.kind == TaskKind.EDIT:
        if not task.current_code or not task.current_code.strip():
            raise ClientInputError("currentCode required")
        if not task.instruction or not task.instruction.strip():
            raise ClientInputError("instruction required")


ModelFactory = Callable[[Settings, str, Optional[str]], Any]


class ModelOrchestrator:
    """
    Runs generation tasks against an ordered list of candidate models.

    Each candidate gets one attempt. For tasks with an image, the attempt
    starts with a sketch-classification call on the same model; a negative
    verdict fails the whole task at once. Any other error moves on to the next
    candidate, after a fixed backoff when the error signals rate limiting.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        model_factory: Optional[ModelFactory] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
        session_id: Optional[str] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Fixed settings. If None, settings are read from the
                environment on every task.
            model_factory: Builds a chat model for (settings, model_name,
                session_id). Defaults to create_chat_model.
            sleep: Coroutine used for the rate-limit backoff.
            session_id: Optional session ID attached to LLM logs.
        """
        self.settings = settings
        self.model_factory = model_factory or create_chat_model
        self.sleep = sleep or asyncio.sleep
        self.session_id = session_id
        self.parser = ResponseParser()
        self.logger = get_logger()

    def resolve_settings(self) -> Settings:
        """Settings for the current request, with the API key checked."""
        settings = self.settings or Settings.from_env()
        settings.require_api_key()
        return settings

    async def run(self, task: GenerationTask) -> TaskOutcome:
        """
        Run a task and fold every failure into a TaskOutcome.

        Args:
            task: GenerationTask to run.

        Returns:
            TaskOutcome with the text on success or the error otherwise.
        """
        attempts: List[ModelAttempt] = []
        try:
            text, model_name = await self.execute(task, attempts)
        except Napkin2WebError as e:
            return TaskOutcome(
                success=False,
                error=e.message,
                error_kind=e.kind,
                status_code=e.status_code,
                attempts=attempts,
            )

        return TaskOutcome(success=True, text=text, model_name=model_name, attempts=attempts)

    async def process(self, request: ConvertRequest) -> Tuple[int, ConvertResponse]:
        """
        Handle one ``/api/convert`` request body.

        Returns:
            Tuple of (HTTP status code, ConvertResponse).
        """
        try:
            self.resolve_settings()
            task = request.to_task()
        except Napkin2WebError as e:
            return e.status_code, ConvertResponse(success=False, error=e.message)

        outcome = await self.run(task)
        return outcome.status_code, ConvertResponse.from_outcome(task.kind, outcome)

    async def execute(
        self,
        task: GenerationTask,
        attempts: Optional[List[ModelAttempt]] = None,
    ) -> Tuple[str, str]:
        """
        Run a task, raising on failure.

        Args:
            task: GenerationTask to run.
            attempts: Optional list that receives one ModelAttempt per try.

        Returns:
            Tuple of (result text, model name that produced it).

        Raises:
            ConfigurationError: No API key configured.
            ClientInputError: Task is missing required fields.
            ContentRejectedError: Image is not a UI sketch.
            ProviderExhaustedError: Every candidate failed.
        """
        if attempts is None:
            attempts = []

        settings = self.resolve_settings()
        validate_task(task)

        candidates = settings.candidate_models
        self.logger.log_event(
            "orchestrator",
            f"Starting {task.kind.value} request for framework: {task.framework.value}",
            self.session_id,
        )

        last_error: Optional[ProviderTransientError] = None
        for index, model_name in enumerate(candidates):
            try:
                llm = self.model_factory(settings, model_name, self.session_id)
                text = await self._attempt(llm, task, settings.provider)
            except ContentRejectedError as e:
                attempts.append(ModelAttempt(model_name=model_name, success=False, error=e.message))
                self.logger.log_event("orchestrator", f"{model_name} rejected the image", self.session_id)
                raise
            except ClientInputError:
                raise
            except Exception as e:
                rate_limited = is_rate_limit_error(e)
                message = str(e) or type(e).__name__
                attempts.append(ModelAttempt(
                    model_name=model_name,
                    success=False,
                    error=message,
                    rate_limited=rate_limited,
                ))
                last_error = ProviderTransientError(message, model_name=model_name, rate_limited=rate_limited)
                self.logger.log_event("orchestrator", f"ERROR with model {model_name}: {message}", self.session_id)

                if rate_limited and index < len(candidates) - 1:
                    self.logger.log_event(
                        "orchestrator",
                        f"Rate limited, waiting {settings.rate_limit_backoff:.0f}s before next model",
                        self.session_id,
                    )
                    await self.sleep(settings.rate_limit_backoff)
                continue

            attempts.append(ModelAttempt(model_name=model_name, success=True, text=text))
            return text, model_name

        raise ProviderExhaustedError(last_error.message if last_error else "All models failed")

    async def _attempt(self, llm: Any, task: GenerationTask, provider: str) -> str:
        """One candidate's try at a task, classification included."""
        if task.has_image:
            await self._ensure_sketch(llm, task.image, provider)
            if task.kind == TaskKind.CLASSIFY:
                return SKETCH_LABEL

        if task.kind == TaskKind.ANALYZE:
            content = [
                build_image_part(task.image, provider),
                {"type": "text", "text": ANALYZE_PROMPT},
            ]
            response = await llm.ainvoke([HumanMessage(content=content)])
            text = self.parser.response_text(response)
            if not text.strip():
                raise ValueError("Model returned an empty description")
            return text

        if task.kind == TaskKind.CONVERT:
            content = [{"type": "text", "text": build_conversion_prompt(task.framework, task.ui_description)}]
            if task.has_image:
                content.insert(0, build_image_part(task.image, provider))
            response = await llm.ainvoke([HumanMessage(content=content)])
            return self._code_from(response)

        if task.kind == TaskKind.EDIT:
            prompt = build_edit_prompt(task.framework, task.current_code, task.instruction)
            response = await llm.ainvoke([HumanMessage(content=prompt)])
            return self._code_from(response)

        raise ClientInputError(f"Unsupported request type: {task.kind.value}")

    async def _ensure_sketch(self, llm: Any, image: ImagePayload, provider: str):
        content = [
            build_image_part(image, provider),
            {"type": "text", "text": CLASSIFICATION_PROMPT},
        ]
        response = await llm.ainvoke([HumanMessage(content=content)])
        verdict = self.parser.response_text(response).strip()
        if NOT_SKETCH_LABEL in verdict.upper():
            raise ContentRejectedError(REJECTION_MESSAGE)

    def _code_from(self, response: Any) -> str:
        code = self.parser.strip_code_fences(self.parser.response_text(response))
        if not code:
            raise ValueError("Model returned no code")
        return code
