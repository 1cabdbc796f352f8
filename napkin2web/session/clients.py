"""
Clients the synchronization controller uses to reach the orchestrator.

Both clients speak the ``/api/convert`` request/response models, so the
controller does not care whether the orchestrator runs in-process or behind
the HTTP service.
"""

from typing import Optional

import httpx

from napkin2web.config import Settings
from napkin2web.models import ConvertRequest, ConvertResponse
from napkin2web.pipeline.orchestrator import ModelOrchestrator


class ConvertClient:
    """Base class for convert clients."""

    async def convert(self, request: ConvertRequest) -> ConvertResponse:
        raise NotImplementedError


class LocalConvertClient(ConvertClient):
    """Calls the orchestrator in the same process."""

    def __init__(self, orchestrator: Optional[ModelOrchestrator] = None):
        self.orchestrator = orchestrator or ModelOrchestrator()

    async def convert(self, request: ConvertRequest) -> ConvertResponse:
        _, response = await self.orchestrator.process(request)
        return response


class HttpConvertClient(ConvertClient):
    """Posts requests to a running ``/api/convert`` endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            base_url: Service root, e.g. http://localhost:8000. Defaults to NAPKIN_API_URL.
            timeout: Request timeout in seconds. Defaults to NAPKIN_HTTP_TIMEOUT.
            transport: Optional httpx transport (used to mount the app in tests).
        """
        if base_url is None or timeout is None:
            settings = Settings.from_env()
            base_url = base_url or settings.api_url
            timeout = timeout if timeout is not None else settings.http_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def convert(self, request: ConvertRequest) -> ConvertResponse:
        payload = request.model_dump(by_alias=True, exclude_none=True)

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post("/api/convert", json=payload)
        except httpx.HTTPError as e:
            return ConvertResponse(success=False, error=f"Request failed: {e}")

        try:
            data = response.json()
        except ValueError:
            return ConvertResponse(
                success=False,
                error=f"Unexpected response ({response.status_code}) from convert service",
            )

        if not isinstance(data, dict):
            return ConvertResponse(success=False, error="Unexpected response from convert service")

        return ConvertResponse(
            success=bool(data.get("success")),
            description=data.get("description"),
            code=data.get("code"),
            label=data.get("label"),
            error=data.get("error"),
        )
