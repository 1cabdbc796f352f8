"""
HTTP service exposing the model orchestrator.

    POST /api/convert   classify / analyze / convert / edit
    GET  /health

Run with ``uvicorn napkin2web.api.app:app`` or ``python cli.py serve``.
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from napkin2web import __version__
from napkin2web.errors import Napkin2WebError
from napkin2web.models import ConvertRequest, ConvertResponse
from napkin2web.pipeline.orchestrator import ModelOrchestrator
from napkin2web.utils.llm_logger import get_logger


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ConvertResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def create_app(orchestrator: Optional[ModelOrchestrator] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        orchestrator: Orchestrator serving requests. Defaults to one that
            reads its settings from the environment per request.

    Returns:
        FastAPI application
    """
    app = FastAPI(title="Napkin2Web", version=__version__)
    app.state.orchestrator = orchestrator or ModelOrchestrator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(Napkin2WebError)
    async def napkin_error_handler(request: Request, exc: Napkin2WebError):
        return error_response(exc.status_code, exc.message)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    @app.post("/api/convert")
    async def convert(request: Request):
        try:
            payload = await request.json()
        except ValueError:
            return error_response(400, "Request body must be valid JSON")

        if not isinstance(payload, dict):
            return error_response(400, "Request body must be a JSON object")

        try:
            convert_request = ConvertRequest.model_validate(payload)
        except ValidationError as e:
            return error_response(400, f"Invalid request: {e.errors()[0]['msg']}")

        try:
            status_code, response = await app.state.orchestrator.process(convert_request)
        except Exception as e:
            get_logger().log_event("api", f"Unhandled error: {type(e).__name__}: {e}")
            return error_response(500, str(e) or "Internal server error")

        return JSONResponse(status_code=status_code, content=response.model_dump(exclude_none=True))

    return app


app = create_app()
