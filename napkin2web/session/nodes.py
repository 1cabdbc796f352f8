"""
Node functions for the synchronization graph.

Each node sends one request through the convert client taken from the run
config and returns a partial SyncState update. Failures become ``error`` (fatal,
stops the graph) or ``notices`` (preview only).
"""

from typing import Any, Dict

from langchain_core.runnables import RunnableConfig

from napkin2web.models import ConvertRequest, Framework
from napkin2web.pipeline.prompts import describe_edit
from napkin2web.session.clients import ConvertClient
from napkin2web.session.state import SyncState
from napkin2web.utils.llm_logger import get_logger


def get_client(config: RunnableConfig) -> ConvertClient:
    """Convert client passed in ``config["configurable"]["client"]``."""
    client = (config or {}).get("configurable", {}).get("client")
    if client is None:
        raise ValueError("No convert client configured for this run")
    return client


async def analyze_node(state: SyncState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Analyze node: turns the sketch into a UI blueprint.
    """
    response = await get_client(config).convert(ConvertRequest(
        type="analyze",
        image=state.get("image"),
    ))

    if not response.success or not response.description:
        return {"error": response.error or "Analysis returned no description"}

    return {"ui_description": response.description}


async def convert_node(state: SyncState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Convert node: generates code in the selected framework.

    The sketch, when the session has one, is sent along with the blueprint.
    """
    response = await get_client(config).convert(ConvertRequest(
        type="convert",
        image=state.get("image"),
        framework=state.get("framework"),
        ui_description=state.get("ui_description"),
    ))

    if not response.success or not response.code:
        return {"error": response.error or "Conversion returned no code"}

    return {"code": response.code}


async def edit_node(state: SyncState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Edit node: applies a natural-language instruction to the canonical code.
    """
    response = await get_client(config).convert(ConvertRequest(
        type="edit",
        framework=state.get("framework"),
        current_code=state.get("current_code"),
        instruction=state.get("instruction"),
    ))

    if not response.success or not response.code:
        return {"error": response.error or "Edit returned no code"}

    return {"code": response.code}


async def preview_node(state: SyncState, config: RunnableConfig) -> Dict[str, Any]:
    """
    Preview node: keeps the static HTML preview in step with the canonical code.

    Static output is its own preview. For React and Next.js a second, static
    conversion of the blueprint and sketch is requested; after an edit the
    instruction is appended to the blueprint. A failure here only adds a notice.
    """
    if Framework.parse(state.get("framework")) == Framework.STATIC:
        return {"preview_code": state.get("code")}

    ui_description = state.get("ui_description")
    if not ui_description:
        return {}

    if state.get("action") == "edit":
        ui_description = describe_edit(ui_description, state.get("instruction") or "")

    response = await get_client(config).convert(ConvertRequest(
        type="convert",
        image=state.get("image"),
        framework=Framework.STATIC.value,
        ui_description=ui_description,
    ))

    if not response.success or not response.code:
        message = f"Preview update failed: {response.error or 'no code returned'}"
        get_logger().log_event("controller", message)
        return {"notices": [message]}

    return {"preview_code": response.code}
