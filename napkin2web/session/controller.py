"""
Synchronization controller.

Keeps the canonical code (selected framework) and the preview code (always
static HTML) consistent across sketch uploads, framework switches and edits.
"""

from typing import Any, Dict, Optional, Union

from napkin2web.models import Framework, GeneratedCode, SessionState
from napkin2web.session.clients import ConvertClient, LocalConvertClient
from napkin2web.session.graph import create_sync_graph
from napkin2web.session.state import SyncState
from napkin2web.utils.llm_logger import get_logger


class SyncController:
    """
    Drives one session's generate / switch / edit actions.

    At most one action runs at a time; a call made while the session is busy
    returns False without touching anything. Results are committed to the
    session only when the action succeeds.
    """

    def __init__(self, client: Optional[ConvertClient] = None, state: Optional[SessionState] = None):
        """
        Initialize the controller.

        Args:
            client: Convert client. Defaults to an in-process orchestrator.
            state: Existing session state to continue from.
        """
        self.client = client or LocalConvertClient()
        self.state = state or SessionState()
        self.app = create_sync_graph()
        self.logger = get_logger()

    async def _run(self, inputs: SyncState) -> Dict[str, Any]:
        inputs = dict(inputs)
        inputs.setdefault("notices", [])
        result = await self.app.ainvoke(inputs, config={"configurable": {"client": self.client}})
        self.state.notices.extend(result.get("notices") or [])
        return result

    def _notify(self, message: str):
        self.state.notices.append(message)
        self.logger.log_event("controller", message, self.state.session_id)

    def _commit_code(self, framework: Framework, result: Dict[str, Any]):
        self.state.canonical = GeneratedCode(framework=framework, source=result["code"])
        if result.get("preview_code"):
            self.state.preview = GeneratedCode(framework=Framework.STATIC, source=result["preview_code"])

    def dismiss_notices(self):
        self.state.notices.clear()

    async def generate_from_sketch(self, image: str) -> bool:
        """
        Analyze a new sketch and generate code and preview for it.

        Args:
            image: Data URI of the uploaded sketch.

        Returns:
            True if the session was updated.
        """
        if self.state.busy:
            return False

        self.state.is_generating = True
        try:
            framework = self.state.framework
            result = await self._run({
                "action": "generate",
                "framework": framework.value,
                "image": image,
            })

            if result.get("error"):
                self._notify(result["error"])
                return False

            self.state.image = image
            self.state.ui_description = result["ui_description"]
            self._commit_code(framework, result)
            if not result.get("preview_code"):
                # The old preview shows a different sketch
                self.state.preview = None
            return True
        finally:
            self.state.is_generating = False

    async def switch_framework(self, framework: Union[Framework, str]) -> bool:
        """
        Select a new output framework and regenerate the canonical code.

        The preview is left as it is. Without a stored UI description only the
        selection changes. If regeneration fails the previous selection is
        restored so the canonical code keeps matching it.

        Returns:
            True if the selection changed.
        """
        framework = Framework.parse(framework)
        if framework == self.state.framework or self.state.busy:
            return False

        previous = self.state.framework
        self.state.framework = framework
        if not self.state.ui_description:
            return True

        self.state.is_editing = True
        try:
            result = await self._run({
                "action": "switch",
                "framework": framework.value,
                "image": self.state.image,
                "ui_description": self.state.ui_description,
            })

            if result.get("error"):
                self.state.framework = previous
                self._notify(result["error"])
                return False

            self.state.canonical = GeneratedCode(framework=framework, source=result["code"])
            return True
        finally:
            self.state.is_editing = False

    async def apply_edit(self, instruction: str) -> bool:
        """
        Apply a natural-language edit to the canonical code.

        For React and Next.js the static preview is regenerated from the UI
        description plus the instruction.

        Returns:
            True if the canonical code was updated.
        """
        if self.state.busy:
            return False
        if not self.state.canonical or not instruction or not instruction.strip():
            return False

        self.state.is_editing = True
        try:
            framework = self.state.framework
            result = await self._run({
                "action": "edit",
                "framework": framework.value,
                "current_code": self.state.canonical.source,
                "instruction": instruction,
                "image": self.state.image,
                "ui_description": self.state.ui_description,
            })

            if result.get("error"):
                self._notify(result["error"])
                return False

            self._commit_code(framework, result)
            return True
        finally:
            self.state.is_editing = False
