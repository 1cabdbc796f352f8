"""
Graph state for one controller action.

A SyncState lives only for the duration of one generate / switch / edit
action. The controller reads the final values and commits them to the
SessionState only when the action succeeded.
"""

import operator
from typing import Annotated, List, Optional, TypedDict


class SyncState(TypedDict, total=False):
    """
    State flowing through the synchronization graph.

    All fields are optional (total=False) so nodes can return partial updates.
    """

    # "generate" | "switch" | "edit"
    action: str
    framework: str

    # Inputs
    image: Optional[str]
    ui_description: Optional[str]
    current_code: Optional[str]
    instruction: Optional[str]

    # Outputs
    code: Optional[str]
    preview_code: Optional[str]

    # First fatal error; stops the graph
    error: Optional[str]

    # Non-fatal problems surfaced to the user
    notices: Annotated[List[str], operator.add]
