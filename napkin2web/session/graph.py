"""
LangGraph construction for the generate / switch / edit flows.

    generate: analyze -> convert -> preview
    switch:   convert
    edit:     edit -> preview

Any node that sets ``error`` ends the run.
"""

from typing import Literal

from langgraph.graph import END, StateGraph

from napkin2web.session.nodes import analyze_node, convert_node, edit_node, preview_node
from napkin2web.session.state import SyncState


def route_action(state: SyncState) -> Literal["analyze", "convert", "edit"]:
    """Entry routing by controller action."""
    action = state.get("action")

    if action == "generate":
        return "analyze"
    elif action == "switch":
        return "convert"
    elif action == "edit":
        return "edit"
    else:
        raise ValueError(f"Unknown action: {action}")


def route_after_analyze(state: SyncState) -> Literal["convert", END]:
    if state.get("error"):
        return END
    return "convert"


def route_after_code(state: SyncState) -> Literal["preview", END]:
    """
    After convert or edit: refresh the preview unless the run failed or the
    action was a framework switch.
    """
    if state.get("error"):
        return END
    if state.get("action") == "switch":
        return END
    return "preview"


def create_sync_graph():
    """
    Create and compile the synchronization graph.

    Session state lives in the controller, so the graph is compiled without a
    checkpointer.

    Returns:
        Compiled LangGraph application
    """
    graph = StateGraph(SyncState)

    graph.add_node("analyze", analyze_node)
    graph.add_node("convert", convert_node)
    graph.add_node("edit", edit_node)
    graph.add_node("preview", preview_node)

    graph.set_conditional_entry_point(
        route_action,
        {
            "analyze": "analyze",
            "convert": "convert",
            "edit": "edit",
        }
    )

    graph.add_conditional_edges(
        "analyze",
        route_after_analyze,
        {"convert": "convert", END: END}
    )
    graph.add_conditional_edges(
        "convert",
        route_after_code,
        {"preview": "preview", END: END}
    )
    graph.add_conditional_edges(
        "edit",
        route_after_code,
        {"preview": "preview", END: END}
    )

    graph.add_edge("preview", END)

    return graph.compile()
