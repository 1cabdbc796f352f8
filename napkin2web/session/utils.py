"""
Utility functions for session state.
"""

from napkin2web.models import SessionState


def get_session_summary(state: SessionState) -> str:
    """
    Get a human-readable summary of a session.

    Args:
        state: Current SessionState

    Returns:
        Formatted string summary
    """
    summary = []
    summary.append(f"Framework: {state.framework.value}")
    summary.append(f"Sketch uploaded: {state.image is not None}")
    summary.append(f"UI description: {len(state.ui_description or '')} chars")
    summary.append(f"Canonical code: {len(state.canonical_code or '')} chars")
    summary.append(f"Preview code: {len(state.preview_code or '')} chars")
    summary.append(f"Busy: {state.busy}")

    if state.notices:
        summary.append(f"Notices: {len(state.notices)}")
        for notice in state.notices:
            summary.append(f"  - {notice}")

    return "\n".join(summary)
