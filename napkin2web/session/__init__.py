"""
Session synchronization for sketch-to-code generation.

Tracks the canonical code in the selected framework and a static HTML preview,
and keeps both in step across sketch uploads, framework switches and edits.
"""

from napkin2web.session.clients import ConvertClient, HttpConvertClient, LocalConvertClient
from napkin2web.session.controller import SyncController
from napkin2web.session.graph import create_sync_graph
from napkin2web.session.state import SyncState
from napkin2web.session.utils import get_session_summary

__all__ = [
    "ConvertClient",
    "HttpConvertClient",
    "LocalConvertClient",
    "SyncController",
    "create_sync_graph",
    "SyncState",
    "get_session_summary",
]
