"""
Tests for data models.
"""

import pytest
from pydantic import ValidationError

from napkin2web.errors import ClientInputError
from napkin2web.models import (
    ConvertRequest,
    ConvertResponse,
    Framework,
    GeneratedCode,
    GenerationTask,
    ImagePayload,
    PreviewDevice,
    SessionState,
    TaskKind,
    TaskOutcome,
    ViewportConfig,
)


def test_viewport_config_desktop():
    """Test desktop viewport configuration."""
    viewport = ViewportConfig.desktop()
    assert viewport.device == PreviewDevice.DESKTOP
    assert viewport.width == 1280


def test_viewport_config_android():
    """Test Android viewport configuration."""
    viewport = ViewportConfig.for_device(PreviewDevice.ANDROID)
    assert viewport.width == 360
    assert viewport.height == 640


def test_viewport_config_iphone():
    """Test iPhone viewport configuration."""
    viewport = ViewportConfig.for_device(PreviewDevice.IPHONE)
    assert viewport.width == 390
    assert viewport.height == 844


def test_framework_parse():
    assert Framework.parse(None) == Framework.STATIC
    assert Framework.parse("") == Framework.STATIC
    assert Framework.parse("React") == Framework.REACT
    assert Framework.parse(Framework.NEXTJS) == Framework.NEXTJS

    with pytest.raises(ClientInputError, match="Unsupported framework"):
        Framework.parse("vue")


def test_image_payload_from_data_uri():
    payload = ImagePayload.from_source("data:image/jpeg;base64,QUJD")

    assert payload.media_type == "image/jpeg"
    assert payload.data == "QUJD"
    assert payload.raw_bytes == b"ABC"
    assert payload.to_data_uri() == "data:image/jpeg;base64,QUJD"


def test_image_payload_from_bare_base64():
    payload = ImagePayload.from_source("QUJD")

    assert payload.media_type == "image/png"
    assert payload.data == "QUJD"


@pytest.mark.parametrize("source, message", [
    ("", "Image required"),
    ("   ", "Image required"),
    ("data:image/png;base64,", "Image data is empty"),
    ("data:image/png;base64", "Image data is empty"),
])
def test_image_payload_rejects_empty(source, message):
    with pytest.raises(ClientInputError, match=message):
        ImagePayload.from_source(source)


def test_convert_request_aliases():
    request = ConvertRequest.model_validate({
        "type": "edit",
        "currentCode": "<div></div>",
        "instruction": "add a footer",
        "framework": "nextjs",
        "uiDescription": "A landing page",
    })

    task = request.to_task()

    assert task.kind == TaskKind.EDIT
    assert task.current_code == "<div></div>"
    assert task.ui_description == "A landing page"
    assert task.framework == Framework.NEXTJS
    assert not task.has_image


def test_convert_request_unknown_type():
    with pytest.raises(ClientInputError, match="Unsupported request type"):
        ConvertRequest(type="render").to_task()


def test_convert_response_from_outcome():
    ok = TaskOutcome(success=True, text="A login form")
    failed = TaskOutcome(success=False, error="All models failed", status_code=500)

    assert ConvertResponse.from_outcome(TaskKind.ANALYZE, ok).description == "A login form"
    assert ConvertResponse.from_outcome(TaskKind.CONVERT, ok).code == "A login form"
    assert ConvertResponse.from_outcome(TaskKind.CLASSIFY, ok).label == "A login form"

    response = ConvertResponse.from_outcome(TaskKind.EDIT, failed)
    assert response.model_dump(exclude_none=True) == {"success": False, "error": "All models failed"}


def test_session_state_busy_and_code():
    state = SessionState()
    assert not state.busy
    assert state.canonical_code is None

    state.is_editing = True
    state.canonical = GeneratedCode(framework=Framework.REACT, source="export default App")

    assert state.busy
    assert state.canonical_code == "export default App"
    assert state.preview_code is None


def test_tasks_and_images_are_frozen():
    image = ImagePayload.from_source("data:image/png;base64,AAAA")
    task = GenerationTask(kind=TaskKind.CONVERT, image=image)

    with pytest.raises(ValidationError):
        image.data = "BBBB"
    with pytest.raises(ValidationError):
        task.framework = Framework.REACT


def test_convert_request_accepts_field_names():
    request = ConvertRequest(type="convert", ui_description="A pricing table")

    assert request.model_dump(by_alias=True, exclude_none=True) == {
        "type": "convert",
        "uiDescription": "A pricing table",
    }
