"""
Tests for the LLM debug logger.
"""

import json

import pytest

from conftest import FakeResponse, ScriptedModel
from napkin2web.utils.llm_logger import LLMLogger, LoggedLLM, get_logger


@pytest.fixture
def file_logger(tmp_path, monkeypatch):
    monkeypatch.setenv("LLM_DEBUG_LEVEL", "TRACE")
    monkeypatch.setenv("LLM_LOG_TO_FILE", "true")
    monkeypatch.setenv("LLM_LOG_DIR", str(tmp_path))
    LLMLogger.reset()
    yield get_logger()
    LLMLogger.reset()


def test_singleton():
    assert get_logger() is get_logger()


def test_strip_images_hides_base64():
    logger = get_logger()
    content = [
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,QUJDRA=="}},
        {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "QUJDRA=="}},
        {"type": "text", "text": "Describe this"},
    ]

    stripped = logger._strip_images(content)

    assert "QUJDRA==" not in json.dumps(stripped)
    assert stripped[0]["text"].startswith("[IMAGE_DATA: png")
    assert stripped[2] == {"type": "text", "text": "Describe this"}


async def test_logged_llm_writes_jsonl(file_logger, tmp_path):
    model = ScriptedModel("model-a", ["<div>ok</div>"])
    llm = LoggedLLM(model, component="orchestrator", provider="gemini", model="model-a", session_id="s1")

    response = await llm.ainvoke([FakeResponse("hello")])

    assert response.content == "<div>ok</div>"
    log_file = tmp_path / "s1" / "logs" / "llm_calls.jsonl"
    events = [json.loads(line)["event"] for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert events == ["request", "response"]


async def test_logged_llm_logs_and_reraises_errors(file_logger, tmp_path):
    model = ScriptedModel("model-a", [RuntimeError("boom")])
    llm = LoggedLLM(model, component="orchestrator", provider="gemini", model="model-a", session_id="s2")

    with pytest.raises(RuntimeError, match="boom"):
        await llm.ainvoke([FakeResponse("hello")])

    log_file = tmp_path / "s2" / "logs" / "llm_calls.jsonl"
    last = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert last["event"] == "error"
    assert "boom" in last["error"]


def test_logged_llm_delegates_attributes():
    model = ScriptedModel("model-a", [])
    llm = LoggedLLM(model, component="orchestrator", provider="gemini", model="model-a")

    assert llm.name == "model-a"
