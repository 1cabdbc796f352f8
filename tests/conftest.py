"""
Shared fixtures: scripted chat models and orchestrators wired to them.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image, ImageDraw

from napkin2web.config import Settings
from napkin2web.pipeline.orchestrator import ModelOrchestrator
from napkin2web.pipeline.prompts import (
    ANALYZE_PROMPT,
    CLASSIFICATION_PROMPT,
    NEXTJS_CONTRACT,
    REACT_CONTRACT,
    STATIC_CONTRACT,
)


LOGIN_DESCRIPTION = (
    "A centered login card with a title 'Sign in', an email field, a password field, "
    "and a full-width submit button."
)

LOGIN_HTML = """<!DOCTYPE html>
<html>
<head><script src="https://cdn.tailwindcss.com"></script></head>
<body>
  <form class="p-8 rounded-xl">
    <h1>Sign in</h1>
    <input type="email" placeholder="Email">
    <input type="password" placeholder="Password">
    <button type="submit">Sign in</button>
  </form>
</body>
</html>"""

LOGIN_REACT = """import { Mail } from 'lucide-react'

export default function App() {
  return (
    <form className="p-8 rounded-xl">
      <input type="email" />
      <input type="password" />
      <button type="submit">Sign in</button>
    </form>
  )
}"""

LOGIN_NEXTJS = "'use client'\n\n" + LOGIN_REACT.replace("function App", "function Page")


class FakeResponse:
    """Minimal stand-in for an AIMessage."""

    def __init__(self, content):
        self.content = content


def message_text(messages) -> str:
    """Text parts of the first message."""
    content = messages[0].content
    if isinstance(content, str):
        return content
    return "".join(
        part.get("text", "") for part in content
        if isinstance(part, dict) and part.get("type") == "text"
    )


class ScriptedModel:
    """Answers with queued replies in order; queued exceptions are raised."""

    def __init__(self, name, replies):
        self.name = name
        self.replies = list(replies)
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if not self.replies:
            raise RuntimeError(f"{self.name} has no scripted reply left")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return FakeResponse(reply)


class SketchAwareModel:
    """Answers by looking at the prompt, like a well-behaved vision model."""

    def __init__(self, is_sketch=True):
        self.is_sketch = is_sketch
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        text = message_text(messages)

        if text == CLASSIFICATION_PROMPT:
            return FakeResponse("UI_SKETCH" if self.is_sketch else "NOT_UI_SKETCH")
        if text == ANALYZE_PROMPT:
            return FakeResponse(LOGIN_DESCRIPTION)
        if "User Instruction:" in text:
            if "Current Framework: static" in text:
                return FakeResponse(LOGIN_HTML.replace("<button", '<button class="bg-blue-600"'))
            return FakeResponse(LOGIN_REACT.replace("<button", '<button className="bg-blue-600"'))
        if REACT_CONTRACT in text:
            return FakeResponse(f"```tsx\n{LOGIN_REACT}\n```")
        if NEXTJS_CONTRACT in text:
            return FakeResponse(f"```tsx\n{LOGIN_NEXTJS}\n```")
        if STATIC_CONTRACT in text:
            return FakeResponse(f"```html\n{LOGIN_HTML}\n```")
        raise RuntimeError("Unexpected prompt")


class SleepRecorder:
    """Records backoff sleeps instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def settings():
    return Settings(
        provider="gemini",
        candidate_models=["model-a", "model-b", "model-c"],
        api_key="test-key",
    )


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def build_orchestrator(settings, sleeps):
    """Build an orchestrator whose candidates are the given fake models."""

    def build(models, custom_settings=None):
        def factory(_settings, model_name, _session_id):
            return models[model_name]

        return ModelOrchestrator(
            settings=custom_settings or settings,
            model_factory=factory,
            sleep=sleeps,
        )

    return build


@pytest.fixture
def sketch_data_uri():
    """Small PNG wireframe as a data URI."""
    image = Image.new("RGB", (200, 300), color="white")
    draw = ImageDraw.Draw(image)
    draw.rectangle([20, 40, 180, 70], outline="black")
    draw.rectangle([20, 90, 180, 120], outline="black")
    draw.rectangle([60, 150, 140, 180], outline="black")

    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("utf-8")
