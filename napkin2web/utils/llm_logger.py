"""
LLM debug logger for tracking model calls made by the orchestrator.

Supports configurable log levels (NONE, INFO, DEBUG, TRACE) and dual output:
- Console: Human-readable formatted output
- File: JSON Lines format under <LLM_LOG_DIR>/<session_id>/logs/llm_calls.jsonl

Base64 image payloads are never written out; they are replaced with a short
summary of their media type and size.
"""

import json
import os
import time
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


class LogLevel(Enum):
    """Logging levels for LLM debug output."""

    NONE = 0
    INFO = 1
    DEBUG = 2
    TRACE = 3


class LLMLogger:
    """Centralized logger for LLM API calls with configurable levels."""

    _instance: Optional["LLMLogger"] = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger with configuration from environment."""
        if self._initialized:
            return

        load_dotenv()

        level_str = os.getenv("LLM_DEBUG_LEVEL", "INFO").upper()
        try:
            self.level = LogLevel[level_str]
        except KeyError:
            self.level = LogLevel.INFO

        self.log_to_file = os.getenv("LLM_LOG_TO_FILE", "false").lower() == "true"
        self.log_dir = Path(os.getenv("LLM_LOG_DIR", "outputs"))

        self._initialized = True

    @classmethod
    def reset(cls):
        """Drop the singleton so the next call re-reads the environment."""
        cls._instance = None

    def should_log(self, min_level: LogLevel) -> bool:
        """Check if we should log at the given level."""
        return self.level.value >= min_level.value

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def _truncate(self, content: str, max_len: int = 200) -> str:
        if len(content) <= max_len:
            return content
        return content[:max_len] + "... [truncated]"

    def _summarize_image_url(self, url: str) -> str:
        if url.startswith("data:image/") and "base64," in url:
            header, data = url.split("base64,", 1)
            image_type = header.split("image/")[1].rstrip(";")
            return f"[IMAGE_DATA: {image_type}, base64 encoded, {len(data):,} bytes]"
        return f"[IMAGE_URL: {url[:100]}]"

    def _strip_images(self, content: Any) -> Any:
        """Replace inline image parts with text summaries."""
        if isinstance(content, str):
            if "data:image/" in content and "base64," in content:
                return self._summarize_image_url(content[content.index("data:image/"):])
            return content

        if isinstance(content, list):
            stripped = []
            for item in content:
                if isinstance(item, dict) and item.get("type") == "image_url":
                    url = item.get("image_url")
                    if isinstance(url, dict):
                        url = url.get("url", "")
                    stripped.append({"type": "text", "text": self._summarize_image_url(str(url))})
                elif isinstance(item, dict) and item.get("type") == "image":
                    source = item.get("source", {})
                    size = len(source.get("data", "")) if isinstance(source, dict) else 0
                    stripped.append({"type": "text", "text": f"[IMAGE_DATA: base64 encoded, {size:,} bytes]"})
                else:
                    stripped.append(item)
            return stripped

        return content

    def _serialize_message(self, msg: Any) -> Dict[str, Any]:
        content = msg.content if hasattr(msg, "content") else msg
        return {
            "type": msg.__class__.__name__,
            "content": self._strip_images(content),
        }

    def _content_to_text(self, content: Any) -> str:
        if isinstance(content, str):
            return content
        return json.dumps(content, ensure_ascii=False)

    def _write_to_file(self, session_id: Optional[str], log_entry: Dict[str, Any]):
        """Append a log entry to the session's JSON Lines file."""
        if not self.log_to_file or not session_id:
            return

        log_file = self.log_dir / session_id / "logs" / "llm_calls.jsonl"
        log_file.parent.mkdir(parents=True, exist_ok=True)

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + "\n")

    def log_invocation(
        self,
        component: str,
        provider: str,
        model: str,
        session_id: Optional[str] = None,
    ) -> str:
        """
        Log the start of an LLM invocation.

        Returns:
            Invocation ID (UUID string), or "" when logging is disabled.
        """
        if not self.should_log(LogLevel.INFO):
            return ""

        invocation_id = str(uuid.uuid4())
        console_msg = f"[{self._timestamp()}] 🔵 LLM Call: [{component}] {provider}/{model}"
        if session_id:
            console_msg += f" | session: {session_id}"
        print(console_msg)

        return invocation_id

    def log_request(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        messages: List[Any],
        session_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log LLM request details (DEBUG and above)."""
        if not self.should_log(LogLevel.DEBUG):
            return

        serialized = [self._serialize_message(msg) for msg in messages]

        print(f"  Messages: {len(messages)}")
        for i, msg in enumerate(serialized[:3]):
            preview = self._truncate(self._content_to_text(msg["content"]), 150)
            print(f"    {i+1}. [{msg['type']}] {preview}")

        self._write_to_file(session_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "request",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "request": {
                "messages": serialized if self.level == LogLevel.TRACE else [],
                "message_count": len(messages),
            },
            "metadata": metadata or {},
        })

    def log_response(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        response: Any,
        start_time: float,
        end_time: float,
        session_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log LLM response with timing and token usage."""
        if not self.should_log(LogLevel.INFO):
            return

        latency_ms = (end_time - start_time) * 1000
        content = self._content_to_text(
            self._strip_images(getattr(response, "content", str(response)))
        )

        usage = getattr(response, "usage_metadata", None) or {}
        total_tokens = usage.get("total_tokens") if isinstance(usage, dict) else None

        parts = [f"[{component}]", f"{provider}/{model}", f"{latency_ms:.1f}ms"]
        if total_tokens is not None:
            parts.append(f"{total_tokens} tokens")
        print(f"[{self._timestamp()}] ✅ LLM Response: " + " | ".join(parts))

        if self.should_log(LogLevel.TRACE):
            print(f"  Response: {content}")
        elif self.should_log(LogLevel.DEBUG):
            print(f"  Response: {self._truncate(content)}")

        self._write_to_file(session_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "response",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "response": {
                "content": content if self.level == LogLevel.TRACE else None,
                "content_preview": self._truncate(content),
                "content_length": len(content),
            },
            "timing": {
                "latency_ms": latency_ms,
                "start_time": datetime.fromtimestamp(start_time).isoformat(),
                "end_time": datetime.fromtimestamp(end_time).isoformat(),
            },
            "usage": dict(usage) if isinstance(usage, dict) and usage else None,
            "metadata": metadata or {},
        })

    def log_error(self, component: str, model: str, error: BaseException, session_id: Optional[str] = None):
        """Log a failed LLM call."""
        if not self.should_log(LogLevel.INFO):
            return

        print(f"[{self._timestamp()}] ❌ LLM Error: [{component}] {model} {type(error).__name__}: {error}")
        self._write_to_file(session_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "error",
            "component": component,
            "model": model,
            "error": f"{type(error).__name__}: {error}",
        })

    def log_event(self, component: str, message: str, session_id: Optional[str] = None):
        """Log an orchestration event (fallback, backoff, rejection)."""
        if not self.should_log(LogLevel.INFO):
            return

        print(f"[{self._timestamp()}] ℹ️  [{component}] {message}")
        self._write_to_file(session_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "info",
            "component": component,
            "message": message,
        })


def get_logger() -> LLMLogger:
    """Get the singleton logger instance."""
    return LLMLogger()


class LoggedLLM:
    """
    Wrapper around LangChain chat models to add debug logging.

    Intercepts invoke() and ainvoke() calls and logs requests, responses,
    timing and errors.
    """

    def __init__(
        self,
        llm_instance: Any,
        component: str,
        provider: str,
        model: str,
        session_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize LoggedLLM wrapper.

        Args:
            llm_instance: The actual chat model (ChatGoogleGenerativeAI, ChatOpenAI, ChatAnthropic)
            component: Component name (e.g., "orchestrator")
            provider: Provider name
            model: Model name
            session_id: Optional session ID for per-session log files
            metadata: Optional additional metadata to include in logs
        """
        self.llm = llm_instance
        self.component = component
        self.provider = provider
        self.model = model
        self.session_id = session_id
        self.metadata = metadata or {}
        self.logger = get_logger()

    def __getattr__(self, name: str):
        """Delegate all other attributes to wrapped LLM instance."""
        return getattr(self.llm, name)

    def _start(self, messages: List[Any]) -> str:
        invocation_id = self.logger.log_invocation(
            component=self.component,
            provider=self.provider,
            model=self.model,
            session_id=self.session_id,
        )
        if invocation_id:
            self.logger.log_request(
                invocation_id=invocation_id,
                component=self.component,
                provider=self.provider,
                model=self.model,
                messages=messages,
                session_id=self.session_id,
                metadata=self.metadata,
            )
        return invocation_id

    def _finish(self, invocation_id: str, response: Any, start_time: float):
        self.logger.log_response(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            response=response,
            start_time=start_time,
            end_time=time.time(),
            session_id=self.session_id,
            metadata=self.metadata,
        )

    def invoke(self, messages: List[Any], **kwargs) -> Any:
        invocation_id = self._start(messages)
        if not invocation_id:
            return self.llm.invoke(messages, **kwargs)

        start_time = time.time()
        try:
            response = self.llm.invoke(messages, **kwargs)
        except Exception as e:
            self.logger.log_error(self.component, self.model, e, self.session_id)
            raise

        self._finish(invocation_id, response, start_time)
        return response

    async def ainvoke(self, messages: List[Any], **kwargs) -> Any:
        invocation_id = self._start(messages)
        if not invocation_id:
            return await self.llm.ainvoke(messages, **kwargs)

        start_time = time.time()
        try:
            response = await self.llm.ainvoke(messages, **kwargs)
        except Exception as e:
            self.logger.log_error(self.component, self.model, e, self.session_id)
            raise

        self._finish(invocation_id, response, start_time)
        return response
