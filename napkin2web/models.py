"""
Data models and schemas for the sketch-to-code pipeline.
"""

import base64
import binascii
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from napkin2web.errors import ClientInputError


class Framework(str, Enum):
    """Output frameworks for generated code."""
    STATIC = "static"
    REACT = "react"
    NEXTJS = "nextjs"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Framework":
        """Parse a framework name, defaulting to static when empty."""
        if value is None or value == "":
            return cls.STATIC
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ClientInputError(f"Unsupported framework: {value}")


class TaskKind(str, Enum):
    """Kinds of requests sent to the model service."""
    CLASSIFY = "classify"
    ANALYZE = "analyze"
    CONVERT = "convert"
    EDIT = "edit"


DATA_URI_PATTERN = re.compile(r"^data:([^;,]+)")


class ImagePayload(BaseModel):
    """Base64 image data with its declared media type."""
    data: str
    media_type: str = "image/png"

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_source(cls, source: str) -> "ImagePayload":
        """
        Build a payload from a data URI or a bare base64 string.

        Args:
            source: ``data:<mime>;base64,<data>`` or raw base64.

        Returns:
            ImagePayload object.
        """
        if not source or not source.strip():
            raise ClientInputError("Image required")

        source = source.strip()
        media_type = "image/png"
        if source.startswith("data:"):
            match = DATA_URI_PATTERN.match(source)
            if match:
                media_type = match.group(1)
            data = source.split(",", 1)[1] if "," in source else ""
        else:
            data = source.split(",", 1)[-1]

        if not data:
            raise ClientInputError("Image data is empty")

        return cls(data=data, media_type=media_type)

    @property
    def raw_bytes(self) -> bytes:
        try:
            return base64.b64decode(self.data, validate=False)
        except (binascii.Error, ValueError) as e:
            raise ClientInputError(f"Image is not valid base64: {e}")

    def to_data_uri(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


class GenerationTask(BaseModel):
    """One request to the model service. Immutable once built."""
    kind: TaskKind
    image: Optional[ImagePayload] = None
    ui_description: Optional[str] = None
    current_code: Optional[str] = None
    instruction: Optional[str] = None
    framework: Framework = Framework.STATIC

    model_config = ConfigDict(frozen=True)

    @property
    def has_image(self) -> bool:
        return self.image is not None


class ModelAttempt(BaseModel):
    """One try of a task against one candidate model."""
    model_name: str
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    rate_limited: bool = False


class TaskOutcome(BaseModel):
    """Uniform success/error result of a generation task."""
    success: bool
    text: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    status_code: int = 200
    model_name: Optional[str] = None
    attempts: List[ModelAttempt] = Field(default_factory=list)


class GeneratedCode(BaseModel):
    """Framework-tagged source text."""
    framework: Framework
    source: str


class SessionState(BaseModel):
    """
    Everything one browser session knows about the current design.

    Created on first sketch upload and mutated only by the single action that
    currently holds the busy flag.
    """
    session_id: Optional[str] = None
    framework: Framework = Framework.STATIC
    image: Optional[str] = None  # data URI of the uploaded sketch
    ui_description: Optional[str] = None
    canonical: Optional[GeneratedCode] = None
    preview: Optional[GeneratedCode] = None
    is_generating: bool = False
    is_editing: bool = False
    notices: List[str] = Field(default_factory=list)

    @property
    def busy(self) -> bool:
        return self.is_generating or self.is_editing

    @property
    def canonical_code(self) -> Optional[str]:
        return self.canonical.source if self.canonical else None

    @property
    def preview_code(self) -> Optional[str]:
        return self.preview.source if self.preview else None


class ConvertRequest(BaseModel):
    """JSON body of ``POST /api/convert``."""
    type: Optional[str] = None
    image: Optional[str] = None
    current_code: Optional[str] = Field(default=None, alias="currentCode")
    instruction: Optional[str] = None
    framework: Optional[str] = None
    ui_description: Optional[str] = Field(default=None, alias="uiDescription")

    model_config = ConfigDict(populate_by_name=True)

    def to_task(self) -> GenerationTask:
        """
        Convert the wire request into a GenerationTask.

        Raises:
            ClientInputError: Unknown type, bad framework, or bad image.
        """
        try:
            kind = TaskKind(self.type)
        except ValueError:
            raise ClientInputError(f"Unsupported request type: {self.type}")

        image = ImagePayload.from_source(self.image) if self.image else None

        return GenerationTask(
            kind=kind,
            image=image,
            ui_description=self.ui_description or None,
            current_code=self.current_code,
            instruction=self.instruction,
            framework=Framework.parse(self.framework),
        )


class ConvertResponse(BaseModel):
    """JSON response of ``POST /api/convert``."""
    success: bool
    description: Optional[str] = None
    code: Optional[str] = None
    label: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def from_outcome(cls, kind: TaskKind, outcome: TaskOutcome) -> "ConvertResponse":
        if not outcome.success:
            return cls(success=False, error=outcome.error)
        if kind == TaskKind.ANALYZE:
            return cls(success=True, description=outcome.text)
        if kind == TaskKind.CLASSIFY:
            return cls(success=True, label=outcome.text)
        return cls(success=True, code=outcome.text)


class PreviewDevice(str, Enum):
    """Device frames offered by the live preview."""
    DESKTOP = "desktop"
    ANDROID = "android"
    IPHONE = "iphone"


class ViewportConfig(BaseModel):
    """Viewport configuration for a preview device."""
    device: PreviewDevice
    width: int
    height: int

    @classmethod
    def desktop(cls, height: int = 700) -> "ViewportConfig":
        return cls(device=PreviewDevice.DESKTOP, width=1280, height=height)

    @classmethod
    def android(cls, height: int = 640) -> "ViewportConfig":
        return cls(device=PreviewDevice.ANDROID, width=360, height=height)

    @classmethod
    def iphone(cls, height: int = 844) -> "ViewportConfig":
        return cls(device=PreviewDevice.IPHONE, width=390, height=height)

    @classmethod
    def for_device(cls, device: PreviewDevice) -> "ViewportConfig":
        if device == PreviewDevice.DESKTOP:
            return cls.desktop()
        elif device == PreviewDevice.ANDROID:
            return cls.android()
        elif device == PreviewDevice.IPHONE:
            return cls.iphone()
        else:
            raise ValueError(f"Unknown preview device: {device}")
