"""
Utilities for loading and normalizing uploaded sketch images.
"""

import base64
from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image, UnidentifiedImageError

from napkin2web.errors import ClientInputError
from napkin2web.models import ImagePayload


MAX_UPLOAD_BYTES = 10 * 1024 * 1024
MAX_DIMENSION = 1024
JPEG_QUALITY = 80
ACCEPTED_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif")


class SketchLoader:
    """Loads sketch uploads and turns them into model-ready data URIs."""

    def __init__(
        self,
        max_bytes: int = MAX_UPLOAD_BYTES,
        max_dimension: int = MAX_DIMENSION,
        jpeg_quality: int = JPEG_QUALITY,
    ):
        """
        Initialize sketch loader.

        Args:
            max_bytes: Largest accepted upload, in bytes.
            max_dimension: Longest side of the normalized image, in pixels.
            jpeg_quality: JPEG quality used when re-encoding.
        """
        self.max_bytes = max_bytes
        self.max_dimension = max_dimension
        self.jpeg_quality = jpeg_quality

    def check_upload(self, data: bytes, filename: str = ""):
        """
        Reject uploads that are empty, too large, or of an unsupported type.

        Raises:
            ClientInputError: Upload is not acceptable.
        """
        if not data:
            raise ClientInputError("Empty file received")
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes // (1024 * 1024)
            raise ClientInputError(f"File size exceeds {limit_mb}MB. Please upload a smaller file.")
        if filename and Path(filename).suffix.lower() not in ACCEPTED_SUFFIXES:
            raise ClientInputError(f"Unsupported image type: {Path(filename).suffix}")

    def load_image(self, source: Union[str, Path, bytes]) -> Image.Image:
        """
        Load an image from disk or from raw bytes.

        Args:
            source: Path to the image file, or its bytes.

        Returns:
            PIL Image object in RGB mode.
        """
        if isinstance(source, bytes):
            self.check_upload(source)
            buffer = BytesIO(source)
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"Image not found: {path}")
            data = path.read_bytes()
            self.check_upload(data, path.name)
            buffer = BytesIO(data)

        try:
            image = Image.open(buffer)
            image.load()
        except UnidentifiedImageError:
            raise ClientInputError("Uploaded file is not a readable image")

        return image.convert("RGB")

    def normalize_sketch(self, image: Image.Image) -> Image.Image:
        """
        Shrink a sketch so its longest side is at most max_dimension.

        Aspect ratio is kept; smaller images are left as they are.
        """
        image = image.copy()
        image.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)
        return image

    def image_to_base64(self, image: Image.Image, format: str = "JPEG") -> str:
        """
        Convert PIL Image to base64 string.

        Args:
            image: PIL Image object.
            format: Image format (JPEG, PNG, etc.).

        Returns:
            Base64-encoded string.
        """
        buffer = BytesIO()
        if format.upper() == "JPEG":
            image.save(buffer, format="JPEG", quality=self.jpeg_quality)
        else:
            image.save(buffer, format=format)
        return base64.b64encode(buffer.getvalue()).decode("utf-8")

    def prepare_for_llm(self, source: Union[str, Path, bytes]) -> ImagePayload:
        """
        Load, normalize and encode a sketch for the model service.

        Returns:
            ImagePayload with JPEG data.
        """
        image = self.normalize_sketch(self.load_image(source))
        return ImagePayload(data=self.image_to_base64(image), media_type="image/jpeg")

    def to_data_uri(self, source: Union[str, Path, bytes]) -> str:
        """Data URI of the normalized sketch, as sent in ``image`` fields."""
        return self.prepare_for_llm(source).to_data_uri()

    def decode_data_uri(self, data_uri: str) -> Image.Image:
        """Decode a data URI (or bare base64) back into an image."""
        payload = ImagePayload.from_source(data_uri)
        try:
            image = Image.open(BytesIO(payload.raw_bytes))
            image.load()
        except UnidentifiedImageError:
            raise ClientInputError("Image data is not a readable image")
        return image
