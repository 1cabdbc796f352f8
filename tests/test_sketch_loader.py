"""
Tests for sketch loader.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from napkin2web.errors import ClientInputError
from napkin2web.io.sketch_loader import SketchLoader


@pytest.fixture
def sample_sketches(tmp_path):
    """Create sample sketch images for testing."""
    sizes = {
        "phone": (360, 640),
        "wide": (2048, 1024),
    }

    paths = {}
    for name, size in sizes.items():
        image = Image.new("RGB", size, color="white")
        file_path = tmp_path / f"{name}.png"
        image.save(file_path)
        paths[name] = file_path

    return paths


def test_load_image(sample_sketches):
    loader = SketchLoader()

    image = loader.load_image(sample_sketches["phone"])

    assert image.mode == "RGB"
    assert image.size == (360, 640)


def test_load_image_from_bytes(sample_sketches):
    loader = SketchLoader()

    image = loader.load_image(sample_sketches["phone"].read_bytes())

    assert image.size == (360, 640)


def test_load_missing_image(tmp_path):
    with pytest.raises(FileNotFoundError):
        SketchLoader().load_image(tmp_path / "missing.png")


def test_load_unreadable_image(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")

    with pytest.raises(ClientInputError, match="not a readable image"):
        SketchLoader().load_image(path)


def test_check_upload():
    loader = SketchLoader(max_bytes=1024 * 1024)

    with pytest.raises(ClientInputError, match="Empty file"):
        loader.check_upload(b"")

    with pytest.raises(ClientInputError, match="exceeds 1MB"):
        loader.check_upload(b"x" * (1024 * 1024 + 1), "sketch.png")

    with pytest.raises(ClientInputError, match="Unsupported image type"):
        loader.check_upload(b"x", "sketch.pdf")

    loader.check_upload(b"x", "Sketch.JPG")


def test_normalize_keeps_aspect_ratio(sample_sketches):
    loader = SketchLoader()

    image = loader.normalize_sketch(loader.load_image(sample_sketches["wide"]))
    assert image.size == (1024, 512)

    small = loader.normalize_sketch(loader.load_image(sample_sketches["phone"]))
    assert small.size == (360, 640)


def test_prepare_for_llm(sample_sketches):
    loader = SketchLoader()

    payload = loader.prepare_for_llm(sample_sketches["wide"])

    assert payload.media_type == "image/jpeg"

    # Ensure normalization output can be decoded
    decoded = base64.b64decode(payload.data)
    image = Image.open(BytesIO(decoded))
    assert image.format == "JPEG"
    assert image.size == (1024, 512)


def test_data_uri_round_trip(sample_sketches):
    loader = SketchLoader()

    data_uri = loader.to_data_uri(sample_sketches["phone"])
    assert data_uri.startswith("data:image/jpeg;base64,")

    image = loader.decode_data_uri(data_uri)
    assert image.size == (360, 640)
