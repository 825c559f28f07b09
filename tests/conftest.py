import os
import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import ddmarker
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Qt widgets need a platform even on headless CI
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from ddmarker.config import QuestionConfig
from ddmarker.core.models.geometry import ImageGeometry
from ddmarker.engine.session import QuestionSession


# Common test fixtures
@pytest.fixture
def geometry_100():
    """100x100 image whose page offset and position are both (10, 10)."""
    return ImageGeometry.at(10, 10, 100, 100)


@pytest.fixture
def config_factory():
    """Factory for QuestionConfig objects with sensible defaults."""
    def _create(choices=None, dropzones=None, read_only=False, bgimgurl="bg.png"):
        return QuestionConfig.from_dict({
            "topnode": "#q1",
            "bgimgurl": bgimgurl,
            "readonly": read_only,
            "choices": choices if choices is not None else [
                {"no": 1, "label": "A", "noofdrags": 1, "value": ""},
            ],
            "dropzones": dropzones or [],
        })
    return _create


@pytest.fixture
def session_factory(config_factory, geometry_100):
    """Factory for sessions with the 100x100 image already loaded."""
    def _create(image=True, **kwargs):
        session = QuestionSession.from_config(config_factory(**kwargs))
        if image:
            session.image = geometry_100
        return session
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple 200x100 test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
