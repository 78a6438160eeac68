"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Register pytest-asyncio plugin explicitly
pytest_plugins = ["pytest_asyncio"]

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from homework_board.app import create_app  # noqa: E402
from homework_board.config import Settings  # noqa: E402

from tests.constants import TEST_MAX_UPLOAD_BYTES, TEST_SUBJECTS  # noqa: E402


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a per-test temporary directory"""
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>Homework Board</h1>", encoding="utf-8")
    return Settings(
        subjects=TEST_SUBJECTS,
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        static_dir=static_dir,
        max_upload_bytes=TEST_MAX_UPLOAD_BYTES,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Create a test client"""
    return TestClient(app)
