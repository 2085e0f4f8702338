from __future__ import annotations

import os

# Must be set before app modules import and configure logging.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FILE_PATH", "")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.infrastructure.config import FeedbackConfig  # noqa: E402
from app.infrastructure.repositories_feedback import FeedbackRepo  # noqa: E402
from app.web.main import create_application  # noqa: E402


@pytest.fixture
def feedback_path(tmp_path):
    return tmp_path / "feedback.json"


@pytest.fixture
def feedback_repo(feedback_path):
    return FeedbackRepo(feedback_path)


@pytest.fixture
def client(feedback_path):
    app = create_application()
    app.state.feedback_config = FeedbackConfig(data_file=str(feedback_path))
    return TestClient(app)
