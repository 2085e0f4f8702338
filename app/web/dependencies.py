from __future__ import annotations

from fastapi import Request

from app.infrastructure.config import FeedbackConfig, get_settings
from app.infrastructure.repositories_feedback import FeedbackRepo


def get_feedback_config(request: Request) -> FeedbackConfig:
    config = getattr(request.app.state, "feedback_config", None)
    if config is None:
        config = get_settings().feedback
        request.app.state.feedback_config = config
    return config


def get_feedback_repo(request: Request) -> FeedbackRepo:
    config = get_feedback_config(request)
    cached_repo = getattr(request.app.state, "feedback_repo", None)

    if cached_repo is not None and cached_repo.path == config.get_data_path():
        return cached_repo

    repo = FeedbackRepo(config.get_data_path(), indent=config.indent)
    request.app.state.feedback_repo = repo
    return repo


def get_share_base_url(request: Request) -> str:
    """Origin + path of the check-in page, used as the prefix of partner links."""
    configured = get_settings().app.public_base_url
    if configured:
        return configured
    return str(request.url_for("checkin_page"))
