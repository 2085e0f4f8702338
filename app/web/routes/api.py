from __future__ import annotations

import io
import json
import logging
from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import JSONResponse, StreamingResponse

from app.application import api as app_api
from app.infrastructure.config import FeedbackConfig, get_settings
from app.infrastructure.exceptions import (
    CheckInAppError,
    ExportError,
    FeedbackStoreError,
    MultipleValidationError,
    TokenDecodeError,
    ValidationError,
)
from app.infrastructure.repositories_feedback import FeedbackRepo
from app.utils.exports import make_json_export_payload, make_xlsx_export_bytes
from app.web.dependencies import get_feedback_config, get_feedback_repo, get_share_base_url
from app.web.schemas import (
    CheckInRequest,
    CheckInResponse,
    CheckInResult,
    CompareRequest,
    CompareResponse,
    DecodeRequest,
    FeedbackCreatedResponse,
    FeedbackEntry,
    FeedbackSummary,
    Questionnaire,
)

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _validation_http_error(exc: CheckInAppError) -> HTTPException:
    detail: Any = exc.user_message
    if isinstance(exc, MultipleValidationError):
        detail = {"message": exc.user_message, "errors": exc.details.get("errors", [])}
    return HTTPException(status_code=422, detail=detail)


def _require_feature(enabled: bool) -> None:
    if not enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not available")


def _check_input_lengths(payload: dict[str, Any]) -> None:
    limit = get_settings().security.max_input_length
    too_long = [key for key, value in payload.items() if isinstance(value, str) and len(value) > limit]
    if too_long:
        raise _validation_http_error(
            ValidationError(too_long[0], f"must be at most {limit} characters")
        )


def _check_token_length(token: str) -> None:
    if len(token) > get_settings().security.max_token_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=TokenDecodeError(token).user_message,
        )


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/questionnaire", response_model=Questionnaire)
def get_questionnaire() -> Questionnaire:
    return Questionnaire(**app_api.get_questionnaire())


@router.post("/checkin", response_model=CheckInResponse)
def submit_checkin(
    payload: CheckInRequest,
    base_url: str = Depends(get_share_base_url),
) -> CheckInResponse:
    try:
        result = app_api.run_checkin(payload.answers, base_url=base_url)
    except (ValidationError, MultipleValidationError) as exc:
        raise _validation_http_error(exc) from exc
    return CheckInResponse(**result)


@router.post("/share/decode", response_model=CheckInResult)
def decode_share_token(payload: DecodeRequest) -> CheckInResult:
    _check_token_length(payload.token)
    try:
        result = app_api.decode_shared_token(payload.token)
    except TokenDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.user_message) from exc
    return CheckInResult(**app_api.describe_result(result))


@router.post("/compare", response_model=CompareResponse)
def compare_results(payload: CompareRequest) -> CompareResponse:
    _require_feature(get_settings().app.enable_partner_compare)
    _check_token_length(payload.partner_token)
    try:
        comparison = app_api.compare_with_partner(payload.answers, payload.partner_token)
    except TokenDecodeError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.user_message) from exc
    except (ValidationError, MultipleValidationError) as exc:
        raise _validation_http_error(exc) from exc
    except CheckInAppError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.user_message
        ) from exc
    return CompareResponse(**comparison)


@router.post("/feedback", response_model=FeedbackCreatedResponse)
def create_feedback(
    payload: dict[str, Any] | None = Body(default=None),
    repo: FeedbackRepo = Depends(get_feedback_repo),
    config: FeedbackConfig = Depends(get_feedback_config),
) -> FeedbackCreatedResponse:
    _require_feature(get_settings().app.enable_feedback)
    _check_input_lengths(payload or {})
    try:
        entry = app_api.submit_feedback(
            repo, payload or {}, max_suggestion_length=config.max_suggestion_length
        )
    except FeedbackStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.user_message
        ) from exc
    except (ValidationError, MultipleValidationError) as exc:
        raise _validation_http_error(exc) from exc
    return FeedbackCreatedResponse(id=entry.id)


@router.get("/feedback", response_model=list[FeedbackEntry])
def list_feedback(repo: FeedbackRepo = Depends(get_feedback_repo)) -> list[FeedbackEntry]:
    _require_feature(get_settings().app.enable_feedback)
    return [FeedbackEntry(**asdict(entry)) for entry in app_api.list_feedback(repo)]


@router.get("/feedback/summary", response_model=FeedbackSummary)
def feedback_summary(repo: FeedbackRepo = Depends(get_feedback_repo)) -> FeedbackSummary:
    _require_feature(get_settings().app.enable_feedback)
    summary = app_api.summarize_feedback(app_api.list_feedback(repo))
    return FeedbackSummary(**asdict(summary))


@router.get("/feedback/exports/json")
def export_feedback_json(repo: FeedbackRepo = Depends(get_feedback_repo)) -> JSONResponse:
    _require_feature(get_settings().app.enable_feedback_export)
    feedback_df = app_api.export_feedback_frame(app_api.list_feedback(repo))
    payload = json.loads(make_json_export_payload(feedback_df))
    return JSONResponse(content=payload)


@router.get("/feedback/exports/xlsx")
def export_feedback_xlsx(repo: FeedbackRepo = Depends(get_feedback_repo)) -> StreamingResponse:
    _require_feature(get_settings().app.enable_feedback_export)
    feedback_df = app_api.export_feedback_frame(app_api.list_feedback(repo))
    try:
        stream = io.BytesIO(make_xlsx_export_bytes(feedback_df))
    except ExportError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.user_message
        ) from exc
    stream.seek(0)
    headers = {"Content-Disposition": "attachment; filename=checkin_feedback.xlsx"}
    return StreamingResponse(stream, media_type=XLSX_MEDIA_TYPE, headers=headers)
