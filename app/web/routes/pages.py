from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.application import api as app_api
from app.domain.catalog import TIER_STYLES
from app.infrastructure.config import get_settings
from app.infrastructure.repositories_feedback import FeedbackRepo
from app.web.dependencies import get_feedback_repo

router = APIRouter(tags=["pages"])

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


def _base_context(request: Request) -> dict[str, object]:
    settings = get_settings()
    return {
        "request": request,
        "app_title": settings.app.title,
        "feedback_enabled": settings.app.enable_feedback,
        "compare_enabled": settings.app.enable_partner_compare,
    }


@router.get("/", response_class=HTMLResponse, name="checkin_page")
async def checkin_page(request: Request) -> HTMLResponse:
    context = _base_context(request)
    context["questionnaire"] = app_api.get_questionnaire()
    context["tiers"] = TIER_STYLES
    return templates.TemplateResponse(request, "index.html", context)


@router.get("/insights", response_class=HTMLResponse)
def insights_page(
    request: Request,
    repo: FeedbackRepo = Depends(get_feedback_repo),
) -> HTMLResponse:
    if not get_settings().app.enable_feedback:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not available")
    context = _base_context(request)
    summary = app_api.summarize_feedback(app_api.list_feedback(repo))
    total = summary.total

    def pct(n: int) -> str:
        return f"{round(n / total * 100)}%" if total else "-"

    context.update({"summary": summary, "pct": pct})
    return templates.TemplateResponse(request, "insights.html", context)
