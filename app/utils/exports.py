from __future__ import annotations

import io
import json
from datetime import datetime, timezone

import pandas as pd

from app.application.api import FEEDBACK_COLUMNS
from app.infrastructure.exceptions import ExportError


def make_json_export_payload(feedback_df: pd.DataFrame) -> str:
    payload = {
        "exported_at": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "count": int(len(feedback_df)),
        "feedback": feedback_df.to_dict(orient="records"),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def make_xlsx_export_bytes(feedback_df: pd.DataFrame | None) -> bytes:
    """Create a single-sheet Excel export of collected feedback."""

    if feedback_df is None:
        feedback_df = pd.DataFrame(columns=FEEDBACK_COLUMNS)

    combined = feedback_df.copy()

    # Guarantee column ordering and presence for consumers opening the sheet in Excel
    for column in FEEDBACK_COLUMNS:
        if column not in combined.columns:
            combined[column] = pd.NA

    combined = combined[FEEDBACK_COLUMNS]

    bio = io.BytesIO()
    try:
        with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
            combined.to_excel(writer, index=False, sheet_name="Feedback")
    except (ValueError, OSError) as exc:
        raise ExportError(f"Could not build workbook: {exc}", "xlsx") from exc
    return bio.getvalue()
