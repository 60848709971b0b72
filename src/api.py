"""
FastAPI backend for the habit dashboard insight panel.

Route handlers are defined here; DB helpers live in routes/helpers.py and
window loading in pipeline/loader.py.
"""

from __future__ import annotations

import logging
import os
import datetime as dt
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from insight_engine import InsightConfig, InsightEngine
from pipeline.loader import load_components_with_goals, load_insight_inputs, load_week_records
from pipeline.migrations import schema_audit
from routes.helpers import _conn_str, _fetch_one
from stats_calculator import get_week_bounds, weekly_goal_progress

log = logging.getLogger("api")


# ─── App setup ─────────────────────────────────────────────

app = FastAPI(title="Pulse Insights API", version="1.0.0")

_origin_env = os.getenv("FRONTEND_ORIGINS", "")
_origins = [o.strip() for o in _origin_env.split(",") if o.strip()] or [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

_config = InsightConfig.from_env()


class PulseCheckIn(BaseModel):
    date: Union[dt.datetime, dt.date]
    energyLevel: int = Field(ge=1, le=5)
    moodLevel: int = Field(ge=1, le=5)


class ActivityRecordIn(BaseModel):
    componentId: str = Field(min_length=1)
    date: Union[dt.datetime, dt.date]
    effortLevel: Literal["low", "medium", "high"] = "medium"


class ComponentIn(BaseModel):
    id: str = Field(min_length=1)
    name: str


class AnalyzeRequest(BaseModel):
    pulseChecks: List[PulseCheckIn] = Field(default_factory=list)
    activityRecords: List[ActivityRecordIn] = Field(default_factory=list)
    components: List[ComponentIn] = Field(default_factory=list)


# ─── Routes ────────────────────────────────────────────────

@app.get("/")
def root() -> Dict[str, Any]:
    return {"service": "pulse-insights-api", "status": "ok"}


@app.get("/health-check")
def health_check() -> JSONResponse:
    try:
        _fetch_one("SELECT 1 AS ok")
        return JSONResponse({"status": "Online", "message": "Online"})
    except Exception as e:
        return JSONResponse(
            status_code=200,
            content={
                "status": "Waking up",
                "message": f"Service starting or DB unavailable: {e}",
            },
        )


@app.get("/api/v1/insights")
def insights(days: int = Query(default=_config.window_days, ge=1, le=30)) -> Dict[str, Any]:
    """Correlations, summary and weekday pattern for the trailing window."""
    try:
        pulse_checks, records, components = load_insight_inputs(days=days)
        report = InsightEngine(_config).analyze(pulse_checks, records, components)
        return report.to_dict()
    except Exception as e:
        log.exception("Insight computation failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/v1/insights/analyze")
def insights_analyze(body: AnalyzeRequest) -> Dict[str, Any]:
    """Run the engine over caller-supplied, already window-filtered data."""
    report = InsightEngine(_config).analyze(
        [pc.model_dump() for pc in body.pulseChecks],
        [r.model_dump() for r in body.activityRecords],
        [c.model_dump() for c in body.components],
    )
    return report.to_dict()


@app.get("/api/v1/components/weekly-progress")
def components_weekly_progress(ref_date: Optional[dt.date] = Query(default=None)) -> Dict[str, Any]:
    try:
        start, end = get_week_bounds(ref_date)
        components = load_components_with_goals()
        records = load_week_records(start, end)
        return {
            "week_start": start.date().isoformat(),
            "week_end": end.date().isoformat(),
            "data": weekly_goal_progress(components, records, ref=start),
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/v1/admin/migration-audit")
def migration_audit() -> Dict[str, Any]:
    try:
        return schema_audit(_conn_str())
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
