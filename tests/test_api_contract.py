"""
Contract/behavior tests for src/api.py.

These tests mock DB access and validate:
- insight report payload shape for the trailing window
- caller-supplied analysis with request validation
- weekly goal progress
- health-check and error mapping
"""

import os
import sys
from datetime import date, timedelta

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))
import api as api_mod


def _window_inputs():
    start = date(2026, 3, 2)
    pulse_checks = [
        {"date": (start + timedelta(days=i)).isoformat(), "energyLevel": 3, "moodLevel": m}
        for i, m in enumerate([3, 2, 5, 2, 5, 2, 5, 2])
    ]
    records = []
    for i, h in enumerate([0, 2, 0, 2, 0, 2, 0, 2]):
        records += [{
            "componentId": "c1",
            "date": (start + timedelta(days=i)).isoformat(),
            "effortLevel": "high",
        }] * h
    components = [{"id": "c1", "name": "Running"}]
    return pulse_checks, records, components


def test_insights_payload_shape(monkeypatch):
    seen = {}

    def fake_load(days):
        seen["days"] = days
        return _window_inputs()

    monkeypatch.setattr(api_mod, "load_insight_inputs", fake_load)
    out = api_mod.insights(days=30)

    assert seen["days"] == 30
    assert set(out) == {"correlations", "summary", "weeklyPattern"}
    assert set(out["summary"]) == {"averageEnergy", "averageMood", "bestDayOfWeek", "worstDayOfWeek"}
    for item in out["correlations"]:
        assert set(item) == {"type", "insight", "confidence", "dataPoints", "details"}
        assert item["type"] in ("same_day", "next_day", "weekly_pattern")
        assert item["confidence"] in ("low", "medium", "high")
    for row in out["weeklyPattern"]:
        assert set(row) == {"dayOfWeek", "avgEnergy", "avgMood", "count"}
    assert [r["dayOfWeek"] for r in out["weeklyPattern"]] == list(range(7))
    assert any(c["details"].get("activityType") == "Running" for c in out["correlations"])


def test_insights_insufficient_data(monkeypatch):
    monkeypatch.setattr(api_mod, "load_insight_inputs", lambda days: ([], [], []))
    out = api_mod.insights(days=30)
    assert out == {
        "correlations": [],
        "summary": {
            "averageEnergy": 0,
            "averageMood": 0,
            "bestDayOfWeek": None,
            "worstDayOfWeek": None,
        },
        "weeklyPattern": [],
    }


def test_insights_load_failure_maps_to_500(monkeypatch):
    def boom(days):
        raise RuntimeError("POSTGRES_CONNECTION_STRING is not set")

    monkeypatch.setattr(api_mod, "load_insight_inputs", boom)
    with pytest.raises(HTTPException) as exc:
        api_mod.insights(days=30)
    assert exc.value.status_code == 500
    assert "POSTGRES_CONNECTION_STRING" in exc.value.detail


def test_analyze_accepts_supplied_collections():
    pulse_checks, records, components = _window_inputs()
    body = api_mod.AnalyzeRequest(
        pulseChecks=pulse_checks,
        activityRecords=records,
        components=components,
    )
    out = api_mod.insights_analyze(body)
    kinds = [c["type"] for c in out["correlations"]]
    assert kinds == ["same_day", "next_day", "next_day", "weekly_pattern"]
    assert out["summary"]["bestDayOfWeek"] == "Sunday"


def test_analyze_accepts_timestamp_dates():
    body = api_mod.AnalyzeRequest(
        pulseChecks=[
            {"date": f"2026-03-0{i + 1}T00:00:00.000Z", "energyLevel": 3, "moodLevel": 3}
            for i in range(5)
        ],
    )
    out = api_mod.insights_analyze(body)
    assert out["summary"]["averageMood"] == 3.0


def test_analyze_pairs_days_logged_at_different_times():
    pulse_checks, records, components = _window_inputs()
    for i, pc in enumerate(pulse_checks):
        pc["date"] = f"{pc['date']}T0{7 + i % 3}:{15 * (i % 4):02d}:00Z"
    for rec in records:
        rec["date"] = f"{rec['date']}T18:30:00Z"
    body = api_mod.AnalyzeRequest(
        pulseChecks=pulse_checks,
        activityRecords=records,
        components=components,
    )
    out = api_mod.insights_analyze(body)
    next_day = [c for c in out["correlations"] if c["type"] == "next_day"]
    assert len(next_day) == 2
    assert all(c["dataPoints"] == 7 for c in next_day)


def test_analyze_rejects_out_of_range_levels():
    with pytest.raises(ValidationError):
        api_mod.AnalyzeRequest(
            pulseChecks=[{"date": "2026-03-02", "energyLevel": 3, "moodLevel": 6}],
        )


def test_analyze_rejects_unknown_effort():
    with pytest.raises(ValidationError):
        api_mod.AnalyzeRequest(
            activityRecords=[{"componentId": "c1", "date": "2026-03-02", "effortLevel": "extreme"}],
        )


def test_analyze_effort_defaults_to_medium():
    body = api_mod.AnalyzeRequest(
        activityRecords=[{"componentId": "c1", "date": "2026-03-02"}],
    )
    assert body.activityRecords[0].effortLevel == "medium"


def test_weekly_progress(monkeypatch):
    monkeypatch.setattr(
        api_mod,
        "load_components_with_goals",
        lambda: [
            {"id": "c1", "name": "Running", "minWeeklyFreq": 3},
            {"id": "c2", "name": "Reading", "minWeeklyFreq": 2},
        ],
    )
    seen = {}

    def fake_week_records(start, end):
        seen["bounds"] = (start.date(), end.date())
        return [
            {"componentId": "c1", "date": "2026-03-02"},
            {"componentId": "c1", "date": "2026-03-04"},
            {"componentId": "c2", "date": "2026-03-08"},
            {"componentId": "c2", "date": "2026-03-05"},
            {"componentId": "c2", "date": "2026-03-06"},
        ]

    monkeypatch.setattr(api_mod, "load_week_records", fake_week_records)
    out = api_mod.components_weekly_progress(ref_date=date(2026, 3, 4))

    assert seen["bounds"] == (date(2026, 3, 2), date(2026, 3, 8))
    assert out["week_start"] == "2026-03-02"
    assert out["week_end"] == "2026-03-08"
    by_id = {row["id"]: row for row in out["data"]}
    assert by_id["c1"]["currentWeekLogs"] == 2
    assert by_id["c1"]["successRate"] == 66.7
    assert by_id["c2"]["currentWeekLogs"] == 3
    assert by_id["c2"]["successRate"] == 100


def test_health_check_reports_waking_up(monkeypatch):
    def boom(_q, params=None):
        raise RuntimeError("db down")

    monkeypatch.setattr(api_mod, "_fetch_one", boom)
    resp = api_mod.health_check()
    assert resp.status_code == 200
    assert b"Waking up" in resp.body


def test_health_check_online(monkeypatch):
    monkeypatch.setattr(api_mod, "_fetch_one", lambda _q, params=None: {"ok": 1})
    resp = api_mod.health_check()
    assert b"Online" in resp.body


def test_migration_audit_passthrough(monkeypatch):
    monkeypatch.setattr(api_mod, "_conn_str", lambda: "postgresql://x")
    monkeypatch.setattr(api_mod, "schema_audit", lambda cs: {"ok": True, "conn": cs})
    assert api_mod.migration_audit() == {"ok": True, "conn": "postgresql://x"}


def test_root():
    assert api_mod.root()["status"] == "ok"
