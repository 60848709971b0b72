"""
Pulse Insights Report
=====================
Loads the trailing window of pulse checks and records from PostgreSQL,
runs the insight engine and prints the report.

Usage:
    python insights_report.py                  # JSON report, last 30 days
    python insights_report.py --format text    # Plain-text digest
    python insights_report.py --init-schema    # Create tables first
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
log = logging.getLogger("insights_report")

from insight_engine import InsightConfig, InsightEngine
from pipeline.loader import load_insight_inputs
from pipeline.migrations import ensure_startup_schema
from pipeline.summary_builder import build_insight_digest


def run_report(days: int, output_format: str = "json", init_schema: bool = False) -> str:
    """Load, analyse and render; raises on data-access failure."""
    if init_schema:
        log.info("Running startup migrations...")
        ensure_startup_schema()

    config = InsightConfig.from_env()
    pulse_checks, records, components = load_insight_inputs(days=days)
    report = InsightEngine(config).analyze(pulse_checks, records, components).to_dict()

    if output_format == "text":
        return build_insight_digest(report)
    return json.dumps(report, indent=2)


def main():
    parser = argparse.ArgumentParser(description="Pulse insights report")
    parser.add_argument("--days", type=int, default=30,
                        help="Trailing window in days (default: 30, max: 30)")
    parser.add_argument("--format", choices=["json", "text"], default="json",
                        help="Output format (default: json)")
    parser.add_argument("--init-schema", action="store_true",
                        help="Create tables before loading")
    args = parser.parse_args()

    if not 1 <= args.days <= 30:
        parser.error("--days must be between 1 and 30")

    try:
        print(run_report(args.days, args.format, args.init_schema))
    except Exception as e:
        log.exception("Insight report failed: %s", e)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
