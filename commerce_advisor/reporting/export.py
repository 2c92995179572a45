"""
Report writers: structured JSON plus flat CSV / Parquet exports.

``write_report(fmt="json")`` keeps every field of every output (nested models
included) so the file can be re-validated with ``AdvisorReport``.

``flatten_report_for_export()`` is the adapter for spreadsheet / BI tools:
one row per output item with a shared column set, so a single CSV or
Parquet file holds all five advisors' results.

Flat columns
------------
  run_slug, generated_at   - report provenance
  kind                     - restock | pricing | marketing | cross_sell | insight
  rank                     - 1-based position within its advisor's list
  id                       - output id (e.g. ``restock-SKU-1``)
  subject                  - sku, campaign action type, primary product, or insight type
  tier                     - urgency / priority / impact ("" for pricing, cross_sell)
  value                    - headline number: restock quantity, recommended price,
                             expected ROI, expected uplift, or insight current metric
  confidence               - where the output carries one
  detail                   - reasoning / title / recommended skus
"""

from __future__ import annotations

import csv
import json
import logging
from datetime import date
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from commerce_advisor.pipeline.engine import AdvisorReport

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1.0.0"

FLAT_COLUMNS: list[str] = [
    "run_slug", "generated_at", "kind", "rank", "id",
    "subject", "tier", "value", "confidence", "detail",
]

_PARQUET_SCHEMA = pa.schema([
    pa.field("run_slug",     pa.string(),  nullable=False),
    pa.field("generated_at", pa.string(),  nullable=False),
    pa.field("kind",         pa.string(),  nullable=False),
    pa.field("rank",         pa.int32(),   nullable=False),
    pa.field("id",           pa.string(),  nullable=False),
    pa.field("subject",      pa.string(),  nullable=False),
    pa.field("tier",         pa.string(),  nullable=False),
    pa.field("value",        pa.float64(), nullable=True),
    pa.field("confidence",   pa.float64(), nullable=True),
    pa.field("detail",       pa.string(),  nullable=False),
])


# ── Generic writers ───────────────────────────────────────────────────────────


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
    return path


def export_to_parquet(records: list[dict], path: Path) -> Path:
    """Write flat report rows to a snappy-compressed Parquet file.

    ``records`` must use the ``FLAT_COLUMNS`` layout.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    arrays = {
        field.name: pa.array([r.get(field.name) for r in records], type=field.type)
        for field in _PARQUET_SCHEMA
    }
    table = pa.table(arrays, schema=_PARQUET_SCHEMA)
    pq.write_table(table, str(path), compression="snappy")
    return path


# ── Report adapters ───────────────────────────────────────────────────────────


def report_payload(report: AdvisorReport) -> dict:
    """Structured, JSON-safe report payload with a schema version."""
    payload = report.model_dump(mode="json")
    payload["schema_version"] = SCHEMA_VERSION
    payload["counts"] = report.counts()
    return payload


def flatten_report_for_export(report: AdvisorReport) -> list[dict]:
    """Flatten a report into one ``FLAT_COLUMNS`` row per output item."""
    base = {
        "run_slug":     report.run_slug,
        "generated_at": report.generated_at.isoformat(),
    }
    rows: list[dict] = []

    for rank, r in enumerate(report.restock, start=1):
        rows.append({**base, "kind": r.kind, "rank": rank, "id": r.id,
                     "subject": r.sku, "tier": r.urgency.value,
                     "value": float(r.recommended_quantity),
                     "confidence": r.confidence, "detail": r.reasoning})

    for rank, p in enumerate(report.pricing, start=1):
        rows.append({**base, "kind": p.kind, "rank": rank, "id": p.id,
                     "subject": p.sku, "tier": "",
                     "value": p.recommended_price,
                     "confidence": p.confidence, "detail": p.reasoning})

    for rank, m in enumerate(report.marketing, start=1):
        rows.append({**base, "kind": m.kind, "rank": rank, "id": m.id,
                     "subject": m.type.value, "tier": m.priority.value,
                     "value": m.expected_roi,
                     "confidence": None, "detail": m.title})

    for rank, c in enumerate(report.cross_sell, start=1):
        rows.append({**base, "kind": c.kind, "rank": rank, "id": c.id,
                     "subject": c.primary_product, "tier": "",
                     "value": float(c.expected_uplift),
                     "confidence": c.recommended_products[0].confidence,
                     "detail": ", ".join(p.sku for p in c.recommended_products)})

    for rank, i in enumerate(report.insights, start=1):
        rows.append({**base, "kind": i.kind, "rank": rank, "id": i.id,
                     "subject": i.type.value, "tier": i.impact.value,
                     "value": i.metrics.current if i.metrics else None,
                     "confidence": None, "detail": i.title})

    return rows


def write_report(
    report: AdvisorReport,
    output_dir: Path,
    fmt: str = "json",
    run_date: date | None = None,
) -> Path:
    """Write ``report`` to ``output_dir`` as ``advisor_report_{date}.{ext}``.

    Args:
        report:     Output of ``run_advisors()``.
        output_dir: Target directory (created if missing).
        fmt:        ``"json"`` (structured), ``"csv"`` or ``"parquet"`` (flat).
        run_date:   Date label for the filename. Defaults to the report's
                    ``generated_at`` date.

    Returns:
        Path to the written file.

    Raises:
        ValueError: If ``fmt`` is not one of the supported formats.
    """
    if run_date is None:
        run_date = report.generated_at.date()
    stem = f"advisor_report_{run_date.isoformat()}"

    if fmt == "json":
        path = export_to_json(report_payload(report), output_dir / f"{stem}.json")
    elif fmt == "csv":
        path = export_to_csv(
            flatten_report_for_export(report), output_dir / f"{stem}.csv",
            fieldnames=FLAT_COLUMNS,
        )
    elif fmt == "parquet":
        path = export_to_parquet(
            flatten_report_for_export(report), output_dir / f"{stem}.parquet"
        )
    else:
        raise ValueError(f"Unknown report format '{fmt}'. Expected json, csv, or parquet.")

    logger.info("Advisor report written: %s", path)
    return path
