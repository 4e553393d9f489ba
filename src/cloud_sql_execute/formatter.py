"""Render executeSql responses for stdout.

Result rows go to the returned string; execution metadata is only ever
logged, so piping the output into another tool stays clean.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def format_results_json(response: dict[str, Any]) -> str:
    """Format the full API response as indented JSON."""
    return json.dumps(response, indent=2, ensure_ascii=False) + "\n"


def _cell_text(cell: dict[str, Any] | None) -> str:
    """Cell value as text; null cells render empty."""
    if not cell:
        return ""
    value = cell.get("value")
    return "" if value is None else str(value)


def _format_result_set(result: dict[str, Any]) -> list[str]:
    columns = result.get("columns")
    rows = result.get("rows")

    if columns is not None and rows is not None:
        header = "\t".join(col.get("name") or "" for col in columns)
        lines = [header, "-" * len(header)]
        for row in rows:
            lines.append("\t".join(_cell_text(cell) for cell in row.get("values") or []))
        return lines

    message = result.get("message")
    if message:
        return [message]

    return []


def format_results_text(response: dict[str, Any]) -> str:
    """Format every result set as tab-separated lines."""
    lines: list[str] = []
    for result in response.get("results") or []:
        lines.extend(_format_result_set(result))
    return "".join(f"{line}\n" for line in lines)


def format_response(response: dict[str, Any], mode: str) -> str:
    """Render ``response`` in ``mode`` ("json" or "text")."""
    if mode == "json":
        return format_results_json(response)
    return format_results_text(response)


def log_metadata(response: dict[str, Any], log: logging.Logger = logger) -> None:
    """Report execution time and affected rows on the diagnostic channel."""
    metadata = response.get("metadata")
    if metadata is None:
        return

    log.info("Execution time: %s", metadata.get("sqlStatementExecutionTime") or "unknown")
    if metadata.get("rowsAffected") is not None:
        log.info("Rows affected: %s", metadata["rowsAffected"])
