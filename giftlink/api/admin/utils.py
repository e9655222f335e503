from __future__ import annotations

import json
from typing import Any

from fastapi import HTTPException


def parse_filter(filter_param: str | None) -> dict[str, Any]:
    if not filter_param:
        return {}
    try:
        parsed = json.loads(filter_param)
    except json.JSONDecodeError as exc:
        raise HTTPException(status_code=400, detail="Invalid filter") from exc
    return parsed if isinstance(parsed, dict) else {}


def int_filter(filters: dict[str, Any], key: str) -> int | None:
    raw = filters.get(key)
    if raw in (None, ""):
        return None
    if isinstance(raw, bool):
        raise HTTPException(status_code=400, detail=f"Invalid {key} filter")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid {key} filter") from exc


def list_response(items: list[Any], total: int) -> dict[str, Any]:
    return {"data": items, "total": total}
