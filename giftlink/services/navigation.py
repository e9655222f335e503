from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote, unquote

from giftlink.core.config import settings


class View(str, Enum):
    dashboard = "dashboard"
    create = "create"
    orders = "orders"
    duplicates = "duplicates"
    claim = "claim"


@dataclass(frozen=True)
class Route:
    view: View
    params: dict[str, str] = field(default_factory=dict)


ROUTE_PARAMS: dict[View, tuple[str, ...]] = {
    View.dashboard: (),
    View.create: (),
    View.orders: (),
    View.duplicates: (),
    View.claim: ("slug",),
}

DEFAULT_ROUTE = Route(View.dashboard)


def resolve_location(location: str | None) -> Route:
    path = (location or "").strip()
    path = path.split("?", 1)[0].lstrip("#").strip("/")
    if not path:
        return DEFAULT_ROUTE
    head, *rest = [unquote(part) for part in path.split("/") if part]
    try:
        view = View(head)
    except ValueError:
        return DEFAULT_ROUTE
    names = ROUTE_PARAMS[view]
    if len(rest) != len(names):
        return DEFAULT_ROUTE
    return Route(view, dict(zip(names, rest)))


def build_location(view: View, **params: str) -> str:
    names = ROUTE_PARAMS[view]
    missing = [name for name in names if not params.get(name)]
    if missing:
        raise ValueError(f"Missing route parameters for {view.value}: {', '.join(missing)}")
    if view is View.dashboard:
        return "/"
    parts = [view.value, *(quote(params[name], safe="") for name in names)]
    return "/" + "/".join(parts)


def claim_link(slug: str) -> str:
    base = settings.PUBLIC_CLAIM_BASE_URL.rstrip("/")
    return f"{base}{build_location(View.claim, slug=slug)}"
