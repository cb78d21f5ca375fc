from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from core.config import settings


logger = logging.getLogger(__name__)


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


@dataclass(frozen=True)
class SortField:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class ListParams:
    """Normalized list query (React-Admin style).

    `filter` is already decoded; `ids` is set only for getMany calls.
    """

    page: int = 1
    per_page: int = 25
    sort: tuple[SortField, ...] = ()
    filter: dict[str, Any] = field(default_factory=dict)
    ids: tuple[str, ...] | None = None
    q: str | None = None

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def take(self) -> int:
        return self.per_page


def camel_to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def _to_int(raw: Any, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return default


def parse_sort(raw: str | None) -> tuple[SortField, ...]:
    if not raw:
        return ()
    out: list[SortField] = []
    for part in str(raw).split(","):
        part = part.strip()
        if not part:
            continue
        if part.startswith("-"):
            name = part[1:].strip()
            if name:
                out.append(SortField(field=name, descending=True))
        else:
            out.append(SortField(field=part.lstrip("+"), descending=False))
    return tuple(out)


def parse_filter(raw: str | None) -> dict[str, Any]:
    # Invalid JSON is not an error: the list is returned unfiltered.
    if not raw:
        return {}
    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Ignoring invalid filter JSON: %r", raw)
        return {}
    if not isinstance(decoded, dict):
        logger.debug("Ignoring non-object filter: %r", raw)
        return {}
    return decoded


def parse_ids(raw: str | None) -> tuple[str, ...] | None:
    if raw is None:
        return None
    ids = tuple(p.strip() for p in str(raw).split(",") if p.strip())
    return ids or None


def parse_list_params(
    *,
    page: Any = None,
    per_page: Any = None,
    page_size: Any = None,
    sort: str | None = None,
    filter: str | None = None,
    ids: str | None = None,
    q: str | None = None,
) -> ListParams:
    max_size = int(settings.max_page_size)
    default_size = min(int(settings.default_page_size), max_size)

    page_n = max(1, _to_int(page, 1))
    # perPage wins over its pageSize alias when both are sent.
    size_raw = per_page if per_page not in (None, "") else page_size
    size_n = _to_int(size_raw, default_size)
    size_n = max(1, min(size_n, max_size))

    filters = parse_filter(filter)

    search = (q or "").strip() or None
    if search is None:
        for key in ("q", "search"):
            value = filters.get(key)
            if isinstance(value, str) and value.strip():
                search = value.strip()
                break

    return ListParams(
        page=page_n,
        per_page=size_n,
        sort=parse_sort(sort),
        filter=filters,
        ids=parse_ids(ids),
        q=search,
    )
