from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Query

from bilemo.core.config import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT

INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
# OFFSET precisa caber num BIGINT assinado
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _coerce_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    candidate = str(raw).strip()
    if INTEGER_PATTERN.fullmatch(candidate):
        return int(candidate)
    return default


def resolve_page_params(
    page: Any = None,
    limit: Any = None,
    *,
    default_limit: int = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
) -> PageParams:
    """Normaliza page/limit vindos da query string.

    Valores ausentes ou não inteiros usam o default; valores < 1 viram 1;
    limit acima de ``max_limit`` é truncado e page é limitada para que o
    offset caiba no banco (páginas além do fim voltam vazias).
    """
    resolved_limit = max(_coerce_int(limit, default_limit), 1)
    resolved_limit = min(resolved_limit, max_limit)
    resolved_page = max(_coerce_int(page, DEFAULT_PAGE), 1)
    resolved_page = min(resolved_page, MAX_OFFSET // resolved_limit)
    return PageParams(page=resolved_page, limit=resolved_limit)


def paginate(query: Query, params: PageParams) -> list:
    return query.offset(params.offset).limit(params.limit).all()
