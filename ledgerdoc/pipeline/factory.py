from __future__ import annotations

from ..config import settings
from ..ids import IdGenerator, generate_id
from ..utils import now_utc_iso
from .detection import SCHEMA_VERSION

DEFAULT_REFRESH_MS = 30000


def empty_collections() -> dict:
    return {
        "funds": [],
        "favorites": [],
        "groups": [],
        "holdings": {},
        "pendingTrades": [],
    }


def create_portfolio(name: str | None = None, *, id_generator: IdGenerator | None = None) -> dict:
    return {
        "id": generate_id(id_generator),
        "name": name or settings.new_portfolio_name,
        "createdAt": now_utc_iso(),
        **empty_collections(),
    }


def create_empty_v2_data(*, id_generator: IdGenerator | None = None) -> dict:
    return {
        "version": SCHEMA_VERSION,
        "refreshMs": DEFAULT_REFRESH_MS,
        "portfolios": [create_portfolio(settings.default_portfolio_name, id_generator=id_generator)],
    }
