from __future__ import annotations

import structlog

from ..config import settings
from ..ids import IdGenerator, generate_id
from ..utils import now_utc_iso
from .detection import SCHEMA_VERSION, document_version
from .validation import normalize_collections, normalize_refresh_ms

log = structlog.get_logger()


def migrate_to_v2(legacy_doc, portfolio_name: str | None = None, *, id_generator: IdGenerator | None = None) -> dict:
    """Lift a v1 document into a v2 document holding exactly one portfolio.

    Collections are carried over as-is (no dedup, no reference checks); only
    their container types are defaulted. Each call mints a new portfolio id.
    """
    old = legacy_doc if isinstance(legacy_doc, dict) else {}
    portfolio = {
        "id": generate_id(id_generator),
        "name": portfolio_name if portfolio_name is not None else settings.default_portfolio_name,
        "createdAt": now_utc_iso(),
        **normalize_collections(old),
    }
    log.info(
        "legacy_document_migrated",
        from_version=document_version(old),
        portfolio_id=portfolio["id"],
        funds=len(portfolio["funds"]),
        holdings=len(portfolio["holdings"]),
        pending_trades=len(portfolio["pendingTrades"]),
    )
    return {
        "version": SCHEMA_VERSION,
        "refreshMs": normalize_refresh_ms(old.get("refreshMs")),
        "portfolios": [portfolio],
    }
