"""Shape repair for v2 documents.

``validate_v2_data`` is a lossy, one-way sanitizer: every field that fails its
shape contract is replaced with a default, one field at a time. It does not
check that favorites, groups, holdings or pending trades point at funds that
exist; ``check_v2_data`` reports those without repairing them.
"""
from __future__ import annotations

import math
from typing import List, Tuple

import structlog

from ..config import settings
from ..ids import IdGenerator, generate_id
from ..utils import as_list, is_hashable, now_utc_iso
from .detection import SCHEMA_VERSION
from .factory import DEFAULT_REFRESH_MS, create_empty_v2_data, create_portfolio

log = structlog.get_logger()

MIN_REFRESH_MS = 5000
LIST_FIELDS = ("funds", "favorites", "groups", "pendingTrades")


def normalize_refresh_ms(val) -> int:
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return DEFAULT_REFRESH_MS
    if math.isnan(val) or val < MIN_REFRESH_MS:
        return DEFAULT_REFRESH_MS
    return val


def normalize_collections(source: dict) -> dict:
    """The five ledger collections of ``source``, each defaulted by its own type check."""
    out = {name: source.get(name) if isinstance(source.get(name), list) else [] for name in LIST_FIELDS}
    holdings = source.get("holdings")
    out["holdings"] = holdings if isinstance(holdings, dict) else {}
    return out


def normalize_portfolio(value, *, id_generator: IdGenerator | None = None) -> dict:
    p = value if isinstance(value, dict) else {}
    cols = normalize_collections(p)
    return {
        "id": p.get("id") or generate_id(id_generator),
        "name": p.get("name") or settings.unnamed_portfolio_name,
        "createdAt": p.get("createdAt") or now_utc_iso(),
        "funds": cols["funds"],
        "favorites": cols["favorites"],
        "groups": cols["groups"],
        "holdings": cols["holdings"],
        "pendingTrades": cols["pendingTrades"],
    }


def validate_v2_data(value, *, id_generator: IdGenerator | None = None) -> dict:
    if not isinstance(value, dict):
        log.info("v2_document_repaired", reason="not_an_object", input_type=type(value).__name__)
        return create_empty_v2_data(id_generator=id_generator)

    portfolios = value.get("portfolios")
    if isinstance(portfolios, list) and portfolios:
        repaired = [normalize_portfolio(p, id_generator=id_generator) for p in portfolios]
    else:
        log.info("v2_document_repaired", reason="no_portfolios")
        repaired = [create_portfolio(settings.default_portfolio_name, id_generator=id_generator)]

    return {
        "version": SCHEMA_VERSION,
        "refreshMs": normalize_refresh_ms(value.get("refreshMs")),
        "portfolios": repaired,
    }


def _portfolio_problems(p, idx: int) -> List[str]:
    label = f"portfolios[{idx}]"
    if not isinstance(p, dict):
        return [f"{label} is not an object"]
    reasons = []
    for key in ("id", "name", "createdAt"):
        if not p.get(key):
            reasons.append(f"missing {label}.{key}")
    for key in LIST_FIELDS:
        if not isinstance(p.get(key), list):
            reasons.append(f"{label}.{key} is not a list")
    if not isinstance(p.get("holdings"), dict):
        reasons.append(f"{label}.holdings is not an object")

    codes = set()
    for fund in as_list(p.get("funds")):
        code = fund.get("code") if isinstance(fund, dict) else None
        if not code or not is_hashable(code):
            reasons.append(f"{label}.funds has an entry without code")
        elif code in codes:
            reasons.append(f"{label}.funds duplicate code {code}")
        else:
            codes.add(code)

    dangling = [c for c in as_list(p.get("favorites")) if not (is_hashable(c) and c in codes)]
    if dangling:
        reasons.append(f"{label}.favorites dangling {dangling}")
    for group in as_list(p.get("groups")):
        if not isinstance(group, dict):
            continue
        dangling = [c for c in as_list(group.get("codes")) if not (is_hashable(c) and c in codes)]
        if dangling:
            reasons.append(f"{label}.groups[{group.get('id')}] dangling {dangling}")
    holdings = p.get("holdings")
    if isinstance(holdings, dict):
        dangling = [k for k in holdings if k not in codes]
        if dangling:
            reasons.append(f"{label}.holdings dangling {dangling}")
    for trade in as_list(p.get("pendingTrades")):
        code = trade.get("fundCode") if isinstance(trade, dict) else None
        if not (is_hashable(code) and code in codes):
            reasons.append(f"{label}.pendingTrades dangling fundCode {code}")
    return reasons


def check_v2_data(doc) -> Tuple[bool, List[str]]:
    if not isinstance(doc, dict):
        return False, ["document is not an object"]
    reasons = []
    if doc.get("version") != SCHEMA_VERSION:
        reasons.append(f"version {doc.get('version')!r} != {SCHEMA_VERSION}")
    refresh = doc.get("refreshMs")
    if normalize_refresh_ms(refresh) != refresh:
        reasons.append(f"refreshMs {refresh!r} invalid")
    portfolios = doc.get("portfolios")
    if not isinstance(portfolios, list) or not portfolios:
        reasons.append("portfolios is empty")
    else:
        ids = set()
        for idx, p in enumerate(portfolios):
            reasons.extend(_portfolio_problems(p, idx))
            pid = p.get("id") if isinstance(p, dict) else None
            if pid and isinstance(pid, str):
                if pid in ids:
                    reasons.append(f"duplicate portfolio id {pid}")
                ids.add(pid)
    return (len(reasons) == 0), reasons
