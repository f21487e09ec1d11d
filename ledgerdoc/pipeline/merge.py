"""Fold a legacy (v1) document into an existing v2 portfolio.

Every step returns new containers; neither input is mutated. After a merge the
portfolio holds no duplicate fund codes, and favorites, group codes, holding
keys and pending trades only reference funds that survived the merge.
"""
from __future__ import annotations

from typing import Iterable

import structlog

from ..utils import as_list, as_mapping, is_hashable

log = structlog.get_logger()


def _fund_code(fund):
    code = fund.get("code") if isinstance(fund, dict) else None
    return code if is_hashable(code) else None


def _unique_codes(codes: Iterable, allowed: set) -> list:
    seen = {}
    for code in codes:
        if is_hashable(code) and code in allowed:
            seen.setdefault(code, None)
    return list(seen)


def merge_funds(existing: list, incoming: list) -> list:
    """Existing funds in order, then incoming funds with a new truthy code.

    A repeated code keeps its first fund. Existing entries without a code are
    kept as they are; incoming ones are dropped.
    """
    codes = set()
    merged = []
    for fund in existing:
        code = _fund_code(fund)
        if code:
            if code in codes:
                continue
            codes.add(code)
        merged.append(fund)
    for fund in incoming:
        code = _fund_code(fund)
        if not code or code in codes:
            continue
        codes.add(code)
        merged.append(fund)
    return merged


def fund_codes(funds: list) -> set:
    return {code for code in map(_fund_code, funds) if code is not None}


def merge_favorites(existing: list, incoming: list, all_codes: set) -> list:
    return _unique_codes([*existing, *incoming], all_codes)


def overlay_group(group: dict, incoming: dict | None, all_codes: set) -> dict:
    """``group`` with its codes unioned with ``incoming``'s; no other field changes."""
    incoming_codes = as_list(incoming.get("codes")) if incoming else []
    return {**group, "codes": _unique_codes([*as_list(group.get("codes")), *incoming_codes], all_codes)}


def merge_groups(existing: list, incoming: list, all_codes: set) -> list:
    merged = [overlay_group(g, None, all_codes) if isinstance(g, dict) else g for g in existing]
    for group in incoming:
        if not isinstance(group, dict):
            continue
        idx = next(
            (i for i, g in enumerate(merged) if isinstance(g, dict) and g.get("id") == group.get("id")),
            None,
        )
        if idx is not None:
            merged[idx] = overlay_group(merged[idx], group, all_codes)
        else:
            merged.append({**group, "codes": _unique_codes(as_list(group.get("codes")), all_codes)})
    return merged


def merge_holdings(existing: dict, incoming: dict, all_codes: set) -> dict:
    merged = {**existing, **incoming}
    return {code: holding for code, holding in merged.items() if code in all_codes}


def _key_part(val) -> str:
    if not val:
        return ""
    if val is True:
        return "true"
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


def pending_trade_key(trade: dict) -> tuple:
    if trade.get("id"):
        return ("id", _key_part(trade["id"]))
    return (
        "k",
        _key_part(trade.get("fundCode")),
        _key_part(trade.get("type")),
        _key_part(trade.get("date")),
        _key_part(trade.get("share")),
        _key_part(trade.get("amount")),
        1 if trade.get("isAfter3pm") else 0,
    )


def merge_pending_trades(existing: list, incoming: list, all_codes: set) -> list:
    """Dedup by ``pending_trade_key``; later trades (incoming) win, first-seen order is kept."""
    by_key = {}
    for trade in [*existing, *incoming]:
        if not isinstance(trade, dict):
            continue
        code = trade.get("fundCode")
        if not (is_hashable(code) and code in all_codes):
            continue
        by_key[pending_trade_key(trade)] = trade
    return list(by_key.values())


def merge_old_data_to_portfolio(portfolio, legacy_doc):
    if not isinstance(portfolio, dict) or not isinstance(legacy_doc, dict):
        return portfolio

    funds = merge_funds(as_list(portfolio.get("funds")), as_list(legacy_doc.get("funds")))
    all_codes = fund_codes(funds)
    merged = {
        **portfolio,
        "funds": funds,
        "favorites": merge_favorites(
            as_list(portfolio.get("favorites")), as_list(legacy_doc.get("favorites")), all_codes
        ),
        "groups": merge_groups(as_list(portfolio.get("groups")), as_list(legacy_doc.get("groups")), all_codes),
        "holdings": merge_holdings(
            as_mapping(portfolio.get("holdings")), as_mapping(legacy_doc.get("holdings")), all_codes
        ),
        "pendingTrades": merge_pending_trades(
            as_list(portfolio.get("pendingTrades")), as_list(legacy_doc.get("pendingTrades")), all_codes
        ),
    }
    log.info(
        "legacy_document_merged",
        portfolio_id=portfolio.get("id"),
        funds_before=len(as_list(portfolio.get("funds"))),
        funds_after=len(funds),
        pending_trades=len(merged["pendingTrades"]),
    )
    return merged
