"""The host's load sequence: detect, migrate or merge, then always validate."""
from __future__ import annotations

import structlog

from ..ids import IdGenerator
from ..schemas import PreparedDocument
from .detection import is_legacy_data
from .merge import merge_old_data_to_portfolio
from .migration import migrate_to_v2
from .validation import check_v2_data, validate_v2_data

log = structlog.get_logger()


def _merge_into(base, portfolio_id, legacy: dict, portfolio_name, *, id_generator: IdGenerator | None):
    """Merge ``legacy`` into ``base``; a missing target gets the legacy data as a new portfolio."""
    doc = validate_v2_data(base, id_generator=id_generator)
    if portfolio_id:
        for idx, portfolio in enumerate(doc["portfolios"]):
            if portfolio["id"] == portfolio_id:
                doc["portfolios"][idx] = merge_old_data_to_portfolio(portfolio, legacy)
                return doc, "merged", portfolio_id, []
        log.warning("merge_target_missing", portfolio_id=portfolio_id)
    added = migrate_to_v2(legacy, portfolio_name, id_generator=id_generator)["portfolios"][0]
    doc["portfolios"].append(added)
    problems = [f"merge target {portfolio_id} not found"] if portfolio_id else []
    return doc, "migrated", added["id"], problems


def prepare_document(
    raw,
    *,
    base=None,
    target_portfolio_id: str | None = None,
    portfolio_name: str | None = None,
    id_generator: IdGenerator | None = None,
) -> PreparedDocument:
    """Turn whatever the host loaded into a trusted v2 document.

    Legacy input is merged into ``target_portfolio_id`` of ``base``. When
    ``base`` is given but has no such portfolio, the legacy data is added to it
    as a new portfolio; ``base``'s portfolios are never dropped. Without
    ``base`` legacy input becomes a new document.
    """
    notes = []
    if is_legacy_data(raw):
        if base is not None:
            doc, action, portfolio_id, notes = _merge_into(
                base, target_portfolio_id, raw, portfolio_name, id_generator=id_generator
            )
        else:
            doc = migrate_to_v2(raw, portfolio_name, id_generator=id_generator)
            action, portfolio_id = "migrated", doc["portfolios"][0]["id"]
    elif isinstance(raw, dict):
        doc, action, portfolio_id = raw, "validated", None
    else:
        doc, action, portfolio_id = None, "created", None

    doc = validate_v2_data(doc, id_generator=id_generator)
    if portfolio_id is None:
        portfolio_id = doc["portfolios"][0]["id"]
    _, problems = check_v2_data(doc)
    problems = notes + problems
    if problems:
        log.warning("v2_document_problems", action=action, problems=problems)
    return PreparedDocument(document=doc, action=action, portfolio_id=str(portfolio_id), problems=problems)
