"""Legacy (v1) document detection.

v1 documents carry a single ledger at the top level (``funds``, ``holdings``,
...) and no ``version`` tag; v2 documents are tagged ``version >= 2`` and hold
a ``portfolios`` list.
"""
from __future__ import annotations

from ..utils import coerce_number

SCHEMA_VERSION = 2


def document_version(value):
    if not isinstance(value, dict):
        return None
    return coerce_number(value.get("version"))


def is_legacy_data(value) -> bool:
    if not isinstance(value, dict):
        return False
    version = document_version(value)
    if value.get("version") and version is not None and version >= SCHEMA_VERSION:
        return False
    # v1 fingerprint: top-level funds list, or any holdings key at all
    return isinstance(value.get("funds"), list) or "holdings" in value
