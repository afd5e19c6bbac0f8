"""Landing-page request payload: validation and synonym-aware lookups."""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .errors import PayloadError
from .mapping import SelectorMapping

logger = logging.getLogger(__name__)

HEADLINE_KEY = "header_headline"
PAGE_DESIGNS = ("a", "b", "c")

# Bookkeeping columns the workflow tool sends along; accepted and dropped
IGNORED_KEYS = ("nc_order", "Status", "DraftURL")


def unwrap_rows(body: Any) -> Any:
    """Reduce a workflow-tool body of the form {"rows": [...]} to its first row."""
    if isinstance(body, dict):
        rows = body.get("rows")
        if isinstance(rows, list) and rows:
            return rows[0]
    return body


class LandingPageRequest:
    """
    Flat, immutable view of one landing-page payload.

    Absent keys and empty strings both mean "leave the field untouched".
    """

    def __init__(self, data: Mapping[str, Optional[str]]):
        self._data = MappingProxyType(dict(data))

    @classmethod
    def from_payload(cls, data: Any, mapping: SelectorMapping) -> "LandingPageRequest":
        if not isinstance(data, dict):
            raise PayloadError([{"field": "(body)", "message": "must be a JSON object"}])

        known = set(mapping.known_keys()) | {HEADLINE_KEY}
        details: List[Dict[str, str]] = []
        clean: Dict[str, Optional[str]] = {}

        for key, value in data.items():
            if key in IGNORED_KEYS or key not in known:
                continue
            if value is None:
                clean[key] = None
            elif isinstance(value, bool):
                details.append({"field": key, "message": "must be a string"})
            elif isinstance(value, (int, float)):
                clean[key] = str(value)
            elif isinstance(value, str):
                clean[key] = value
            else:
                details.append({"field": key, "message": "must be a string"})

        headline = clean.get(HEADLINE_KEY)
        if not headline or not headline.strip():
            details.append({"field": HEADLINE_KEY, "message": "is required"})

        design = (clean.get("page_design") or "").strip()
        if design and design not in PAGE_DESIGNS:
            details.append({"field": "page_design", "message": "must be one of a, b, c"})

        preposition = clean.get("hero_preposition") or ""
        if len(preposition) > 2:
            details.append({"field": "hero_preposition", "message": "must be at most 2 characters"})

        if details:
            raise PayloadError(details)
        return cls(clean)

    def value(self, key: str) -> Optional[str]:
        raw = self._data.get(key)
        if raw is None:
            return None
        text = str(raw).strip()
        return text or None

    def first_value(self, keys: Iterable[str]) -> Optional[str]:
        """First non-empty value among synonym keys, in precedence order."""
        keys = list(keys)
        found = [(k, self.value(k)) for k in keys]
        present = [(k, v) for k, v in found if v is not None]
        if len(present) > 1:
            logger.debug(f"Several synonyms present {[k for k, _ in present]}; using '{present[0][0]}'")
        return present[0][1] if present else None

    @property
    def headline(self) -> Optional[str]:
        return self.value(HEADLINE_KEY)

    def as_dict(self) -> Dict[str, Optional[str]]:
        return dict(self._data)

    def __contains__(self, key: str) -> bool:
        return self.value(key) is not None

    def __repr__(self) -> str:
        return f"LandingPageRequest(headline={self.headline!r}, keys={sorted(self._data)})"
