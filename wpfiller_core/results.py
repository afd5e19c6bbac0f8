"""Per-field outcomes and run summaries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set


class FillOutcome(Enum):
    FILLED = "filled"
    SKIPPED_NO_DATA = "skipped-no-data"
    FAILED = "failed"


@dataclass
class FillResult:
    payload_key: str
    outcome: FillOutcome
    panel: Optional[str] = None
    method: Optional[str] = None
    detail: str = ""
    # None: not checked; False: filled but the post-fill check disagreed
    verified: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.payload_key,
            "panel": self.panel,
            "outcome": self.outcome.value,
            "method": self.method,
            "detail": self.detail,
            "verified": self.verified,
        }


@dataclass
class PanelState:
    """Which panel tabs were activated during the current browser session"""
    activated: List[str] = field(default_factory=list)
    failed: Set[str] = field(default_factory=set)

    def mark_activated(self, key: str) -> None:
        self.activated.append(key)
        self.failed.discard(key)

    def mark_failed(self, key: str) -> None:
        self.failed.add(key)

    def is_active(self, key: str) -> bool:
        return key in self.activated and key not in self.failed


@dataclass
class FillSummary:
    results: List[FillResult] = field(default_factory=list)
    panels: PanelState = field(default_factory=PanelState)

    def add(self, result: FillResult) -> FillResult:
        self.results.append(result)
        return result

    def outcome_of(self, payload_key: str) -> Optional[FillOutcome]:
        for result in self.results:
            if result.payload_key == payload_key:
                return result.outcome
        return None

    def keys_with(self, outcome: FillOutcome) -> List[str]:
        return [r.payload_key for r in self.results if r.outcome is outcome]

    def attempted_keys(self) -> List[str]:
        """Fields a fill was attempted for, whatever the result"""
        return [r.payload_key for r in self.results if r.outcome is not FillOutcome.SKIPPED_NO_DATA]

    def counts(self) -> Dict[str, int]:
        out = {o.value: 0 for o in FillOutcome}
        for result in self.results:
            out[result.outcome.value] += 1
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "counts": self.counts(),
            "panels_activated": list(self.panels.activated),
            "fields": [r.to_dict() for r in self.results],
        }
