"""
mapping.py

Declarative selector mapping for the landing-page editor: navigation
targets, panels (editor tabs) and fields. The mapping is parsed once at
startup into an immutable SelectorMapping and handed to every component
that needs it.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .errors import MappingError

logger = logging.getLogger(__name__)


class FieldType(Enum):
    TEXT = "text"
    RICH_TEXT = "rich-text"
    RADIO = "radio"
    GRID_SELECT = "grid-select"
    LINK = "link"


# Navigation entries the navigator and finalizer look up by name
REQUIRED_NAVIGATION = (
    "landing_page_main_sidebar",
    "new_landing_page_button",
    "save_draft_button",
    "publish_button",
)

# Editor panels in visual order; the orchestrator activates them in this order
PANEL_ORDER = (
    "panel_hero_area",
    "panel_intro_content",
    "panel_top_cta",
    "panel_below_form",
    "panel_services_grid",
    "panel_bottom_cta",
)


@dataclass(frozen=True)
class NavigationTarget:
    name: str
    selector: str
    alternative_selectors: Tuple[str, ...] = ()
    label: Optional[str] = None


@dataclass(frozen=True)
class Panel:
    key: str
    selector: str
    alternative_selectors: Tuple[str, ...] = ()
    label: Optional[str] = None


@dataclass(frozen=True)
class Field:
    payload_key: str
    selector: str
    type: FieldType
    panel: Optional[str] = None
    editor_id: Optional[str] = None
    alternative_selectors: Tuple[str, ...] = ()
    aliases: Tuple[str, ...] = ()
    label: Optional[str] = None
    text_keys: Tuple[str, ...] = ()
    row_selector: Optional[str] = None
    add_row_selectors: Tuple[str, ...] = ()

    @property
    def keys(self) -> Tuple[str, ...]:
        """Payload keys for this field's value, highest precedence first"""
        return (self.payload_key,) + self.aliases


@dataclass(frozen=True)
class SelectorMapping:
    navigation: Dict[str, NavigationTarget]
    panels: Tuple[Panel, ...]
    fields: Tuple[Field, ...]

    def find_panel(self, key: str) -> Optional[Panel]:
        for panel in self.panels:
            if panel.key == key:
                return panel
        return None

    def find_field(self, payload_key: str) -> Optional[Field]:
        for fld in self.fields:
            if fld.payload_key == payload_key:
                return fld
        return None

    def fields_for_panel(self, panel_key: Optional[str]) -> List[Field]:
        """Fields of a panel in mapping order; None returns the panel-less fields"""
        return [f for f in self.fields if f.panel == panel_key]

    def navigation_target(self, name: str) -> Optional[NavigationTarget]:
        return self.navigation.get(name)

    def known_keys(self) -> List[str]:
        """Every payload key the mapping can consume, including synonyms"""
        keys: List[str] = []
        for fld in self.fields:
            keys.extend(fld.keys)
            keys.extend(fld.text_keys)
        return keys


def _strings(raw: Any, where: str) -> Tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(s, str) for s in raw):
        raise MappingError(f"{where} must be a list of strings")
    return tuple(raw)


def _required(entry: Dict[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MappingError(f"{where} is missing '{key}'")
    return value


def parse_mapping(data: Dict[str, Any]) -> SelectorMapping:
    """Build and validate a SelectorMapping from its document form."""
    if not isinstance(data, dict):
        raise MappingError("Mapping document must be an object")

    navigation: Dict[str, NavigationTarget] = {}
    for name, entry in (data.get("navigation") or {}).items():
        where = f"navigation.{name}"
        if not isinstance(entry, dict):
            raise MappingError(f"{where} must be an object")
        navigation[name] = NavigationTarget(
            name=name,
            selector=_required(entry, "selector", where),
            alternative_selectors=_strings(entry.get("alternativeSelectors"), f"{where}.alternativeSelectors"),
            label=entry.get("label"),
        )

    panels: List[Panel] = []
    for idx, entry in enumerate(data.get("panels") or []):
        where = f"panels[{idx}]"
        if not isinstance(entry, dict):
            raise MappingError(f"{where} must be an object")
        panels.append(Panel(
            key=_required(entry, "key", where),
            selector=_required(entry, "selector", where),
            alternative_selectors=_strings(entry.get("alternativeSelectors"), f"{where}.alternativeSelectors"),
            label=entry.get("label"),
        ))

    fields: List[Field] = []
    for idx, entry in enumerate(data.get("fields") or []):
        where = f"fields[{idx}]"
        if not isinstance(entry, dict):
            raise MappingError(f"{where} must be an object")
        payload_key = _required(entry, "payloadKey", where)
        where = f"field '{payload_key}'"
        raw_type = _required(entry, "type", where)
        try:
            field_type = FieldType(raw_type)
        except ValueError:
            raise MappingError(f"{where} has unknown type '{raw_type}'") from None
        fields.append(Field(
            payload_key=payload_key,
            selector=_required(entry, "selector", where),
            type=field_type,
            panel=entry.get("panel") or None,
            editor_id=entry.get("editorId") or None,
            alternative_selectors=_strings(entry.get("alternativeSelectors"), f"{where}.alternativeSelectors"),
            aliases=_strings(entry.get("aliases"), f"{where}.aliases"),
            label=entry.get("label"),
            text_keys=_strings(entry.get("textKeys"), f"{where}.textKeys"),
            row_selector=entry.get("rowSelector") or None,
            add_row_selectors=_strings(entry.get("addRowSelectors"), f"{where}.addRowSelectors"),
        ))

    mapping = SelectorMapping(navigation=navigation, panels=tuple(panels), fields=tuple(fields))
    _validate(mapping)
    return mapping


def _validate(mapping: SelectorMapping) -> None:
    panel_keys = [p.key for p in mapping.panels]
    if len(set(panel_keys)) != len(panel_keys):
        raise MappingError("Panel keys must be unique")
    for key in panel_keys:
        if key not in PANEL_ORDER:
            raise MappingError(f"Unknown panel '{key}' (expected one of: {', '.join(PANEL_ORDER)})")

    seen: Dict[str, str] = {}
    for fld in mapping.fields:
        if fld.panel is not None and fld.panel not in panel_keys:
            raise MappingError(f"Field '{fld.payload_key}' references unknown panel '{fld.panel}'")
        if fld.type is FieldType.RICH_TEXT and not fld.editor_id:
            raise MappingError(f"Rich-text field '{fld.payload_key}' needs an editorId")
        if fld.type is FieldType.LINK and not fld.text_keys:
            raise MappingError(f"Link field '{fld.payload_key}' needs textKeys")
        if fld.type is FieldType.GRID_SELECT and not fld.add_row_selectors:
            raise MappingError(f"Grid field '{fld.payload_key}' needs addRowSelectors")
        for key in fld.keys + fld.text_keys:
            owner = seen.get(key)
            if owner is not None:
                raise MappingError(f"Payload key '{key}' is used by both '{owner}' and '{fld.payload_key}'")
            seen[key] = fld.payload_key

    for name in REQUIRED_NAVIGATION:
        if name not in mapping.navigation:
            logger.warning(f"Mapping has no navigation entry '{name}'; text and URL fallbacks only")


def load_mapping(path: Union[str, Path]) -> SelectorMapping:
    """
    Read and validate the selector mapping file.

    Raises MappingError on any read, parse or consistency problem; callers
    treat that as fatal at startup.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MappingError(f"Cannot read mapping file {path}: {e}") from e
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (ValueError, yaml.YAMLError) as e:
        raise MappingError(f"Cannot parse mapping file {path}: {e}") from e
    mapping = parse_mapping(data)
    logger.info(f"Mapping loaded from {path}: {len(mapping.panels)} panels, {len(mapping.fields)} fields")
    return mapping
