"""
wpfiller_core package: WordPress landing-page form filler

Receives a flat landing-page payload, logs into wp-admin with a headless
browser, opens a new landing page entry, fills its panels and saves it
as a draft (or publishes it).

Usage:
    from wpfiller_core import Config, LandingPageExecutor, LandingPageRequest, load_mapping

    config = Config.from_env()
    mapping = load_mapping(config.mapping_path)
    request = LandingPageRequest.from_payload({"header_headline": "Cost Guide"}, mapping)
    result = await LandingPageExecutor(config, mapping).create_landing_page(request)
"""

__version__ = "1.0.0"

from .config import Config, Timeouts
from .errors import (
    AuthError,
    MappingError,
    NavigationError,
    PayloadError,
    SaveError,
    WpFillerError,
    describe_error,
)
from .mapping import FieldType, SelectorMapping, load_mapping, parse_mapping
from .payload import LandingPageRequest, unwrap_rows
from .results import FillOutcome, FillResult, FillSummary, PanelState
from .finalizer import SaveMode
from .executor import LandingPageExecutor, RunResult

__all__ = [
    "__version__",
    # Core
    "Config",
    "Timeouts",
    "LandingPageExecutor",
    "RunResult",
    "SaveMode",
    # Mapping and payload
    "FieldType",
    "SelectorMapping",
    "load_mapping",
    "parse_mapping",
    "LandingPageRequest",
    "unwrap_rows",
    # Results
    "FillOutcome",
    "FillResult",
    "FillSummary",
    "PanelState",
    # Errors
    "WpFillerError",
    "MappingError",
    "AuthError",
    "NavigationError",
    "SaveError",
    "PayloadError",
    "describe_error",
]
