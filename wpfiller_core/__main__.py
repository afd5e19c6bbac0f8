#!/usr/bin/env python3
"""
wpfiller entry point

    python -m wpfiller_core                    # start the webhook server
    python -m wpfiller_core --port 8080
    python -m wpfiller_core --check-mapping    # validate config/mapping.json and exit
    python -m wpfiller_core --clear-session    # forget the saved WordPress login
"""

import argparse
import dataclasses
import sys
from pathlib import Path

from .config import Config
from .errors import MappingError
from .mapping import load_mapping
from .server import run_server
from .session import SessionStateStore


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="wpfiller",
        description="WP Filler - creates WordPress landing pages from webhook payloads",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--port', '-p', type=int, help='Port to listen on (default: PORT or 3000)')
    parser.add_argument('--mapping', '-m', help='Selector mapping file (JSON or YAML)')
    parser.add_argument('--check-mapping', action='store_true', help='Validate the mapping file and exit')
    parser.add_argument('--clear-session', action='store_true', help='Delete the saved browser session and exit')
    args = parser.parse_args(argv)

    config = Config.from_env()
    if args.port:
        config = dataclasses.replace(config, port=args.port)
    if args.mapping:
        config = dataclasses.replace(config, mapping_path=Path(args.mapping))

    if args.clear_session:
        if SessionStateStore(config.state_path).clear():
            print(f"Browser session cleared: {config.state_path}")
        else:
            print("No saved browser session")
        return 0

    if args.check_mapping:
        try:
            mapping = load_mapping(config.mapping_path)
        except MappingError as e:
            print(f"Mapping invalid: {e}", file=sys.stderr)
            return 1
        print(f"Mapping OK: {len(mapping.panels)} panels, {len(mapping.fields)} fields, "
              f"{len(mapping.navigation)} navigation targets")
        return 0

    run_server(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
