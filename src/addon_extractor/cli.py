"""Command-line interface for the addon extractor.

This module provides the CLI entry point for inspecting an addon archive
and printing its record as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import ExtractorConfig
from .core.validator import validate_addon_record_with_error_details
from .errors import ExtractorError
from .pipeline import analyze_addon


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the extractor script."""
    parser = argparse.ArgumentParser(
        description="Inspect an addon archive and print its addon record",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  addon-extractor uploads/addons/myplugin.zip

  # Derive the File field relative to the uploads folder
  addon-extractor uploads/addons/myplugin.zip --uploads-root uploads > record.json

  # Print nothing and exit 1 instead of reporting why an archive is not an addon
  addon-extractor something.zip --no-throw
        """,
    )

    parser.add_argument("path", help="Addon archive to inspect")

    parser.add_argument("--uploads-root", help="Folder uploads are saved under")

    parser.add_argument(
        "--scratch-root",
        help="Folder to extract metadata files into (defaults to the archive's folder)",
    )

    parser.add_argument(
        "--no-throw",
        action="store_true",
        help="Treat every failure except a malformed archive as 'not an addon'",
    )

    parser.add_argument("--verbose", action="store_true", help="Log each step to stderr")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = ExtractorConfig(
        uploads_root=Path(args.uploads_root) if args.uploads_root else None,
        scratch_root=Path(args.scratch_root) if args.scratch_root else None,
    )

    path = Path(args.path)
    print(f"Inspecting archive: {path}", file=sys.stderr)

    try:
        addon = analyze_addon(path, throw_error=not args.no_throw, config=config)
    except ExtractorError as e:
        print(f"Error ({e.status}): {e}", file=sys.stderr)
        sys.exit(1)

    if addon is None:
        print("Not an addon.", file=sys.stderr)
        sys.exit(1)

    # Validate against JSON schema
    print("Validating record against schema...", file=sys.stderr)
    is_valid, error_msg = validate_addon_record_with_error_details(addon)

    if not is_valid:
        print("Error: Record validation failed:", file=sys.stderr)
        print(error_msg, file=sys.stderr)
        sys.exit(1)

    print(f"Found {addon.get('Name', addon['AddonKey'])} {addon.get('Version', '')}", file=sys.stderr)

    # Output JSON to stdout
    json.dump(addon, sys.stdout, indent=2)
    print()  # Add newline at end


if __name__ == "__main__":
    main()
