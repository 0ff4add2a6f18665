"""Main CLI entry point for the text-resource-xml command-line tool.

Provides commands to check, inspect, normalize, export and import text
resource XML files.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from text_resource_xml import __version__
from text_resource_xml.api import DataFrameAdapter, read_file, write_file
from text_resource_xml.model import TextResource
from text_resource_xml.shared import (
    ConfigError,
    XmlStreamConfig,
    configure_logging,
    get_logger,
)


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.stream_config = XmlStreamConfig()
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file holds an ``XmlStreamConfig`` dictionary, optionally with an
        ``output_format`` key.
        """
        config = cls()
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text(encoding="utf-8"))
                output_format = data.pop("output_format", None) if isinstance(data, dict) else None
                config.stream_config = XmlStreamConfig.from_dict(data)
                if output_format:
                    config.output_format = output_format
            except (OSError, ValueError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        return config


class ResourceProcessor:
    """Core processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(__name__, None, "cli_processor")

    def find_xml_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Find XML files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            pattern = "**/*.xml" if recursive else "*.xml"
            for xml_file in sorted(path.glob(pattern)):
                if xml_file.is_file():
                    yield xml_file

    def check_file(self, file_path: Path) -> Dict[str, Any]:
        """Read a file and summarize the outcome."""
        result = read_file(file_path, self.config.stream_config)
        self.logger.debug("Checked file", extra={"file": str(file_path), "success": result.success})
        return {
            "file": str(file_path),
            "valid": result.success,
            "groups": len(result.resource.groups),
            "strings": result.resource.string_count,
            "processing_time_ms": result.processing_time_ms,
            "errors": [
                {"message": entry.message, "line": entry.line} for entry in result.errors
            ],
        }

    def normalize_file(
        self,
        file_path: Path,
        output_dir: Optional[Path],
        suffix: str,
    ) -> Dict[str, Any]:
        """Read a file and write it back in canonical form."""
        result = read_file(file_path, self.config.stream_config)
        if not result.success:
            return {"file": str(file_path), "success": False, "error": result.error}

        target_dir = output_dir or file_path.parent
        target = target_dir / f"{file_path.stem}{suffix}{file_path.suffix}"
        target_dir.mkdir(parents=True, exist_ok=True)
        written = write_file(result.resource, target, self.config.stream_config)
        return {
            "file": str(file_path),
            "output": str(target),
            "success": written.success,
            "error": written.error,
        }


def resource_summary(resource: TextResource) -> Dict[str, Any]:
    """Plain-data view of a resource for JSON output."""
    return {
        "name": resource.name,
        "index_with_counts": resource.index_with_counts,
        "groups": [
            {"id": group.id, "strings": list(group.strings)} for group in resource.groups
        ],
    }


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="text-resource-xml",
        description="Check, inspect and convert text resource XML files"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Check command
    check_parser = subparsers.add_parser("check", help="Validate text resource files")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to check"
    )
    check_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    check_parser.add_argument(
        "--strict",
        action="store_true",
        help="Also fail groups with a missing </string> close tag"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default=None,
        help="Output format (default: text)"
    )

    # Show command
    show_parser = subparsers.add_parser("show", help="Print the contents of a file")
    show_parser.add_argument("path", type=Path, help="XML file to show")
    show_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default=None,
        help="Output format (default: text)"
    )

    # Normalize command
    normalize_parser = subparsers.add_parser(
        "normalize", help="Rewrite files in canonical form"
    )
    normalize_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files to normalize"
    )
    normalize_parser.add_argument(
        "--output-dir", "-d",
        type=Path,
        help="Output directory for normalized files"
    )
    normalize_parser.add_argument(
        "--suffix",
        default="_normalized",
        help="Suffix for normalized files (default: _normalized)"
    )
    normalize_parser.add_argument(
        "--compact",
        action="store_true",
        help="Write without indentation"
    )

    # Export command
    export_parser = subparsers.add_parser("export", help="Export strings to CSV")
    export_parser.add_argument("path", type=Path, help="XML file to export")
    export_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="CSV file to write"
    )

    # Import command
    import_parser = subparsers.add_parser("import", help="Build an XML file from CSV")
    import_parser.add_argument("path", type=Path, help="CSV file with group_id, string_id, text")
    import_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="XML file to write"
    )
    import_parser.add_argument("--name", default="", help="Resource name")
    import_parser.add_argument(
        "--no-index-with-counts",
        action="store_true",
        help="Write indexWithCounts=\"false\""
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if not results:
        return "No files to check."

    lines = []
    valid_count = sum(1 for r in results if r.get("valid", False))
    lines.append(f"Checked {len(results)} files, {valid_count} valid")
    lines.append("-" * 50)

    for result in results:
        status = "✓" if result.get("valid", False) else "✗"
        lines.append(f"{status} {result['file']}")
        lines.append(f"   Groups: {result.get('groups', 0)}, Strings: {result.get('strings', 0)}")
        for error in result.get("errors", [])[:3]:
            location = f" (line {error['line']})" if error.get("line") else ""
            lines.append(f"   Error: {error['message']}{location}")

    return "\n".join(lines)


def format_resource(resource: TextResource) -> str:
    """Human readable listing of a resource."""
    lines = [
        f"Name: {resource.name}",
        f"Index with counts: {'true' if resource.index_with_counts else 'false'}",
        f"Groups: {len(resource.groups)}, Strings: {resource.string_count}",
    ]
    for group in resource.groups:
        lines.append(f"[{group.id}]")
        for index, text in enumerate(group.strings):
            lines.append(f"  {index}: {text}")
    return "\n".join(lines)


def _load_config(args: argparse.Namespace) -> CLIConfig:
    loaded = getattr(args, "cli_config", None)
    if loaded is not None:
        return loaded
    if args.config:
        return CLIConfig.from_file(args.config)
    return CLIConfig()


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = _load_config(args)
    if args.strict:
        config.stream_config = config.stream_config.override(
            reader__require_string_close_tag=True
        )
    output_format = args.format or config.output_format

    processor = ResourceProcessor(config)
    results = []
    for path in args.paths:
        if not path.exists():
            results.append({"file": str(path), "valid": False,
                            "errors": [{"message": "File not found", "line": None}]})
            continue
        for file_path in processor.find_xml_files(path, args.recursive):
            results.append(processor.check_file(file_path))

    print(format_results(results, output_format))

    if not results:
        return 1
    return 0 if all(r.get("valid", False) for r in results) else 1


def cmd_show(args: argparse.Namespace) -> int:
    """Handle show command."""
    config = _load_config(args)
    result = read_file(args.path, config.stream_config)
    if not result.success:
        print(f"Failed to read {args.path}: {result.error}", file=sys.stderr)
        return 1

    if (args.format or config.output_format) == "json":
        print(json.dumps(resource_summary(result.resource), indent=2, ensure_ascii=False))
    else:
        print(format_resource(result.resource))
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    """Handle normalize command."""
    config = _load_config(args)
    if args.compact:
        config.stream_config = config.stream_config.override(writer__auto_formatting=False)

    processor = ResourceProcessor(config)
    failures = 0
    for path in args.paths:
        outcome = processor.normalize_file(path, args.output_dir, args.suffix)
        if outcome["success"]:
            print(f"Normalized: {path} -> {outcome['output']}")
        else:
            failures += 1
            print(f"Failed to normalize {path}: {outcome['error']}", file=sys.stderr)

    return 0 if failures == 0 else 1


def cmd_export(args: argparse.Namespace) -> int:
    """Handle export command."""
    config = _load_config(args)
    adapter = DataFrameAdapter()
    if not adapter.is_available():
        print("Export requires pandas", file=sys.stderr)
        return 1

    result = read_file(args.path, config.stream_config)
    if not result.success:
        print(f"Failed to read {args.path}: {result.error}", file=sys.stderr)
        return 1

    conversion = adapter.to_target(result.resource)
    conversion.converted_data.to_csv(args.output, index=False)
    print(f"Exported {conversion.metadata['row_count']} strings to {args.output}", file=sys.stderr)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    """Handle import command."""
    config = _load_config(args)
    adapter = DataFrameAdapter()
    if not adapter.is_available():
        print("Import requires pandas", file=sys.stderr)
        return 1

    import pandas as pd

    try:
        df = pd.read_csv(args.path, dtype={"text": str}, keep_default_na=False)
    except (OSError, ValueError) as e:
        print(f"Failed to read {args.path}: {e}", file=sys.stderr)
        return 1
    df.attrs["name"] = args.name
    df.attrs["index_with_counts"] = not args.no_index_with_counts

    conversion = adapter.from_target(df)
    if not conversion.success:
        print(f"Failed to convert {args.path}: {conversion.errors[0]}", file=sys.stderr)
        return 1

    written = write_file(conversion.converted_data, args.output, config.stream_config)
    if not written.success:
        print(f"Failed to write {args.output}: {written.error}", file=sys.stderr)
        return 1
    print(f"Imported {conversion.metadata['row_count']} strings into {args.output}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("CRITICAL")
    else:
        args.cli_config = _load_config(args)
        configure_logging(args.cli_config.stream_config.global_.logging_level)

    handlers = {
        "check": cmd_check,
        "show": cmd_show,
        "normalize": cmd_normalize,
        "export": cmd_export,
        "import": cmd_import,
    }
    try:
        return handlers[args.command](args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
