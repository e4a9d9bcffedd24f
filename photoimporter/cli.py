"""CLI with subcommands: scan, import, thumbnail, clear-cache, converter."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .core.config import CONFIG_STORE_FILENAME, ImportPolicy, PreviewSize, ToolPaths
from .core.errors import PhotoImporterError
from .logging.rich_logger import QuietProgressReporter, RichProgressReporter, configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="photoimporter",
        description="Import photos and videos from a memory card into a dated folder tree.",
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    parser.add_argument(
        "--exiftool",
        type=Path,
        default=None,
        help="Path to exiftool (default: $PHOTOIMPORTER_EXIFTOOL or PATH)",
    )
    parser.add_argument(
        "--converter",
        dest="converter_path",
        type=Path,
        default=None,
        help="Path to Adobe DNG Converter (default: platform install location)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ============ SCAN command ============
    scan_parser = subparsers.add_parser(
        "scan",
        help="List the media files found under a source directory",
    )
    scan_parser.add_argument(
        "source",
        type=Path,
        help="Memory card mount point or folder",
    )
    scan_parser.add_argument(
        "-w", "--workers",
        type=int,
        default=1,
        help="Threads used for MIME detection (default: 1)",
    )

    # ============ IMPORT command ============
    import_parser = subparsers.add_parser(
        "import",
        help="Copy or convert media files into the destination tree",
    )
    import_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Files or directories to import (default: stored source disk)",
    )
    import_parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Destination root (default: stored location)",
    )
    import_parser.add_argument(
        "--subfolders",
        type=str,
        default=None,
        help="'none', 'custom' or a date pattern: yyyymmdd, yymmdd, ddmmyy, ddmm, yyyyddmmm, ddmmmyyyy",
    )
    import_parser.add_argument(
        "--custom-name",
        type=str,
        default=None,
        help="Subfolder name used with --subfolders custom",
    )
    import_parser.add_argument(
        "--convert",
        action="store_true",
        default=None,
        help="Convert files to DNG instead of copying",
    )
    import_parser.add_argument(
        "--delete-original",
        action="store_true",
        default=None,
        help="Delete each original after it was imported",
    )
    import_parser.add_argument(
        "--preview-size",
        choices=[size.value for size in PreviewSize],
        default=None,
        help="JPEG preview embedded in converted DNGs",
    )
    import_parser.add_argument(
        "--lossless",
        action="store_true",
        default=None,
        help="Losslessly compress converted DNGs",
    )
    import_parser.add_argument(
        "--linear",
        action="store_true",
        default=None,
        help="Use linear (demosaiced) conversion",
    )
    import_parser.add_argument(
        "--embed-original",
        action="store_true",
        default=None,
        help="Embed the original raw file in converted DNGs",
    )
    import_parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings directory holding config.json (default: user config dir)",
    )

    # ============ THUMBNAIL command ============
    thumb_parser = subparsers.add_parser(
        "thumbnail",
        help="Extract or look up cached thumbnails",
    )
    thumb_parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Source images",
    )
    thumb_parser.add_argument(
        "--cache-root",
        type=Path,
        default=None,
        help="Thumbnail cache directory (default: user cache dir)",
    )
    thumb_parser.add_argument(
        "-w", "--workers",
        type=int,
        default=4,
        help="Number of worker threads (default: 4)",
    )

    # ============ CLEAR-CACHE command ============
    clear_parser = subparsers.add_parser(
        "clear-cache",
        help="Delete every cached thumbnail",
    )
    clear_parser.add_argument(
        "--cache-root",
        type=Path,
        default=None,
        help="Thumbnail cache directory (default: user cache dir)",
    )

    # ============ CONVERTER command ============
    subparsers.add_parser(
        "converter",
        help="Report whether Adobe DNG Converter is installed",
    )

    return parser


def _tool_paths(args: argparse.Namespace) -> ToolPaths:
    discovered = ToolPaths.discover()
    return ToolPaths(
        exiftool=getattr(args, "exiftool", None) or discovered.exiftool,
        converter=getattr(args, "converter_path", None) or discovered.converter,
    )


# ============ Command Handlers ============

def cmd_scan(args: argparse.Namespace, reporter) -> int:
    """Handle the scan command."""
    from .services.scanner import MediaScanner

    scanner = MediaScanner(workers=args.workers)
    entries = scanner.scan(args.source)

    reporter.print_entries(entries)
    reporter.info(f"Found {len(entries)} media files in {args.source}")
    return 0


def build_policy(args: argparse.Namespace) -> ImportPolicy:
    """Stored settings with the command line flags laid over them."""
    from .persistence.settings import JsonSettingsStore

    store = JsonSettingsStore(args.settings)
    return ImportPolicy.from_settings(
        store,
        CONFIG_STORE_FILENAME,
        destination_root=args.output,
        subfolder_pattern=args.subfolders,
        custom_subfolder_name=args.custom_name,
        convert_to_archival=args.convert,
        delete_original=args.delete_original,
        preview_size=args.preview_size,
        lossless_compression=args.lossless,
        conversion_method="linear" if args.linear else None,
        embed_original=args.embed_original,
    )


def cmd_import(args: argparse.Namespace, reporter) -> int:
    """Handle the import command."""
    from .engines.converter import DngConverter
    from .engines.exiftool import ExifTool, ExifToolMetadataProbe
    from .services.dispatcher import ConversionDispatcher
    from .services.events import LoggingEventSink
    from .services.orchestrator import ImportOrchestrator
    from .services.scanner import MediaScanner

    policy = build_policy(args)
    tools = _tool_paths(args)

    reporter.print_header("photoimporter import")
    reporter.print_config({
        "Source": ", ".join(str(p) for p in args.paths) or str(policy.source_root or "-"),
        "Destination": str(policy.destination_root),
        "Subfolders": policy.subfolder_pattern,
        "Custom Subfolder": policy.custom_subfolder_name or "-",
        "Convert to DNG": policy.convert_to_archival,
        "Delete Original": policy.delete_original,
    })

    converter = DngConverter(tools.converter)
    if policy.convert_to_archival and not converter.is_available():
        reporter.warning("DNG Converter is not installed; conversion will fail")

    scanner = MediaScanner()
    orchestrator = ImportOrchestrator(
        dispatcher=ConversionDispatcher(
            probe=ExifToolMetadataProbe(ExifTool(tools.exiftool_command)),
            converter=converter,
        ),
        events=LoggingEventSink(),
        progress=reporter,
        scanner=scanner,
    )

    if args.paths:
        files = []
        for path in args.paths:
            if path.is_dir():
                files.extend(scanner.scan(path))
            else:
                files.append(path)
        batch = orchestrator.import_batch(files, policy)
    else:
        batch = orchestrator.import_from_source(policy)

    reporter.print_batch(batch)
    return 0 if batch.is_success else 1


def cmd_thumbnail(args: argparse.Namespace, reporter) -> int:
    """Handle the thumbnail command."""
    from .engines.exiftool import ExifTool
    from .services.thumbnails import ThumbnailCache

    tools = _tool_paths(args)
    cache = ThumbnailCache(ExifTool(tools.exiftool_command), root=args.cache_root)

    records = cache.get_many(args.files, workers=args.workers)
    reporter.print_thumbnails(records)

    for source, record in zip(args.files, records):
        if record is None:
            reporter.error(f"Cannot read {source}")
        elif record.soft_failure is not None:
            reporter.warning(f"No thumbnail for {source}")

    return 0 if all(record is not None for record in records) else 1


def cmd_clear_cache(args: argparse.Namespace, reporter) -> int:
    """Handle the clear-cache command."""
    from .engines.exiftool import ExifTool
    from .services.thumbnails import ThumbnailCache

    cache = ThumbnailCache(ExifTool(), root=args.cache_root)
    cache.clear()
    reporter.success(f"Cleared thumbnail cache {cache.root}")
    return 0


def cmd_converter(args: argparse.Namespace, reporter) -> int:
    """Handle the converter command."""
    from .engines.converter import DngConverter

    converter = DngConverter(_tool_paths(args).converter)
    if converter.is_available():
        reporter.success(f"DNG Converter found at {converter.executable}")
        return 0

    reporter.warning("DNG Converter is not installed")
    return 1


COMMANDS = {
    "scan": cmd_scan,
    "import": cmd_import,
    "thumbnail": cmd_thumbnail,
    "clear-cache": cmd_clear_cache,
    "converter": cmd_converter,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.quiet:
        reporter = QuietProgressReporter()
    else:
        reporter = RichProgressReporter(verbose=args.verbose)

    # No command specified - show help
    if not args.command:
        parser.print_help()
        return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        reporter.error(f"Unknown command: {args.command}")
        return 1

    try:
        return handler(args, reporter)
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return 130
    except PhotoImporterError as e:
        reporter.error(str(e))
        return 1
    except Exception as e:
        reporter.error(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
