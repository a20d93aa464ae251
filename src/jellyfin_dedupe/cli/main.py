"""CLI entry point for the Jellyfin duplicate finder."""

import argparse
import json
import locale
import logging
import os
import sys
import uuid
from pathlib import Path

from .. import __version__
from ..client import ClientConfig, JellyfinClient, JellyfinError
from ..core import CatalogScanner, Library, ScanResult


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Group titles are collated with the user's locale
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logging.getLogger(__name__).warning(f"Falling back to default collation: {e}")


def default_device_id_file() -> Path:
    """Location of the cached device id."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "jellyfin-dedupe" / "device_id"


def resolve_device_id(explicit: str | None, cache_file: Path) -> str:
    """
    Return the device id to present to the server.

    Args:
        explicit: Device id given on the command line or environment
        cache_file: File holding the id generated on first use

    Returns:
        The explicit id if given, else the cached id, else a new id that is
        written to cache_file for later runs
    """
    logger = logging.getLogger(__name__)

    if explicit:
        return explicit

    if cache_file.is_file():
        cached = cache_file.read_text(encoding="utf-8").strip()
        if cached:
            return cached

    device_id = uuid.uuid4().hex
    try:
        cache_file.parent.mkdir(parents=True, exist_ok=True)
        cache_file.write_text(device_id, encoding="utf-8")
        logger.info(f"Generated device id, cached in {cache_file}")
    except OSError as e:
        logger.warning(f"Could not cache device id in {cache_file}: {e}")
    return device_id


def select_library(libraries: list[Library], name_or_id: str) -> Library:
    """
    Find a library by id or case-insensitive name.

    Raises:
        LookupError: If no library matches
    """
    for library in libraries:
        if library.id == name_or_id:
            return library
    for library in libraries:
        if library.name.lower() == name_or_id.lower():
            return library

    available = ", ".join(library.name for library in libraries) or "none"
    raise LookupError(f"Library not found: {name_or_id} (available: {available})")


def print_libraries(libraries: list[Library]) -> None:
    """Print the libraries visible to the user."""
    if not libraries:
        print("No libraries found. Ensure your user has access to libraries.")
        return

    for library in libraries:
        kind = f" [{library.collection_type}]" if library.collection_type else ""
        print(f"{library.id}  {library.name}{kind}")


def print_scan_results(
    scan_result: ScanResult, client: JellyfinClient | None = None, detailed: bool = False
) -> None:
    """
    Print scan results to console.

    Args:
        scan_result: Results from the scan operation
        client: Client used to build image URLs in detailed mode
        detailed: Whether to show detailed entry information
    """
    scope = scan_result.library_name or "All libraries"

    print("\n" + "=" * 60)
    print(f"SCAN RESULTS: {scope}")
    print("=" * 60)

    print(f"Scanned Movies: {scan_result.entries_scanned}")
    print(f"Conflict Groups: {len(scan_result.groups)}")
    print(f"Duplicates: {scan_result.duplicate_count}")
    print(f"Wasted Space: ~{scan_result.wasted_space_gb:.1f} GB")

    if not scan_result.groups:
        print(f'\n✅ "{scope}" is Clean! No duplicate movies were found.')
        return

    for group in scan_result.groups:
        year = f" ({group.year})" if group.year else ""
        print("\n" + "-" * 60)
        print(f"{group.title}{year}    {group.match_type.label}")
        print("-" * 60)

        for entry in group.members:
            marker = "✅ Highest Quality (Estimated)" if entry.id == group.preferred_id else "  "
            source = entry.primary_source
            size = f"{source.size_gb:.2f} GB" if source and source.size_bytes else "Unknown"
            bitrate = (
                f"{source.bitrate_mbps:.1f} Mbps"
                if source and source.effective_bitrate_bps
                else "Unknown"
            )
            resolution = source.resolution_label if source else "N/A"
            container = (source.container or "?").upper() if source else "?"

            print(f"  {marker}")
            print(f"    {entry.title} [{entry.id}]")
            print(f"    {resolution} | {container} | {size} | {bitrate}")

            if detailed:
                added = entry.date_created.strftime("%Y-%m-%d") if entry.date_created else "Unknown"
                print(f"    Added: {added}")
                if source and source.path:
                    print(f"    Path: {source.path}")
                if client is not None:
                    image = client.image_url(entry.id, entry.image_tag)
                    if image:
                        print(f"    Image: {image}")


def scan_result_to_json(scan_result: ScanResult) -> str:
    """Serialize a scan result for machine consumption."""
    payload = {
        "library_id": scan_result.library_id,
        "library_name": scan_result.library_name,
        "entries_scanned": scan_result.entries_scanned,
        "conflict_groups": len(scan_result.groups),
        "duplicates": scan_result.duplicate_count,
        "wasted_space_bytes": scan_result.wasted_space_bytes,
        "groups": [
            {
                "key": group.key,
                "title": group.title,
                "year": group.year,
                "match_type": group.match_type.value,
                "preferred_id": group.preferred_id,
                "members": [
                    {
                        "id": entry.id,
                        "title": entry.title,
                        "size_bytes": entry.primary_size_bytes,
                        "bitrate_bps": entry.primary_bitrate_bps,
                        "path": entry.primary_source.path if entry.primary_source else None,
                    }
                    for entry in group.members
                ],
            }
            for group in scan_result.groups
        ],
    }
    return json.dumps(payload, indent=2)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="jellyfin-dedupe",
        description="Jellyfin Deduplicator - Find duplicate movies and the copy worth keeping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List libraries
  jellyfin-dedupe --server http://jellyfin:8096 --username admin --list-libraries

  # Scan one library
  jellyfin-dedupe --server http://jellyfin:8096 --username admin --library Movies

  # Only show groups whose title contains "alien", with details
  jellyfin-dedupe --library Movies --filter alien --detailed

  # Delete a copy, then show the refreshed groups
  jellyfin-dedupe --library Movies --delete 5f0c3e...

Credentials can also be given with JELLYFIN_SERVER, JELLYFIN_USERNAME and
JELLYFIN_PASSWORD.
        """,
    )

    # Connection
    parser.add_argument(
        "--server",
        default=os.environ.get("JELLYFIN_SERVER"),
        metavar="URL",
        help="Server URL (default: $JELLYFIN_SERVER)",
    )
    parser.add_argument(
        "--username",
        default=os.environ.get("JELLYFIN_USERNAME"),
        help="User name (default: $JELLYFIN_USERNAME)",
    )
    parser.add_argument(
        "--password",
        default=os.environ.get("JELLYFIN_PASSWORD", ""),
        help="Password (default: $JELLYFIN_PASSWORD)",
    )
    parser.add_argument(
        "--device-id",
        default=os.environ.get("JELLYFIN_DEVICE_ID"),
        help="Device id sent to the server (default: generated once and cached)",
    )
    parser.add_argument(
        "--device-id-file",
        type=Path,
        default=default_device_id_file(),
        metavar="PATH",
        help="Where the generated device id is cached",
    )

    # Scan options
    parser.add_argument(
        "--list-libraries", action="store_true", help="List libraries and exit"
    )
    parser.add_argument(
        "--library", metavar="NAME_OR_ID", help="Library to scan (default: all movies)"
    )
    parser.add_argument(
        "--filter", default="", metavar="TEXT", help="Only show groups whose title contains TEXT"
    )
    parser.add_argument(
        "--delete",
        action="append",
        default=[],
        metavar="ITEM_ID",
        help="Delete an item from the server before reporting (repeatable)",
    )

    # Output options
    parser.add_argument(
        "--detailed", action="store_true", help="Show detailed entry information in results"
    )
    parser.add_argument(
        "--output-format",
        choices=["text", "json"],
        default="text",
        help="Output format for results (default: text)",
    )

    # Logging options
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def run(args: argparse.Namespace, client: JellyfinClient) -> int:
    """
    Log in, scan and report using an existing client.

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    client.login(args.server, args.username, args.password)
    libraries = client.fetch_libraries()

    if args.list_libraries:
        print_libraries(libraries)
        return 0

    library = select_library(libraries, args.library) if args.library else None
    scanner = CatalogScanner(client)

    def progress_callback(current: int, total: int | None = None, message: str = "") -> None:
        if args.output_format == "text" and message:
            print(message, file=sys.stderr)

    entries, scan_result = scanner.scan(
        library=library, title_filter=args.filter, progress_callback=progress_callback
    )

    if args.delete:
        for item_id in args.delete:
            entries = scanner.delete_entry(entries, item_id)
            print(f"Deleted {item_id}", file=sys.stderr)
        scan_result = scanner.analyze(entries, title_filter=args.filter, library=library)

    logger.info(f"Reporting {len(scan_result.groups)} groups")
    if args.output_format == "json":
        print(scan_result_to_json(scan_result))
    else:
        print_scan_results(scan_result, client=client, detailed=args.detailed)

    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.server or not args.username:
        parser.error("--server and --username are required (or set JELLYFIN_SERVER/JELLYFIN_USERNAME)")

    # Set up logging
    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        device_id = resolve_device_id(args.device_id, args.device_id_file)
        config = ClientConfig(device_id=device_id)

        with JellyfinClient(config) as client:
            return run(args, client)

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 1
    except JellyfinError as e:
        logger.debug("Server operation failed", exc_info=True)
        print(f"Error: {e}")
        return 1
    except LookupError as e:
        print(f"Error: {e.args[0]}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
