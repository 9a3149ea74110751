"""
Booking Ingest command line

Usage:
    python run.py inspect bookings.csv
    python run.py extract bookings.csv --map guestName="Guest" --output out.csv
    python run.py webhook reservation.json --paths
    python run.py config
    python run.py version
"""

import argparse
import asyncio
import sys
from typing import Dict, List, Optional

from core._version import __version__
from core.config import RAGGED_ROW_POLICIES, QUOTE_POLICIES, get_config
from core.errors import IngestError
from core.schema import CSV_BOOKING_FIELDS, PLATFORMS, WEBHOOK_BOOKING_FIELDS, required_fields
from .banner import (
    console, show_banner, show_step, show_success, show_error, show_warning, show_info,
    show_headers_table, show_mapping_table, show_validation_report, show_field_preview,
    show_extraction_summary, show_export_summary,
)
from .exporters import CSVExporter
from .extraction import extract_rows
from .loaders import CSVLoader, PayloadLoader, parse_csv_file
from .logs import setup_logging
from .mappers import AutoMapper, InteractiveMapper, PlatformMappings, validate_column_mapping
from .webhook import (
    apply_mappings, discover_paths, finance_field_paths, preview_mappings,
    suggest_webhook_mappings, validate_mappings,
)


MAX_ERRORS_SHOWN = 10


def parse_assignments(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Turn ["guestName=Guest", ...] into {"guestName": "Guest", ...}."""
    assignments = {}
    for pair in pairs or []:
        field, sep, locator = pair.partition('=')
        if not sep or not field.strip():
            raise argparse.ArgumentTypeError(f"Expected FIELD=SOURCE, got {pair!r}")
        assignments[field.strip()] = locator.strip()
    return assignments


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='booking-ingest', description='Normalize booking exports and webhook payloads')
    parser.add_argument('--log-level', help='Log level (default: INGEST_LOG_LEVEL or WARNING)')
    commands = parser.add_subparsers(dest='command')

    def add_policy_options(command):
        command.add_argument('--ragged-rows', choices=RAGGED_ROW_POLICIES, help='Rows with the wrong cell count')
        command.add_argument('--unterminated-quotes', choices=QUOTE_POLICIES, help='Rows ending inside a quote')

    inspect = commands.add_parser('inspect', help='Show columns and the suggested mapping of a CSV file')
    inspect.add_argument('file')
    add_policy_options(inspect)
    inspect.set_defaults(handler=cmd_inspect)

    extract = commands.add_parser('extract', help='Map and normalize every row of a CSV file')
    extract.add_argument('file')
    extract.add_argument('--map', action='append', metavar='FIELD=COLUMN', help='Set or override a column mapping')
    extract.add_argument('--platform', choices=PLATFORMS, default='ALL', help='Scope --map overrides to one platform')
    extract.add_argument('--interactive', action='store_true', help='Confirm the mapping interactively')
    extract.add_argument('--output', help='Output CSV path (default: timestamped file in the output dir)')
    add_policy_options(extract)
    extract.set_defaults(handler=cmd_extract)

    webhook = commands.add_parser('webhook', help='Suggest, validate and preview a webhook payload mapping')
    webhook.add_argument('file')
    webhook.add_argument('--map', action='append', metavar='FIELD=PATH', help='Set or override a path mapping')
    webhook.add_argument('--paths', action='store_true', help='List every path found in the payload')
    webhook.add_argument('--json', action='store_true', help='Print the extracted record as JSON')
    webhook.set_defaults(handler=cmd_webhook)

    config = commands.add_parser('config', help='Show configuration status')
    config.set_defaults(handler=cmd_config)

    version = commands.add_parser('version', help='Show version')
    version.set_defaults(handler=cmd_version)

    return parser


def cmd_inspect(args) -> int:
    table = CSVLoader(args.file, args.ragged_rows, args.unterminated_quotes).load()
    show_headers_table(table)

    for rejected in table.rejected_rows[:MAX_ERRORS_SHOWN]:
        show_warning(f"Line {rejected.line_number} rejected: {rejected.reason}")

    mapping = AutoMapper().suggest(table.header_names)
    show_mapping_table(mapping, CSV_BOOKING_FIELDS, title="Suggested Mapping")
    return 0


def cmd_extract(args) -> int:
    required = required_fields(CSV_BOOKING_FIELDS)

    show_step(1, "Parse", args.file)
    table = asyncio.run(parse_csv_file(args.file, args.ragged_rows, args.unterminated_quotes))
    show_success(f"{table.total_row_count} rows, {len(table.headers)} columns")
    if table.rejected_rows:
        show_warning(f"{len(table.rejected_rows)} rows rejected by parse policy")

    show_step(2, "Map fields")
    layers = PlatformMappings(AutoMapper().suggest(table.header_names))
    for field, column in parse_assignments(args.map).items():
        layers.set_override(args.platform, field, column or None)
    mapping = layers.for_platform(args.platform)

    if args.interactive:
        mapping = InteractiveMapper(table).map(mapping)
    else:
        show_mapping_table(mapping, CSV_BOOKING_FIELDS)

    errors = validate_column_mapping(mapping, required, table.header_names)
    if errors:
        for message in errors:
            show_error(message)
        return 1

    show_step(3, "Extract")
    batch = extract_rows(table, mapping, required)
    show_extraction_summary(len(batch.results), batch.rows_in_error, batch.fields_in_error)

    messages = batch.error_messages()
    for message in messages[:MAX_ERRORS_SHOWN]:
        show_warning(message)
    if len(messages) > MAX_ERRORS_SHOWN:
        show_info(f"... and {len(messages) - MAX_ERRORS_SHOWN} more")

    output = args.output or CSVExporter.generate_filename()
    columns = [spec.name for spec in CSV_BOOKING_FIELDS if mapping.is_mapped(spec.name)]
    exported = CSVExporter().export_records(batch, output, columns=columns)
    show_export_summary(exported, output)
    return 0


def cmd_webhook(args) -> int:
    payload = PayloadLoader(args.file).load()

    if args.paths:
        paths = discover_paths(payload) + finance_field_paths(payload)
        console.print(f"[bold cyan]{len(paths)} paths[/bold cyan]")
        for path in paths:
            console.print(f"  {path}", highlight=False)

    mapping = suggest_webhook_mappings(payload)
    for field, path in parse_assignments(args.map).items():
        mapping.set(field, path or None)

    show_mapping_table(mapping, WEBHOOK_BOOKING_FIELDS, title="Webhook Mapping")

    report = validate_mappings(payload, mapping, required_fields(WEBHOOK_BOOKING_FIELDS))
    show_validation_report(report)

    show_field_preview(preview_mappings(payload, mapping.get_mapped_fields()), mapping)

    if args.json:
        console.print_json(data=apply_mappings(payload, mapping))

    return 0 if report.is_valid else 1


def cmd_config(args) -> int:
    console.print_json(data=get_config().get_config_status())
    return 0


def cmd_version(args) -> int:
    console.print(f"Booking Ingest v{__version__}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        setup_logging(args.log_level)

        if not args.command:
            show_banner()
            parser.print_help()
            return 0

        return args.handler(args)

    except (IngestError, ValueError, argparse.ArgumentTypeError) as exc:
        show_error(str(exc))
        return 1
    except KeyboardInterrupt:
        show_warning("Cancelled")
        return 130


if __name__ == '__main__':
    sys.exit(main())
