"""
Command-line interface for the Arc Folder Archiver.

This module provides the CLI for fetching shared Arc folders, archiving
them locally and re-rendering archived folders as JSON, bookmark HTML or
Markdown.
"""

import argparse
import logging
import sqlite3
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from arc_archiver import __version__
from arc_archiver.config.pydantic_config import ArchiverConfig, ConfigurationManager
from arc_archiver.core.archive_service import ArchiveNotFoundError, ArchiveService
from arc_archiver.core.database import ArchiveDatabase
from arc_archiver.core.exporters import ExportError, JSONExporter, get_exporter
from arc_archiver.core.models import PresentationFolder
from arc_archiver.core.share_client import ArcShareClient, ArcShareError
from arc_archiver.utils.logging_setup import setup_logging
from arc_archiver.utils.validation import (
    ValidationError,
    validate_config_file,
    validate_delete_in_days,
    validate_export_format,
    validate_output_file,
    validate_record_id,
    validate_share_id,
)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNAVAILABLE = 2

UNAVAILABLE_MESSAGE = "Folder not found or unavailable."


class CLIInterface:
    """Command line interface for archiving Arc folders."""

    def __init__(self):
        self.parser = self._create_parser()
        self.logger = logging.getLogger(__name__)

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with one subcommand per operation."""
        parser = argparse.ArgumentParser(
            prog="arc-archiver",
            description="Arc Folder Archiver - archive and re-render shared Arc folders",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  arc-archiver fetch https://arc.net/folder/3F2504E0-4F89-11D3-9A0C-0305E82C3301
  arc-archiver fetch 3F2504E0-4F89-11D3-9A0C-0305E82C3301 --format html -o folder.html
  arc-archiver fetch 3F2504E0-4F89-11D3-9A0C-0305E82C3301 --json-only
  arc-archiver archive 3F2504E0-4F89-11D3-9A0C-0305E82C3301 --delete-in-days 7
  arc-archiver show <record-id> --format markdown
  arc-archiver delete <record-id>
  arc-archiver purge

Configuration:
  Settings are read from arc_archiver.toml / arc_archiver.json in the current
  directory, or from the file given with --config. Environment variables
  ARC_ARCHIVER_DATABASE, ARC_ARCHIVER_SHARE_ORIGIN and ARC_ARCHIVER_TIMEOUT
  override file settings.
            """,
        )

        parser.add_argument(
            "--version", "-V", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "--create-config",
            choices=["toml", "json"],
            help="Write a sample configuration file to the current directory and exit",
        )
        parser.add_argument("--config", "-c", help="Configuration file (TOML or JSON)")
        parser.add_argument("--database", "-d", help="SQLite archive database path")
        parser.add_argument(
            "--timeout", type=int, help="Share page request timeout in seconds"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Show debug logging"
        )

        subparsers = parser.add_subparsers(dest="command")

        fetch = subparsers.add_parser(
            "fetch", help="Fetch a shared folder and print it without archiving"
        )
        fetch.add_argument("share", help="Arc share id or https://arc.net/folder/<id> link")
        fetch.add_argument(
            "--json-only",
            action="store_true",
            help="Output the raw scraped payload instead of the folder tree",
        )
        fetch.add_argument("--format", "-f", help="Output format: json, html, markdown")
        fetch.add_argument("--output", "-o", help="Write output to this file")

        archive = subparsers.add_parser(
            "archive", help="Archive a shared folder (returns the existing record if any)"
        )
        archive.add_argument("share", help="Arc share id or https://arc.net/folder/<id> link")
        archive.add_argument(
            "--delete-in-days",
            type=int,
            help="Days until the archive may be purged (default from configuration)",
        )

        show = subparsers.add_parser("show", help="Re-render an archived folder")
        show.add_argument("record_id", help="Archived folder record id")
        show.add_argument("--format", "-f", help="Output format: json, html, markdown")
        show.add_argument("--output", "-o", help="Write output to this file")

        subparsers.add_parser("list", help="List archived folders")

        delete = subparsers.add_parser("delete", help="Delete an archived folder")
        delete.add_argument("record_id", help="Archived folder record id")

        subparsers.add_parser("purge", help="Delete archived folders past their deletion date")

        return parser

    def parse_args(self, args=None) -> argparse.Namespace:
        """Parse command line arguments."""
        return self.parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> Dict[str, Any]:
        """
        Validate all arguments and return processed values.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Dictionary of validated and processed arguments

        Raises:
            ValidationError: If any validation fails
        """
        if not args.command:
            raise ValidationError(
                "A command is required (fetch, archive, show, list, delete, purge)"
            )

        validated: Dict[str, Any] = {
            "command": args.command,
            "config_path": validate_config_file(args.config),
            "database": args.database,
            "timeout": args.timeout,
            "verbose": args.verbose,
        }

        if args.timeout is not None and args.timeout <= 0:
            raise ValidationError(f"Timeout must be positive, got: {args.timeout}")

        if args.command in ("fetch", "archive"):
            validated["share"] = args.share
        if args.command in ("show", "delete"):
            validated["record_id"] = validate_record_id(args.record_id)
        if args.command in ("fetch", "show"):
            validated["format"] = validate_export_format(args.format)
            validated["output_path"] = validate_output_file(args.output)
        if args.command == "fetch":
            validated["json_only"] = args.json_only
            if args.json_only and args.format not in (None, "json"):
                raise ValidationError("--json-only output is always JSON")
        if args.command == "archive":
            validated["delete_in_days"] = validate_delete_in_days(args.delete_in_days)

        return validated

    def process_arguments(self, validated_args: Dict[str, Any]) -> ArchiverConfig:
        """
        Load configuration, apply CLI overrides and set up logging.

        Raises:
            ValueError: If the configuration is invalid
        """
        manager = ConfigurationManager(validated_args["config_path"])
        manager.update_from_cli_args(validated_args)

        setup_logging(verbose=validated_args["verbose"])

        return manager.config

    def _build_service(self, config: ArchiverConfig, with_database: bool) -> ArchiveService:
        client = ArcShareClient(
            origin=config.share.origin,
            timeout=config.network.timeout,
            data_element_id=config.share.data_element_id,
            user_agent=config.network.user_agent,
        )
        database = ArchiveDatabase(config.storage.database_path) if with_database else None
        return ArchiveService(client, database, share_origin=config.share.origin)

    def _handle_create_config(self, config_format: str) -> int:
        """Write a sample configuration file."""
        output_path = Path(f"arc_archiver.{config_format}")
        if output_path.exists():
            print(f"Configuration file '{output_path}' already exists.", file=sys.stderr)
            return EXIT_ERROR

        ConfigurationManager(None).create_sample_config(output_path, config_format)
        print(f"Created configuration file: {output_path}")
        return EXIT_OK

    def run(self, args=None) -> int:
        """Execute CLI interface."""
        try:
            parsed_args = self.parse_args(args)

            if parsed_args.create_config:
                return self._handle_create_config(parsed_args.create_config)

            validated_args = self.validate_args(parsed_args)
            config = self.process_arguments(validated_args)

            self.logger.info(f"Running command: {validated_args['command']}")
            return self._dispatch(validated_args, config)

        except ValidationError as e:
            print(f"Validation Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        except (ValueError, FileNotFoundError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        except ArcShareError as e:
            # Details stay in the log; users only see a generic message
            self.logger.error(f"Extraction failed ({type(e).__name__}): {e}")
            print(UNAVAILABLE_MESSAGE, file=sys.stderr)
            return EXIT_UNAVAILABLE
        except ArchiveNotFoundError as e:
            self.logger.warning(str(e))
            print(UNAVAILABLE_MESSAGE, file=sys.stderr)
            return EXIT_UNAVAILABLE
        except ExportError as e:
            print(f"Export Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        except sqlite3.Error as e:
            self.logger.exception("Archive database error")
            print(f"Database Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        except Exception as e:
            self.logger.exception("Unexpected error in CLI")
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR

    def _dispatch(self, validated_args: Dict[str, Any], config: ArchiverConfig) -> int:
        command = validated_args["command"]

        if command == "fetch":
            return self._run_fetch(validated_args, config)
        if command == "archive":
            return self._run_archive(validated_args, config)
        if command == "show":
            return self._run_show(validated_args, config)
        if command == "list":
            return self._run_list(config)
        if command == "delete":
            return self._run_delete(validated_args, config)
        if command == "purge":
            return self._run_purge(config)

        raise ValidationError(f"Unknown command: {command}")

    def _run_fetch(self, validated_args: Dict[str, Any], config: ArchiverConfig) -> int:
        arc_id = validate_share_id(validated_args["share"], config.share.origin)
        service = self._build_service(config, with_database=False)

        try:
            result = service.fetch_folder(arc_id, json_only=validated_args["json_only"])
        finally:
            service.client.close()

        if validated_args["json_only"]:
            content = self._json_exporter(config).dumps(result)
            self._write_text(content, validated_args["output_path"])
            return EXIT_OK

        fmt = validated_args["format"] or config.output.format
        self._emit_folder(result, fmt, validated_args["output_path"], config)
        return EXIT_OK

    def _run_archive(self, validated_args: Dict[str, Any], config: ArchiverConfig) -> int:
        arc_id = validate_share_id(validated_args["share"], config.share.origin)
        delete_in_days = (
            validated_args["delete_in_days"] or config.storage.default_retention_days
        )
        service = self._build_service(config, with_database=True)

        try:
            record = service.get_or_create_folder(arc_id, delete_in_days)
        finally:
            service.client.close()

        print(f"Archived {record.arc_id} as {record.id}")
        if record.delete_at:
            print(f"Scheduled for deletion at {record.delete_at.isoformat(timespec='seconds')}")
        return EXIT_OK

    def _run_show(self, validated_args: Dict[str, Any], config: ArchiverConfig) -> int:
        service = self._build_service(config, with_database=True)
        folder = service.render_folder(validated_args["record_id"])

        fmt = validated_args["format"] or config.output.format
        self._emit_folder(folder, fmt, validated_args["output_path"], config)
        return EXIT_OK

    def _run_list(self, config: ArchiverConfig) -> int:
        service = self._build_service(config, with_database=True)
        records = service.list_folders()

        if not records:
            print("No archived folders.")
            return EXIT_OK

        for record in records:
            delete_at = (
                record.delete_at.isoformat(timespec="seconds") if record.delete_at else "-"
            )
            status = "  (expired)" if record.is_expired() else ""
            print(f"{record.id}  {record.arc_id}  delete_at={delete_at}{status}")
        return EXIT_OK

    def _run_delete(self, validated_args: Dict[str, Any], config: ArchiverConfig) -> int:
        service = self._build_service(config, with_database=True)
        if service.delete_folder(validated_args["record_id"]):
            print(f"Deleted archived folder {validated_args['record_id']}")
            return EXIT_OK

        print(UNAVAILABLE_MESSAGE, file=sys.stderr)
        return EXIT_UNAVAILABLE

    def _run_purge(self, config: ArchiverConfig) -> int:
        service = self._build_service(config, with_database=True)
        deleted = service.purge_expired()
        print(f"Purged {deleted} expired archived folder(s)")
        return EXIT_OK

    def _emit_folder(
        self,
        folder: PresentationFolder,
        fmt: str,
        output_path: Optional[Path],
        config: ArchiverConfig,
    ) -> None:
        """Render a folder to stdout or export it to a file."""
        if fmt == "json":
            exporter = self._json_exporter(config)
        else:
            exporter = get_exporter(fmt)()

        if output_path is None:
            self._write_text(exporter.render(folder), None)
            return

        result = exporter.export(folder, output_path)
        for warning in result.warnings:
            self.logger.warning(warning)
        print(f"Exported {result.count} tabs to {result.path}")

    def _json_exporter(self, config: ArchiverConfig) -> JSONExporter:
        return JSONExporter(
            indent=config.output.indent or None,
            sort_keys=config.output.sort_keys,
            compact=config.output.compact,
        )

    def _write_text(self, content: str, output_path: Optional[Path]) -> None:
        if not content.endswith("\n"):
            content += "\n"

        if output_path is None:
            sys.stdout.write(content)
            return

        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        print(f"Wrote {output_path}")


def main(args=None):
    """Main entry point for the CLI."""
    cli = CLIInterface()
    return cli.run(args)


if __name__ == "__main__":
    sys.exit(main())
