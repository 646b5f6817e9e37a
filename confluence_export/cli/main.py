"""Main CLI entry point for confluence-export command.

This module provides the Typer application that serves as the entry point
for the confluence-export command-line tool. Everything is an option of the
main command; there are no subcommands.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from confluence_export.cli.export_command import ExportCommand
from confluence_export.cli.models import ExportRequest
from confluence_export.cli.output import OutputHandler

VERSION = "0.1.0"

app = typer.Typer(
    name="confluence-export",
    help="""Export Confluence pages to Markdown or AsciiDoc files.

QUICK START:
  confluence-export <page_url>                          # Export one page
  confluence-export <page_url> --children               # Export a page tree
  confluence-export <page_id> --url <confluence_url>    # Export by page ID
  confluence-export --check-auth --url <confluence_url> # Verify credentials

Credentials come from --user/--token, CONFLUENCE_USER/CONFLUENCE_API_TOKEN
(a .env file is read) or ~/.netrc.""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'confluence_export' namespace logger to avoid
    affecting third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("confluence_export")
    app_logger.setLevel(level)
    # Repeated invocations in one process must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-export_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    page: Optional[str] = typer.Argument(
        None,
        help="Confluence page URL or numeric page ID",
        metavar="PAGE_URL_OR_ID",
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="Confluence base URL (required with a numeric page ID unless configured)",
        metavar="URL",
    ),
    user: Optional[str] = typer.Option(
        None,
        "--user",
        help="Confluence user email",
        metavar="EMAIL",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        help="Confluence API token",
        metavar="TOKEN",
    ),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory [default: ./confluence-export]",
        metavar="DIR",
    ),
    output_format: Optional[str] = typer.Option(
        None,
        "--format",
        help="Output format: markdown (md) or asciidoc (adoc) [default: markdown]",
        metavar="FORMAT",
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        help="Replace existing files",
    ),
    children: bool = typer.Option(
        False,
        "--children",
        "-r",
        help="Also export all descendant pages",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        help="Maximum depth below the page (requires --children)",
        metavar="N",
    ),
    attachments: bool = typer.Option(
        False,
        "--attachments",
        help="Download all page attachments",
    ),
    download_images: Optional[bool] = typer.Option(
        None,
        "--download-images/--no-download-images",
        help="Download embedded images [default: download]",
    ),
    images_dir: Optional[str] = typer.Option(
        None,
        "--images-dir",
        help="Subdirectory for downloaded images [default: images]",
        metavar="DIR",
    ),
    preserve_anchors: bool = typer.Option(
        False,
        "--preserve-anchors",
        help="Keep anchor macros as anchors in the output",
    ),
    compact_tables: bool = typer.Option(
        False,
        "--compact-tables",
        help="Render Markdown tables without column padding",
    ),
    save_raw: bool = typer.Option(
        False,
        "--save-raw",
        help="Also write the raw Confluence storage format (.raw.xml)",
    ),
    rate_limit: Optional[int] = typer.Option(
        None,
        "--rate-limit",
        help="Maximum API requests per second [default: 10]",
        metavar="N",
    ),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        help="API request timeout in seconds [default: 30]",
        metavar="SECONDS",
    ),
    config: Optional[str] = typer.Option(
        None,
        "--config",
        help="YAML configuration file [default: .confluence-export.yaml if present]",
        metavar="PATH",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "--dryrun",
        help="Show what would be exported without contacting Confluence",
    ),
    check_auth: bool = typer.Option(
        False,
        "--check-auth",
        help="Verify credentials and show the authenticated user",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Export Confluence pages to Markdown or AsciiDoc files.

    \b
    EXAMPLES:
      confluence-export https://company.atlassian.net/wiki/spaces/TEAM/pages/123456/Title
      confluence-export 123456 --url https://company.atlassian.net --format asciidoc
      confluence-export <page_url> -r --max-depth 2 --attachments -o ./docs

    \b
    EXIT CODES:
      0  success
      1  export failed (or some pages of a tree failed)
      2  invalid page reference, options or configuration
      3  authentication failed
      4  network error
    """
    if version:
        typer.echo(f"confluence-export version {VERSION}")
        raise typer.Exit()

    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    request = ExportRequest(
        page=page,
        url=url,
        user=user,
        token=token,
        output_dir=output_dir,
        format=output_format,
        overwrite=overwrite,
        children=children,
        max_depth=max_depth,
        download_attachments=attachments,
        download_images=download_images,
        images_dir=images_dir,
        preserve_anchors=preserve_anchors,
        compact_tables=compact_tables,
        save_raw=save_raw,
        rate_limit=rate_limit,
        timeout=timeout,
        config_path=config,
        dry_run=dry_run,
        check_auth=check_auth,
    )

    exit_code = ExportCommand(output_handler=output).run(request)

    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m confluence_export.cli.main
if __name__ == "__main__":
    main()
