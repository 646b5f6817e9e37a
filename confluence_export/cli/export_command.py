"""Export command orchestration.

This module implements the ExportCommand class that runs one invocation of
confluence-export: it merges command-line options with the configuration
file, resolves the page reference and credentials, then either prints a
dry-run plan, checks authentication, or exports the page (and optionally
its descendants) to disk.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from confluence_export.cli.errors import CLIError, InputError
from confluence_export.cli.models import ExitCode, ExportRequest
from confluence_export.cli.output import OutputHandler
from confluence_export.confluence_client.api_wrapper import APIWrapper
from confluence_export.confluence_client.auth import Authenticator, credentials_help
from confluence_export.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    ConversionError,
    ExportError,
    InvalidCredentialsError,
    InvalidURLError,
    PageNotFoundError,
)
from confluence_export.confluence_client.url_parser import (
    UrlInfo,
    is_page_id,
    resolve_page_input,
)
from confluence_export.content_converter.output_format import OutputFormat
from confluence_export.models.confluence_page import Page, UserInfo
from confluence_export.models.conversion_options import ConversionOptions
from confluence_export.page_export.config_loader import ConfigLoader
from confluence_export.page_export.disk_writer import DiskWriter
from confluence_export.page_export.errors import (
    ConfigError,
    FilesystemError,
)
from confluence_export.page_export.exporter import PageExporter
from confluence_export.page_export.models import ExportConfig, ExportSummary, ProcessOptions
from confluence_export.page_export.page_fetcher import PageFetcher
from confluence_export.page_export.page_processor import PageProcessor
from confluence_export.page_export.tree_builder import TreeBuilder

logger = logging.getLogger(__name__)


def resolve_settings(request: ExportRequest, config: ExportConfig) -> ExportConfig:
    """Apply command-line options over the configuration file values.

    Raises:
        InputError: If an option value or combination is invalid
    """
    try:
        output_format = (
            OutputFormat.from_name(request.format) if request.format else config.format
        )
    except ValueError as e:
        raise InputError(str(e)) from e

    children = request.children or config.children
    if request.max_depth is not None:
        if not children:
            raise InputError("--max-depth requires --children")
        if request.max_depth < 0:
            raise InputError("--max-depth must not be negative")

    rate_limit = request.rate_limit if request.rate_limit is not None else config.rate_limit
    if rate_limit < 1:
        raise InputError("--rate-limit must be at least 1 request per second")

    timeout = request.timeout if request.timeout is not None else config.timeout
    if timeout < 1:
        raise InputError("--timeout must be at least 1 second")

    return ExportConfig(
        output_dir=request.output_dir or config.output_dir,
        format=output_format,
        images_dir=request.images_dir or config.images_dir,
        download_images=(
            request.download_images if request.download_images is not None
            else config.download_images
        ),
        download_attachments=request.download_attachments or config.download_attachments,
        children=children,
        max_depth=request.max_depth if request.max_depth is not None else config.max_depth,
        overwrite=request.overwrite or config.overwrite,
        save_raw=request.save_raw or config.save_raw,
        preserve_anchors=request.preserve_anchors or config.preserve_anchors,
        compact_tables=request.compact_tables or config.compact_tables,
        rate_limit=rate_limit,
        timeout=timeout,
        url=request.url or config.url,
    )


class ExportCommand:
    """Runs one confluence-export invocation.

    Exceptions raised while exporting are mapped to exit codes here, so the
    typer entry point only has to exit with the returned value.

    Example:
        >>> command = ExportCommand(OutputHandler(verbosity=1))
        >>> exit_code = command.run(ExportRequest(page="123456", url="https://example.atlassian.net"))
    """

    def __init__(
        self,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[APIWrapper] = None,
    ):
        """Initialize the command.

        Args:
            output_handler: Terminal output (defaults to a plain OutputHandler)
            authenticator: Credential source (built from the options if None)
            api: API wrapper (built from the authenticator if None)
        """
        self.output = output_handler or OutputHandler()
        self._authenticator = authenticator
        self._api = api

    def run(self, request: ExportRequest) -> ExitCode:
        """Execute the command.

        Returns:
            ExitCode for the run
        """
        try:
            settings = resolve_settings(request, self._load_config(request.config_path))

            if not request.page and not request.check_auth:
                raise InputError("A page URL or page ID is required (or use --check-auth)")

            target = self._resolve_target(request, settings)
            authenticator = self._get_authenticator(request, settings, target)

            if request.dry_run:
                self.output.print_dry_run_plan(self._plan(request, settings, target))
                return ExitCode.SUCCESS

            api = self._get_api(authenticator, settings)

            if request.check_auth:
                return self._check_auth(api, authenticator)

            summary = self._export(api, target, settings)
            self.output.print_export_summary(summary, settings.output_dir)
            if summary.failures:
                return ExitCode.GENERAL_ERROR
            return ExitCode.SUCCESS

        except InvalidCredentialsError as e:
            self.output.error(f"Authentication failed: {e}")
            self.output.print(credentials_help())
            return ExitCode.AUTH_ERROR

        except PageNotFoundError as e:
            self.output.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            self.output.error(f"Network error: {e}")
            self.output.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except (InvalidURLError, InputError, ConfigError) as e:
            self.output.error(str(e))
            return ExitCode.INPUT_ERROR

        except (FilesystemError, ConversionError) as e:
            self.output.error(str(e))
            return ExitCode.GENERAL_ERROR

        except (CLIError, ExportError) as e:
            self.output.error(f"Export failed: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during export")
            self.output.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _load_config(self, config_path: Optional[str]) -> ExportConfig:
        try:
            return ConfigLoader.load_optional(config_path)
        except FilesystemError as e:
            raise ConfigError(f"Cannot read configuration file: {e}") from e

    def _resolve_target(self, request: ExportRequest, settings: ExportConfig) -> Optional[UrlInfo]:
        """Resolve the page argument to a base URL and page ID.

        A numeric page ID takes its base URL from --url, the configuration
        file or CONFLUENCE_URL, in that order.
        """
        if not request.page:
            return None

        base_url = settings.url
        if not base_url and is_page_id(request.page):
            base_url = (self._authenticator or Authenticator()).get_base_url()
        return resolve_page_input(request.page, base_url)

    def _get_authenticator(
        self,
        request: ExportRequest,
        settings: ExportConfig,
        target: Optional[UrlInfo],
    ) -> Authenticator:
        if self._authenticator is not None:
            return self._authenticator
        url = target.base_url if target is not None else settings.url
        return Authenticator(url=url, user=request.user, api_token=request.token)

    def _get_api(self, authenticator: Authenticator, settings: ExportConfig) -> APIWrapper:
        if self._api is not None:
            return self._api
        return APIWrapper(authenticator, timeout=settings.timeout, rate_limit=settings.rate_limit)

    def _check_auth(self, api: APIWrapper, authenticator: Authenticator) -> ExitCode:
        with self.output.spinner("Checking credentials..."):
            user = UserInfo.from_api(api.get_current_user())
        self.output.print_user_info(user, authenticator.describe_sources())
        return ExitCode.SUCCESS

    def _plan(
        self,
        request: ExportRequest,
        settings: ExportConfig,
        target: Optional[UrlInfo],
    ) -> List[Tuple[str, str]]:
        """Describe the export without touching the network."""
        plan: List[Tuple[str, str]] = []
        if target is not None:
            plan.append(("Confluence URL", target.base_url))
            plan.append(("Page ID", target.page_id))
            plan.append(("Space", target.space_key or "(unknown)"))
        if request.check_auth:
            plan.append(("Check authentication", "yes"))

        plan.append(("Output directory", settings.output_dir))
        plan.append(("Format", settings.format.value))
        if settings.children:
            depth = "unlimited" if settings.max_depth is None else str(settings.max_depth)
            plan.append(("Child pages", f"yes (max depth: {depth})"))
        else:
            plan.append(("Child pages", "no"))
        plan.append((
            "Images",
            f"download to {settings.images_dir}/" if settings.download_images else "not downloaded",
        ))
        plan.append(("Attachments", "download" if settings.download_attachments else "not downloaded"))
        plan.append(("Overwrite", "yes" if settings.overwrite else "no"))
        plan.append(("Save raw storage", "yes" if settings.save_raw else "no"))
        plan.append(("Preserve anchors", "yes" if settings.preserve_anchors else "no"))
        plan.append(("Compact tables", "yes" if settings.compact_tables else "no"))
        plan.append(("Rate limit", f"{settings.rate_limit} requests/s"))
        plan.append(("Timeout", f"{settings.timeout}s"))
        return plan

    def _export(self, api: APIWrapper, target: UrlInfo, settings: ExportConfig) -> ExportSummary:
        fetcher = PageFetcher(api)
        options = ProcessOptions(
            format=settings.format,
            save_raw=settings.save_raw,
            download_images=settings.download_images,
            images_subdir=settings.images_dir,
            download_attachments=settings.download_attachments,
            conversion_options=ConversionOptions(
                preserve_anchors=settings.preserve_anchors,
                compact_tables=settings.compact_tables,
            ),
        )
        writer = DiskWriter(overwrite=settings.overwrite)
        output_dir = Path(settings.output_dir)

        if not settings.children:
            with self.output.spinner(f"Exporting page {target.page_id}..."):
                page = fetcher.fetch_page(target.page_id)
                exporter = PageExporter(PageProcessor(fetcher), writer, options)
                summary = exporter.export_page(page, output_dir)
            self.output.success(f"Exported '{page.title}' to {summary.files[0]}")
            return summary

        with self.output.spinner("Discovering page tree..."):
            tree = TreeBuilder(fetcher).build(target.page_id, settings.max_depth)
        total = tree.count()
        self.output.info(f"Found {total} page(s) to export")

        with self.output.progress_bar(total, "Exporting pages") as (progress, task):
            def on_page_done(page: Page, count: int) -> None:
                progress.update(task, advance=count)
                self.output.debug(f"Processed '{page.title}' ({page.id})")

            exporter = PageExporter(PageProcessor(fetcher), writer, options, on_page_done)
            return exporter.export_tree(tree, output_dir)
