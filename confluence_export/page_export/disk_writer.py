"""Writing processed pages and their assets to disk.

Assets are written before the page document so a document never points at
files that do not exist yet. Without ``overwrite``, files are created
exclusively and an existing file is reported instead of replaced.
"""

import logging
from pathlib import Path

from confluence_export.content_converter.output_format import OutputFormat
from .errors import FileExistsConflictError, FilesystemError
from .models import ProcessedPage

logger = logging.getLogger(__name__)


class DiskWriter:
    """Writes a ProcessedPage into an output directory.

    Layout of a page written to ``out/``::

        out/<filename>.md
        out/<filename>.raw.xml          (with save_raw)
        out/images/<image>
        out/attachments/<attachment>

    Example:
        >>> writer = DiskWriter(overwrite=False)
        >>> path = writer.write(processed, Path("./export"), OutputFormat.MARKDOWN)
    """

    def __init__(self, overwrite: bool = False):
        self.overwrite = overwrite

    def write(self, page: ProcessedPage, directory: Path, output_format: OutputFormat) -> Path:
        """Write a page, its assets and optionally its raw storage.

        Args:
            page: Processed page
            directory: Output directory for this page
            output_format: Determines the document's file extension

        Returns:
            Path of the written document

        Raises:
            FileExistsConflictError: If a file exists and overwrite is disabled
            FilesystemError: If a directory or file cannot be written
        """
        directory = Path(directory)
        self.ensure_directory(directory)

        for image in page.images:
            self._write_bytes(directory / image.relative_path, image.content)
        for attachment in page.attachments:
            self._write_bytes(directory / attachment.relative_path, attachment.content)

        if page.raw_storage is not None:
            self._write_bytes(
                directory / f"{page.filename}.raw.xml",
                page.raw_storage.encode("utf-8"),
            )

        target = directory / f"{page.filename}.{output_format.file_extension}"
        self._write_bytes(target, page.content.encode("utf-8"))
        logger.info(f"Wrote {target}")
        return target

    def ensure_directory(self, directory: Path) -> None:
        """Create a directory and its parents.

        Raises:
            FilesystemError: If the directory cannot be created
        """
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(str(directory), 'create_directory', str(e)) from e

    def _write_bytes(self, path: Path, content: bytes) -> None:
        self.ensure_directory(path.parent)
        mode = 'wb' if self.overwrite else 'xb'
        try:
            with open(path, mode) as f:
                f.write(content)
        except FileExistsError as e:
            raise FileExistsConflictError(str(path)) from e
        except PermissionError as e:
            raise FilesystemError(str(path), 'write', 'Permission denied') from e
        except OSError as e:
            raise FilesystemError(str(path), 'write', str(e)) from e
