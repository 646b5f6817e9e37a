"""Selection of the export output format."""

from enum import Enum
from typing import Optional

from confluence_export.models.conversion_options import ConversionOptions

from .asciidoc_converter import AsciiDocConverter
from .base_converter import StorageConverter
from .markdown_converter import MarkdownConverter

FORMAT_ALIASES = {
    "markdown": "markdown",
    "md": "markdown",
    "asciidoc": "asciidoc",
    "adoc": "asciidoc",
}


class OutputFormat(str, Enum):
    """Target markup language of an export."""
    MARKDOWN = "markdown"
    ASCIIDOC = "asciidoc"

    @classmethod
    def from_name(cls, name: str) -> 'OutputFormat':
        """Look up a format by name or alias ("md", "adoc").

        Raises:
            ValueError: If the name is not a known format
        """
        canonical = FORMAT_ALIASES.get(name.strip().lower())
        if canonical is None:
            raise ValueError(
                f"Unknown output format '{name}' "
                f"(expected one of: {', '.join(sorted(FORMAT_ALIASES))})"
            )
        return cls(canonical)

    @property
    def file_extension(self) -> str:
        return "md" if self is OutputFormat.MARKDOWN else "adoc"

    def converter(self, options: Optional[ConversionOptions] = None) -> StorageConverter:
        """Create the converter for this format."""
        if self is OutputFormat.MARKDOWN:
            return MarkdownConverter(options)
        return AsciiDocConverter(options)

    def convert(self, storage: str, options: Optional[ConversionOptions] = None) -> str:
        """Convert a storage-format document to this format.

        Raises:
            ConversionError: If the document cannot be parsed
        """
        return self.converter(options).convert(storage)
