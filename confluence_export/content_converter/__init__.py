"""Conversion of Confluence storage format to Markdown and AsciiDoc."""

from .asciidoc_converter import AsciiDocConverter
from .base_converter import StorageConverter
from .markdown_converter import MarkdownConverter
from .output_format import OutputFormat
from .storage_parser import decode_entities, parse_storage, wrap_storage

__all__ = [
    'AsciiDocConverter',
    'MarkdownConverter',
    'OutputFormat',
    'StorageConverter',
    'decode_entities',
    'parse_storage',
    'wrap_storage',
]
