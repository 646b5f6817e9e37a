"""Data models for Confluence content and conversion options."""

from confluence_export.models.confluence_page import (
    Attachment,
    Links,
    Page,
    Space,
    StorageBody,
    UserInfo,
)
from confluence_export.models.conversion_options import ConversionOptions

__all__ = [
    'Attachment',
    'ConversionOptions',
    'Links',
    'Page',
    'Space',
    'StorageBody',
    'UserInfo',
]
