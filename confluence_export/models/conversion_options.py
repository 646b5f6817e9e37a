"""Options controlling storage-format conversion."""

from dataclasses import dataclass


@dataclass
class ConversionOptions:
    """Switches that change how a page body is rendered.

    Attributes:
        preserve_anchors: Emit anchor macros as HTML anchors / AsciiDoc ids
        compact_tables: Render Markdown tables without column padding
    """
    preserve_anchors: bool = False
    compact_tables: bool = False
