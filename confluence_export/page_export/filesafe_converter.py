"""Filesafe naming of exported pages and assets."""

import re
from typing import Set

UNSAFE_ASSET_CHARS = re.compile(r'[/\\:*?"<>|]')
MULTIPLE_SPACES = re.compile(r' {2,}')

UNTITLED = "untitled"


class FilesafeConverter:
    """Converts page titles and attachment names to safe filenames.

    Page titles keep letters, digits, ``-``, ``_`` and spaces; anything else
    becomes ``_``. Asset names only lose the characters that are invalid on
    common filesystems, so extensions survive.

    Examples:
        - "Release Notes: 2.0" → "Release Notes_ 2_0"
        - "diagram: v1.png" → "diagram_ v1.png"
    """

    @staticmethod
    def title_to_filename(title: str) -> str:
        """Convert a page title to a base filename without extension.

        The conversion is idempotent: converting a result again yields the
        same result.

        Examples:
            >>> FilesafeConverter.title_to_filename("API / Getting Started")
            'API _ Getting Started'
        """
        filename = "".join(
            char if char.isalnum() or char in "-_ " else "_"
            for char in title
        )
        filename = MULTIPLE_SPACES.sub(" ", filename).strip()
        return filename or UNTITLED

    @staticmethod
    def asset_filename(name: str) -> str:
        """Replace characters that are invalid in filenames with ``_``."""
        safe = UNSAFE_ASSET_CHARS.sub("_", name).strip()
        return safe or UNTITLED


class UniqueNameAllocator:
    """Hands out filenames that are unique within one directory.

    Repeated names get a counter before the extension: ``x.png``,
    ``x-1.png``, ``x-2.png``...
    """

    def __init__(self):
        self._used: Set[str] = set()

    def reserve(self, name: str) -> None:
        self._used.add(name)

    def allocate(self, name: str) -> str:
        """Return a sanitized, not yet used variant of ``name``."""
        safe = FilesafeConverter.asset_filename(name)
        candidate = safe
        if "." in safe.lstrip("."):
            base, extension = safe.rsplit(".", 1)
            extension = f".{extension}"
        else:
            base, extension = safe, ""

        counter = 1
        while candidate in self._used:
            candidate = f"{base}-{counter}{extension}"
            counter += 1

        self._used.add(candidate)
        return candidate
