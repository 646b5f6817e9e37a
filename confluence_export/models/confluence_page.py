"""Confluence page, attachment and user data models.

These mirror the subset of the REST API responses that the exporter uses.
Each model is built from the raw response dict with ``from_api``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StorageBody:
    """A page body in one representation.

    Attributes:
        value: Raw body content (storage format XHTML)
        representation: Representation name, normally "storage"
    """
    value: str
    representation: str = "storage"


@dataclass
class Space:
    """Space a page lives in.

    Attributes:
        key: Space key (e.g., "TEAM")
        name: Display name of the space
        kind: Space type as reported by the API (e.g., "global")
    """
    key: str
    name: str = ""
    kind: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Space':
        return cls(
            key=data.get('key', ''),
            name=data.get('name', ''),
            kind=data.get('type', ''),
        )


@dataclass
class Links:
    """Links attached to a page.

    Attributes:
        webui: Relative path of the page in the web UI
        self_link: Absolute REST URL of the page
        base: Base URL of the site, when the API reports it
    """
    webui: Optional[str] = None
    self_link: Optional[str] = None
    base: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Links':
        return cls(
            webui=data.get('webui'),
            self_link=data.get('self'),
            base=data.get('base'),
        )


@dataclass
class Page:
    """Confluence page as returned by the content API.

    Attributes:
        id: Unique identifier for the page
        title: Page title
        kind: Content type (e.g., "page")
        status: Content status (e.g., "current")
        body: Storage-format body, if it was expanded
        space: Space the page lives in, if it was expanded
        links: Web UI and REST links
    """
    id: str
    title: str
    kind: str = "page"
    status: str = "current"
    body: Optional[StorageBody] = None
    space: Optional[Space] = None
    links: Optional[Links] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Page':
        """Build a Page from a content API response.

        Args:
            data: Page dict, optionally with body.storage and space expanded

        Returns:
            Page with the fields present in the response
        """
        body = None
        storage = (data.get('body') or {}).get('storage')
        if storage and storage.get('value') is not None:
            body = StorageBody(
                value=storage['value'],
                representation=storage.get('representation', 'storage'),
            )

        space = Space.from_api(data['space']) if data.get('space') else None
        links = Links.from_api(data['_links']) if data.get('_links') else None

        return cls(
            id=str(data['id']),
            title=data.get('title', ''),
            kind=data.get('type', 'page'),
            status=data.get('status', 'current'),
            body=body,
            space=space,
            links=links,
        )

    @property
    def storage(self) -> Optional[str]:
        """Storage-format body value, or None if the page has none."""
        return self.body.value if self.body else None


@dataclass
class Attachment:
    """File attached to a page.

    Attributes:
        id: Attachment content ID
        title: File name as shown in Confluence
        kind: Content type, normally "attachment"
        media_type: MIME type of the file
        file_size: Size in bytes
        download_link: Download path or URL (may be relative to the site)
    """
    id: str
    title: str
    kind: str = "attachment"
    media_type: Optional[str] = None
    file_size: Optional[int] = None
    download_link: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Attachment':
        extensions = data.get('extensions') or {}
        metadata = data.get('metadata') or {}
        return cls(
            id=str(data.get('id', '')),
            title=data.get('title', ''),
            kind=data.get('type', 'attachment'),
            media_type=extensions.get('mediaType') or metadata.get('mediaType'),
            file_size=extensions.get('fileSize'),
            download_link=(data.get('_links') or {}).get('download'),
        )


@dataclass
class UserInfo:
    """Authenticated user as reported by the current-user endpoint.

    Attributes:
        account_id: Atlassian account ID
        display_name: Display name
        email: E-mail address, if visible
        public_name: Public name, if set
    """
    account_id: str
    display_name: str = ""
    email: Optional[str] = None
    public_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'UserInfo':
        return cls(
            account_id=data.get('accountId', ''),
            display_name=data.get('displayName', ''),
            email=data.get('email'),
            public_name=data.get('publicName'),
        )
