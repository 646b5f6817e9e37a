"""Authentication module for loading Confluence credentials.

Credentials are resolved per value from three sources, highest precedence
first:

1. Values passed explicitly (the ``--url``, ``--user`` and ``--token`` options)
2. Environment variables, optionally loaded from a .env file by python-dotenv
3. A ``~/.netrc`` entry whose machine matches the Confluence host
"""

import logging
import netrc
import os
from pathlib import Path
from typing import Dict, NamedTuple, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

logger = logging.getLogger(__name__)

URL_ENV_VAR = 'CONFLUENCE_URL'
USER_ENV_VAR = 'CONFLUENCE_USER'
TOKEN_ENV_VARS = ('CONFLUENCE_API_TOKEN', 'CONFLUENCE_TOKEN')

API_TOKEN_HELP_URL = "https://id.atlassian.com/manage-profile/security/api-tokens"


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str


class Authenticator:
    """Loads and validates Confluence credentials.

    The token is never logged. ``describe_sources()`` reports where each value
    came from so the user can tell which configuration is in effect.

    Environment variables:
        CONFLUENCE_URL: Confluence instance URL (e.g., https://example.atlassian.net)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token (CONFLUENCE_TOKEN also accepted)

    Example:
        >>> auth = Authenticator(url="https://example.atlassian.net")
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(
        self,
        url: Optional[str] = None,
        user: Optional[str] = None,
        api_token: Optional[str] = None,
        netrc_path: Optional[Path] = None,
    ):
        """Initialize the authenticator and load variables from a .env file.

        Args:
            url: Explicit base URL, overrides the environment
            user: Explicit user email, overrides environment and .netrc
            api_token: Explicit API token, overrides environment and .netrc
            netrc_path: Alternative .netrc location (defaults to ~/.netrc)
        """
        load_dotenv()
        self._url = url
        self._user = user
        self._api_token = api_token
        self._netrc_path = netrc_path

    def get_credentials(self) -> Credentials:
        """Resolve the complete set of credentials.

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required value is missing
        """
        resolved, _ = self._resolve()
        url, user, api_token = resolved

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown"
            )

        return Credentials(url=url, user=user, api_token=api_token)

    def get_base_url(self) -> Optional[str]:
        """Return the configured base URL without requiring the other values."""
        return self._url or os.getenv(URL_ENV_VAR) or None

    def describe_sources(self) -> Dict[str, str]:
        """Describe where each credential value comes from.

        Returns:
            Dict mapping 'url', 'user' and 'api_token' to a source label
            ('option', 'environment', '.netrc' or 'missing')
        """
        _, sources = self._resolve()
        return sources

    def _resolve(self) -> Tuple[Tuple[Optional[str], Optional[str], Optional[str]], Dict[str, str]]:
        sources: Dict[str, str] = {}

        url = self._url
        sources['url'] = 'option'
        if not url:
            url = os.getenv(URL_ENV_VAR)
            sources['url'] = 'environment'
        if not url:
            sources['url'] = 'missing'

        user = self._user
        sources['user'] = 'option'
        if not user:
            user = os.getenv(USER_ENV_VAR)
            sources['user'] = 'environment'

        api_token = self._api_token
        sources['api_token'] = 'option'
        if not api_token:
            sources['api_token'] = 'environment'
            for name in TOKEN_ENV_VARS:
                api_token = os.getenv(name)
                if api_token:
                    break

        if url and (not user or not api_token):
            login, password = self._lookup_netrc(url)
            if not user and login:
                user = login
                sources['user'] = '.netrc'
            if not api_token and password:
                api_token = password
                sources['api_token'] = '.netrc'

        if not user:
            sources['user'] = 'missing'
        if not api_token:
            sources['api_token'] = 'missing'

        return (url, user, api_token), sources

    def _lookup_netrc(self, url: str) -> Tuple[Optional[str], Optional[str]]:
        """Find login and password for the URL host in the .netrc file.

        A missing file yields nothing. A malformed file is logged and ignored
        so that explicit or environment credentials still work.
        """
        host = urlparse(url).hostname
        if not host:
            return None, None

        path = self._netrc_path or Path.home() / '.netrc'
        if not Path(path).is_file():
            return None, None

        try:
            entries = netrc.netrc(str(path))
        except (netrc.NetrcParseError, OSError) as e:
            logger.warning(f"Ignoring unreadable netrc file {path}: {e}")
            return None, None

        # authenticators() falls back to the 'default' entry
        entry = entries.authenticators(host)
        if entry is None:
            return None, None

        login, _, password = entry
        return login or None, password or None


def credentials_help() -> str:
    """Return setup instructions shown when authentication fails."""
    return (
        "Confluence credentials are required. Create an API token at "
        f"{API_TOKEN_HELP_URL} and provide it in one of these ways:\n"
        "  1. Options: --url, --user and --token\n"
        f"  2. Environment: {URL_ENV_VAR}, {USER_ENV_VAR} and {TOKEN_ENV_VARS[0]} "
        "(a .env file is read automatically)\n"
        "  3. ~/.netrc: machine <host> login <email> password <api-token>"
    )
