"""HTTP fetching of recipe pages for URL import."""

import asyncio
import ipaddress
from dataclasses import dataclass
from enum import Enum
from types import TracebackType

import httpx

from recipebox.config import get_settings
from recipebox.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_SCHEMES = ("http", "https")
ALLOWED_CONTENT_TYPES = ("text/html", "text/plain")
MAX_REDIRECTS = 5


class FetchErrorKind(str, Enum):
    """Why a page could not be obtained."""

    INVALID_URL = "invalid_url"
    BLOCKED_HOST = "blocked_host"
    TIMEOUT = "timeout"
    UPSTREAM_STATUS = "upstream_status"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    NETWORK = "network"


class FetchError(Exception):
    """Raised when a page cannot be fetched; never retried."""

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind,
        url: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.url = url
        self.status_code = status_code


@dataclass
class FetchedPage:
    """Body of a fetched page, possibly truncated to the size limit."""

    url: str
    html: str
    truncated: bool = False
    content_type: str = ""


def is_private_hostname(hostname: str) -> bool:
    """Check for localhost and loopback, private, link-local or unspecified IPs."""
    host = hostname.strip("[]").rstrip(".").lower()
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
        or address.is_reserved
    )


def validate_url(url: str) -> httpx.URL:
    """
    Parse and vet a user-supplied URL.

    Raises:
        FetchError: INVALID_URL for unparseable or non-http(s) URLs,
            BLOCKED_HOST for local and private addresses.
    """
    if not url or not isinstance(url, str):
        raise FetchError("URL is required", FetchErrorKind.INVALID_URL)
    try:
        parsed = httpx.URL(url.strip())
    except httpx.InvalidURL as e:
        raise FetchError(f"Invalid URL: {url}", FetchErrorKind.INVALID_URL, url=url) from e

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise FetchError(
            "Only http/https URLs are allowed", FetchErrorKind.INVALID_URL, url=url
        )
    if not parsed.host:
        raise FetchError(f"Invalid URL: {url}", FetchErrorKind.INVALID_URL, url=url)
    if is_private_hostname(parsed.host):
        raise FetchError(
            "Private or local URLs are not allowed", FetchErrorKind.BLOCKED_HOST, url=url
        )
    return parsed


class PageFetcher:
    """Fetches recipe pages with a hard timeout and a size cap."""

    def __init__(
        self,
        timeout: float | None = None,
        max_chars: int | None = None,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        settings = get_settings()
        self.timeout = timeout or settings.fetch_timeout
        self.max_chars = max_chars or settings.fetch_max_chars
        self.user_agent = user_agent or settings.fetch_user_agent
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=False,
                headers={
                    "User-Agent": self.user_agent,
                    "Accept": "text/html,application/xhtml+xml,text/plain;q=0.9,*/*;q=0.1",
                },
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def _get_following_redirects(self, url: httpx.URL) -> httpx.Response:
        client = await self._get_client()
        for _ in range(MAX_REDIRECTS + 1):
            response = await client.get(url)
            if not response.is_redirect:
                return response
            location = response.headers.get("location", "")
            # Every hop is vetted so a redirect cannot reach a private host
            url = validate_url(str(response.url.join(location)))
            logger.debug(f"Following redirect to {url}")
        raise FetchError(
            f"Too many redirects fetching {url}", FetchErrorKind.NETWORK, url=str(url)
        )

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page as text.

        Args:
            url: http(s) URL of a public page.

        Returns:
            FetchedPage; ``truncated`` is set when the body exceeded ``max_chars``.

        Raises:
            FetchError: with the kind describing the failure.
        """
        target = validate_url(url)

        try:
            response = await asyncio.wait_for(
                self._get_following_redirects(target), timeout=self.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"Fetching {url} timed out after {self.timeout}s")
            raise FetchError(
                "Fetching URL timed out", FetchErrorKind.TIMEOUT, url=url
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Fetching {url} failed: {e}")
            raise FetchError("Failed to fetch URL", FetchErrorKind.NETWORK, url=url) from e

        if not response.is_success:
            logger.warning(f"Fetching {url} returned status {response.status_code}")
            raise FetchError(
                f"Failed to fetch URL ({response.status_code})",
                FetchErrorKind.UPSTREAM_STATUS,
                url=url,
                status_code=response.status_code,
            )

        content_type = response.headers.get("content-type", "").lower()
        if not any(allowed in content_type for allowed in ALLOWED_CONTENT_TYPES):
            raise FetchError(
                "URL must return HTML or plain text",
                FetchErrorKind.UNSUPPORTED_CONTENT_TYPE,
                url=url,
                status_code=response.status_code,
            )

        html = response.text
        truncated = len(html) > self.max_chars
        if truncated:
            logger.warning(f"Page {url} has {len(html)} chars, truncating to {self.max_chars}")
            html = html[: self.max_chars]

        return FetchedPage(url=str(response.url), html=html, truncated=truncated, content_type=content_type)
