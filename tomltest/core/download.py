"""
Network fetcher for the toml-test release payload.

This module provides:
- HTTP/HTTPS GET with per-request proxy selection
- Manual redirect following (301/302) with a hop limit
- Streaming of the response body to disk with progress reporting

Redirects are followed here rather than by requests so that the proxy is
re-selected for each hop's scheme.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urljoin, urlsplit

import requests
from requests.exceptions import RequestException

from tomltest.core.config import EnvironmentConfig
from tomltest.core.exceptions import FetchError, HTTPStatusError, TooManyRedirectsError
from tomltest.core.proxy import select_proxy

logger = logging.getLogger(__name__)

REDIRECT_STATUSES = (301, 302)
DEFAULT_MAX_REDIRECTS = 10
CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sent no content-length
    percentage: float

    def __str__(self) -> str:
        return format_progress(self)


class Fetcher:
    """
    Issues GET requests, following redirects by hand.

    Attributes:
        config: Configuration provider used for proxy selection
        session: requests session; one created here ignores environment
            proxies, a caller-supplied session is used as given
        max_redirects: Maximum redirect hops before giving up
        timeout: Request timeout in seconds, or None to wait indefinitely

    Example:
        >>> fetcher = Fetcher()
        >>> response = fetcher.fetch("https://example.com/file.gz")
        >>> download_to_file(response, Path("file.gz"))
    """

    def __init__(
        self,
        config: Optional[EnvironmentConfig] = None,
        session: Optional[requests.Session] = None,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        timeout: Optional[float] = None,
    ):
        self.config = config or EnvironmentConfig()
        if session is None:
            session = requests.Session()
            # Proxy choice belongs to select_proxy(), not to requests' env lookup
            session.trust_env = False
        self.session = session
        self.max_redirects = max_redirects
        self.timeout = timeout

    def proxies_for(self, url: str) -> dict:
        """Build the requests ``proxies`` mapping for url (empty for direct)."""
        agent = select_proxy(url, self.config)
        if agent is None:
            return {}
        return agent.as_requests_proxies(urlsplit(url).scheme.lower())

    def fetch(self, url: str) -> requests.Response:
        """
        GET url and return the live streaming response.

        Args:
            url: URL to fetch

        Returns:
            Successful (2xx) response with an unread body

        Raises:
            HTTPStatusError: If the final response is not 2xx
            TooManyRedirectsError: If more than max_redirects hops are needed
            FetchError: On connection, DNS or proxy failures
        """
        current_url = url
        for hop in range(self.max_redirects + 1):
            response = self._get(current_url)

            if response.status_code in REDIRECT_STATUSES:
                location = response.headers.get("location")
                response.close()
                if not location:
                    raise HTTPStatusError(response.status_code, current_url)
                current_url = urljoin(response.url or current_url, location)
                logger.debug(f"Redirect {hop + 1} -> {current_url}")
                continue

            if not 200 <= response.status_code < 300:
                response.close()
                raise HTTPStatusError(response.status_code, current_url)

            return response

        raise TooManyRedirectsError(self.max_redirects, url)

    def _get(self, url: str) -> requests.Response:
        logger.debug(f"GET {url}")
        try:
            return self.session.get(
                url,
                stream=True,
                allow_redirects=False,
                proxies=self.proxies_for(url),
                timeout=self.timeout,
            )
        except RequestException as e:
            raise FetchError(f"Request to {url} failed: {e}") from e


def _content_length(response: requests.Response) -> int:
    """Declared body size, or 0 when absent or malformed."""
    content_length = response.headers.get("content-length")
    if not content_length:
        return 0
    try:
        return int(content_length)
    except ValueError:
        logger.debug(f"Ignoring invalid content-length: {content_length!r}")
        return 0


def download_to_file(
    response: requests.Response,
    destination: Path,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """
    Stream a response body into destination.

    The file and the response are closed on every exit path.

    Args:
        response: Response returned by Fetcher.fetch()
        destination: File to write
        progress_callback: Optional callback for progress updates

    Returns:
        destination

    Raises:
        FetchError: If reading the body fails mid-stream
        OSError: If the file cannot be written
    """
    destination = Path(destination)

    total_size = _content_length(response)

    downloaded = 0
    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)
                downloaded += len(chunk)

                if progress_callback:
                    progress_callback(
                        DownloadProgress(
                            bytes_downloaded=downloaded,
                            total_bytes=total_size,
                            percentage=(downloaded / total_size * 100)
                            if total_size > 0
                            else 0.0,
                        )
                    )
    except RequestException as e:
        raise FetchError(f"Error while downloading {response.url}: {e}") from e
    finally:
        response.close()

    logger.debug(f"Wrote {downloaded} bytes to {destination}")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> format_progress(DownloadProgress(1048576, 2097152, 50.0))
        '1.0/2.0 MB (50.0%)'
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024

    if progress.total_bytes > 0:
        mb_total = progress.total_bytes / 1024 / 1024
        return f"{mb_downloaded:.1f}/{mb_total:.1f} MB ({progress.percentage:.1f}%)"
    return f"{mb_downloaded:.1f} MB"
