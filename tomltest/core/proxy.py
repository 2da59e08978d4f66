"""
Proxy selection for outbound downloads.

select_proxy() is a pure decision over the target URL's scheme and the proxy
environment variables. Its result is either None (direct connection) or a
ProxyAgent describing which kind of proxy to route through.

Decision table:

    target   scheme variable        all_proxy fallback
    ------   -------------------    ---------------------------------
    http     http_proxy  -> HTTP    http...  -> HTTP
    https    https_proxy -> HTTPS   http...  -> HTTPS
    any      socks...    -> SOCKS   socks... -> SOCKS

Scheme variables win over all_proxy. A scheme variable whose value is
neither http- nor socks-prefixed is ignored and all_proxy is consulted.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlsplit

from tomltest.core.config import EnvironmentConfig

logger = logging.getLogger(__name__)


class ProxyKind(Enum):
    """Transport used to reach the proxy."""

    HTTP = "http"
    HTTPS = "https"
    SOCKS = "socks"


@dataclass(frozen=True)
class ProxyAgent:
    """
    Proxy to route a single request through.

    Attributes:
        kind: Agent type
        url: Proxy address as configured (e.g. 'http://proxy:1080')
    """

    kind: ProxyKind
    url: str

    def as_requests_proxies(self, scheme: str) -> Dict[str, str]:
        """
        Render as the ``proxies`` mapping accepted by requests.

        Args:
            scheme: Target URL scheme the mapping applies to

        Example:
            >>> ProxyAgent(ProxyKind.SOCKS, "socks://p:1080").as_requests_proxies("https")
            {'https': 'socks5://p:1080'}
        """
        proxy_url = self.url
        if self.kind is ProxyKind.SOCKS and proxy_url.lower().startswith("socks://"):
            # urllib3 has no plain 'socks' scheme
            proxy_url = "socks5://" + proxy_url[len("socks://") :]
        return {scheme: proxy_url}


def _classify(proxy_url: str) -> Optional[str]:
    lowered = proxy_url.lower()
    if lowered.startswith("http"):
        return "http"
    if lowered.startswith("socks"):
        return "socks"
    return None


def _scheme_agent(scheme: str, config: EnvironmentConfig) -> Optional[ProxyAgent]:
    if scheme == "http":
        proxy_url = config.get_proxy_variable("http_proxy")
        http_kind = ProxyKind.HTTP
    elif scheme == "https":
        proxy_url = config.get_proxy_variable("https_proxy")
        http_kind = ProxyKind.HTTPS
    else:
        return None

    if not proxy_url:
        return None

    family = _classify(proxy_url)
    if family == "http":
        return ProxyAgent(http_kind, proxy_url)
    if family == "socks":
        return ProxyAgent(ProxyKind.SOCKS, proxy_url)
    logger.debug(f"Ignoring {scheme} proxy with unsupported scheme: {proxy_url}")
    return None


def _all_proxy_agent(scheme: str, config: EnvironmentConfig) -> Optional[ProxyAgent]:
    proxy_url = config.get_proxy_variable("all_proxy")
    if not proxy_url:
        return None

    family = _classify(proxy_url)
    if family == "http":
        if scheme == "http":
            return ProxyAgent(ProxyKind.HTTP, proxy_url)
        if scheme == "https":
            return ProxyAgent(ProxyKind.HTTPS, proxy_url)
        return None
    if family == "socks":
        return ProxyAgent(ProxyKind.SOCKS, proxy_url)
    logger.debug(f"Ignoring all_proxy with unsupported scheme: {proxy_url}")
    return None


def select_proxy(
    url: str, config: Optional[EnvironmentConfig] = None
) -> Optional[ProxyAgent]:
    """
    Choose the proxy for a request to url.

    Args:
        url: Target URL
        config: Configuration provider (default: process environment)

    Returns:
        ProxyAgent, or None for a direct connection

    Example:
        >>> env = EnvironmentConfig({"ALL_PROXY": "socks5://p:1080"})
        >>> select_proxy("https://example.com/file.gz", env).kind
        <ProxyKind.SOCKS: 'socks'>
    """
    config = config or EnvironmentConfig()
    scheme = urlsplit(url).scheme.lower()

    agent = _scheme_agent(scheme, config) or _all_proxy_agent(scheme, config)
    if agent:
        logger.debug(f"Using {agent.kind.value} proxy {agent.url} for {url}")
    return agent
