import ipaddress
import logging
import socket
from typing import Tuple
from urllib.parse import urljoin, urlparse

import httpx

from pagezen.config import settings

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https"}


def _is_private_address(hostname: str) -> bool:
    """Return True if *hostname* resolves to a private, loopback, or link-local address."""
    try:
        infos = socket.getaddrinfo(hostname, None)
    except socket.gaierror:
        return False

    for info in infos:
        # Strip IPv6 zone IDs (e.g. "::1%eth0" → "::1")
        raw_ip = info[4][0].split("%")[0]
        try:
            addr = ipaddress.ip_address(raw_ip)
        except ValueError:
            continue
        if addr.is_private or addr.is_loopback or addr.is_link_local or addr.is_reserved:
            return True
    return False


def validate_url(url: str) -> None:
    """Raise ValueError if *url* is not a public http(s) URL."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = parsed.hostname
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    if not settings.allow_private_addresses and _is_private_address(hostname):
        raise ValueError("Requests to private/internal addresses are not allowed.")


async def fetch_url(url: str) -> Tuple[str, str]:
    """Fetch *url* and return ``(body, final_url)``.

    Redirects are followed manually so that every redirect destination is
    validated before the next request is made; ``final_url`` is the address
    the body was actually served from.  The response status is logged but
    not treated as an error: error pages are returned like any other page.

    Raises:
        ValueError: if the URL (or a redirect target) fails validation.
        httpx.HTTPError: on network errors and timeouts.
        RuntimeError: if the body exceeds the size cap or redirects loop.
    """
    validate_url(url)
    logger.info("Starting to fetch and parse article: %s", url)

    current_url = url
    headers = {"User-Agent": settings.user_agent}
    async with httpx.AsyncClient(
        follow_redirects=False, timeout=settings.fetch_timeout, headers=headers
    ) as client:
        for _ in range(settings.max_redirects + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    next_url = urljoin(current_url, location)
                    validate_url(next_url)
                    logger.debug("Following redirect: %s -> %s", current_url, next_url)
                    current_url = next_url
                    continue

                content_length = response.headers.get("content-length")
                if content_length and content_length.isdigit() and int(content_length) > settings.max_content_size:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > settings.max_content_size:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                logger.info(
                    "Successfully fetched URL: %s status_code=%d bytes=%d",
                    current_url,
                    response.status_code,
                    total,
                )
                encoding = response.charset_encoding or "utf-8"
                try:
                    body = b"".join(chunks).decode(encoding, errors="replace")
                except LookupError:
                    body = b"".join(chunks).decode(errors="replace")
                return body, current_url

    raise RuntimeError("Too many redirects.")
