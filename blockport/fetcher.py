"""blockport.fetcher - source page retrieval.

Uses only the stdlib (``urllib``).  Redirects are followed by urllib's own
redirect handler, capped at ``max_redirects`` hops.  Nothing is retried: a
failed request surfaces as :class:`~blockport.errors.FetchError` and the
caller decides what to do with it.

Basic usage::

    from blockport.fetcher import fetch_html

    html = fetch_html("https://www.example.com/blog/some-post/")
"""

from __future__ import annotations

import codecs
import gzip
import logging
import urllib.error
import urllib.request
import zlib
from typing import Any, Callable
from urllib.parse import urlparse

from blockport import settings
from blockport.errors import FetchError

logger = logging.getLogger(__name__)


class _LimitedRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Redirect handler with a per-opener hop ceiling."""

    def __init__(self, max_redirects: int) -> None:
        super().__init__()
        self.max_redirections = max_redirects

    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        logger.debug("HTTP %d redirect: %s -> %s", code, req.full_url, newurl)
        return super().redirect_request(req, fp, code, msg, headers, newurl)


def _inflate(raw: bytes) -> bytes:
    # "deflate" is zlib-wrapped per RFC 9110, but some servers send raw deflate.
    try:
        return zlib.decompress(raw)
    except zlib.error:
        return zlib.decompress(raw, -zlib.MAX_WBITS)


# Content-Encodings matching the Accept-Encoding header sent by fetch_html
_DECODERS: dict[str, Callable[[bytes], bytes]] = {
    "gzip": gzip.decompress,
    "x-gzip": gzip.decompress,
    "deflate": _inflate,
}


def _read_body(resp: Any, url: str) -> str:
    raw: bytes = resp.read()
    coding = (resp.headers.get("Content-Encoding") or "identity").strip().lower()
    if coding != "identity":
        decoder = _DECODERS.get(coding)
        if decoder is None:
            raise FetchError(f"Unsupported Content-Encoding {coding!r} from {url}", url=url)
        try:
            raw = decoder(raw)
        except (OSError, EOFError, zlib.error) as exc:
            raise FetchError(f"{coding} decompression failed for {url}: {exc}", url=url) from exc

    charset = resp.headers.get_content_charset() or "utf-8"
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.debug("Unknown charset %r from %s, decoding as utf-8", charset, url)
        charset = "utf-8"
    return raw.decode(charset, errors="replace")


def fetch_html(
    url: str,
    *,
    timeout: float = settings.DOWNLOAD_TIMEOUT,
    user_agent: str | None = None,
    max_redirects: int = settings.MAX_REDIRECTS,
) -> str:
    """Fetch *url* and return the final response body as a decoded string.

    Args:
        url:           Fully-qualified HTTP/HTTPS URL.
        timeout:       Socket timeout in seconds for each request.
        user_agent:    Override the default browser User-Agent string.
        max_redirects: Maximum number of redirect hops to follow.

    Returns:
        Response body decoded to ``str``.

    Raises:
        FetchError: non-2xx final status, too many redirects, timeout,
            transport failure, or an unsupported URL scheme.
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise FetchError(f"Unsupported URL scheme: {parsed.scheme!r}", url=url)

    req = urllib.request.Request(
        url,
        headers={
            "User-Agent": user_agent or settings.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
            "Accept-Language": "en-US,en;q=0.9",
            "Accept-Encoding": "gzip, deflate",
        },
    )
    opener = urllib.request.build_opener(_LimitedRedirectHandler(max_redirects))
    logger.debug("GET %s", url)

    try:
        with opener.open(req, timeout=timeout) as resp:
            status = getattr(resp, "status", None) or 200
            if not 200 <= status < 300:
                raise FetchError(f"HTTP {status} for {url}", url=url, status=status)
            return _read_body(resp, url)

    except urllib.error.HTTPError as exc:
        if 300 <= exc.code < 400 and exc.headers is not None and exc.headers.get("Location"):
            raise FetchError(
                f"Too many redirects fetching {url} (limit {max_redirects})",
                url=url,
                status=exc.code,
            ) from exc
        raise FetchError(f"HTTP {exc.code} for {url}", url=url, status=exc.code) from exc

    except urllib.error.URLError as exc:
        if isinstance(exc.reason, TimeoutError):
            raise FetchError(f"Timeout fetching {url}", url=url) from exc
        raise FetchError(f"URL error fetching {url}: {exc.reason}", url=url) from exc

    except TimeoutError as exc:
        raise FetchError(f"Timeout fetching {url}", url=url) from exc

    except OSError as exc:
        raise FetchError(f"Network error fetching {url}: {exc}", url=url) from exc
