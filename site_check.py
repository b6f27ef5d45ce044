# site_check.py
from __future__ import annotations

import logging
import re
import time

import httpx

from models.network import SiteCheck
from os_env import CHECKSITE_TIMEOUT

logger = logging.getLogger(__name__)

OK_STATUS = {200, 301, 302, 304}

# control characters, whitespace, quotes and shell metacharacters
_UNSAFE = re.compile(r'[\x00-\x20\x7f"\'`<>|;&$\\{}()\[\]*!]')


def sanitize_url(url: str) -> str:
    return _UNSAFE.sub('', url or '')


async def check_site(url: str, transport: httpx.AsyncBaseTransport | None = None) -> SiteCheck:
    """
    Fetches `url` once and reports reachability and latency.

    Only http(s) URLs are requested; anything else, or any transport error,
    yields ok=False, status=404, ms=None. Redirects are not followed, a 301/302
    answer already counts as reachable.

    Args:
        url (str): The address to check.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """
    target = sanitize_url(url)
    if not target.lower().startswith(('http://', 'https://')):
        return SiteCheck(url=target)

    start = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=CHECKSITE_TIMEOUT, transport=transport) as client:
            resp = await client.get(target)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.debug(f"Site check failed for {target}: {e}")
        return SiteCheck(url=target)

    elapsed = round((time.perf_counter() - start) * 1000)
    return SiteCheck(
        url=target,
        ok=resp.status_code in OK_STATUS,
        status=resp.status_code,
        ms=elapsed,
    )
