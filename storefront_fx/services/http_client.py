from __future__ import annotations

"""Lightweight HTTP client util with retry.

Uses stdlib urllib; the only outbound call is a single GET JSON request to the
exchange rate API.
"""
import http.client
import json
import logging
import time
import urllib.request
import urllib.error
from typing import Any, Dict, Optional

logger = logging.getLogger("storefront_fx.http")


class HttpError(Exception):
    pass


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 0, backoff: float = 0.5
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    request = urllib.request.Request(url, headers={"Accept": "application/json"})
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(request, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status}")
                data = json.loads(resp.read().decode("utf-8"))
                if not isinstance(data, dict):
                    raise HttpError("expected a JSON object")
                return data
        except urllib.error.HTTPError as e:
            last_err = HttpError(f"API request failed: {e.code} {e.reason}")
        except (
            OSError,  # URLError, timeouts, connection resets
            http.client.HTTPException,  # RemoteDisconnected, IncompleteRead
            HttpError,
            ValueError,
        ) as e:  # ValueError for JSON decode
            last_err = e
        if attempt == retries:
            break
        logger.debug("GET attempt %d failed: %s", attempt + 1, last_err)
        time.sleep(backoff * (2**attempt))
    raise HttpError(str(last_err))
