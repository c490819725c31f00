"""Remote metadata service client for reference lookups.

A thin wrapper around ``httpx.AsyncClient`` with a standard timeout,
user-agent header and error handling. The reference is POSTed as its
camelCase wire document to ``<base_url>/describe``; the service answers
with a JSON list of lookup results (or ``{"results": [...]}``).

A 404 means the service knows no matching file and yields an empty list.
Every other failure raises ``LookupServiceError``.
"""

from __future__ import annotations

import logging

import httpx

from modresolve import __version__
from modresolve.config import DEFAULT_LOOKUP_TIMEOUT
from modresolve.core.dependency.models import LookupResult, Reference
from modresolve.exceptions import LookupServiceError
from modresolve.lookup.base import ReferenceLookup, results_from_payload

logger = logging.getLogger(__name__)

# User-Agent sent with every request.
USER_AGENT: str = f"modresolve/{__version__}"

DESCRIBE_PATH = "describe"


class HttpLookup(ReferenceLookup):
    """Look references up on a remote metadata service.

    Args:
        base_url: Service root, e.g. ``https://meta.example.com/api``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (tests pass a MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_LOOKUP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}/{DESCRIBE_PATH}"
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "http"

    @property
    def url(self) -> str:
        return self._url

    async def lookup_reference(self, reference: Reference) -> list[LookupResult]:
        """POST *reference* to the service and parse the candidates.

        Raises:
            LookupServiceError: On HTTP errors, timeouts, or invalid JSON.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                resp = await client.post(self._url, json=reference.to_dict())
                if resp.status_code == 404:
                    return []
                resp.raise_for_status()
                payload = resp.json()
        except httpx.TimeoutException as exc:
            logger.warning("Timeout looking up %s at %s", reference, self._url)
            raise LookupServiceError(f"Timeout querying {self._url}") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("HTTP %d from %s", exc.response.status_code, self._url)
            raise LookupServiceError(
                f"HTTP {exc.response.status_code} from {self._url}"
            ) from exc
        except (httpx.RequestError, ValueError) as exc:
            logger.warning("Request error for %s: %s", self._url, exc)
            raise LookupServiceError(f"Request to {self._url} failed: {exc}") from exc

        return results_from_payload(payload)
