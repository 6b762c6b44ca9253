"""
Remote part source.

This module abstracts where a part's data comes from. It handles the HTTP
request, response validation and JSON decoding, and exposes ``HttpPart``, the
default part class used by ``PartFactory``.

A part document is a JSON object::

    {"title": "Gantry", "cost": 12.5, "vendor": "Acme",
     "parts": [{"url": "/rail", "quantity": 2}]}
"""

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

import requests

from bom_ledger import constants as C
from bom_ledger.errors import PartResolutionError
from bom_ledger.part import Part
from bom_ledger.types import PartDocument

if TYPE_CHECKING:
    from bom_ledger.factory import PartFactory

logger = logging.getLogger(__name__)


def fetch_part_document(
    url: str,
    session: requests.Session | None = None,
    timeout: float = C.REQUEST_TIMEOUT_S,
) -> PartDocument:
    """
    Downloads and decodes a part document.

    Args:
        url: The part reference to GET.
        session: Optional session for connection pooling; the module-level
                 ``requests`` API is used when omitted.
        timeout: Seconds before the request is abandoned.

    Returns:
        The decoded document.

    Raises:
        PartResolutionError: On transport errors, HTTP error statuses, invalid
                             JSON or a payload that is not a JSON object.
    """
    http = session if session is not None else requests
    headers = {"User-Agent": C.USER_AGENT, "Accept": "application/json"}

    try:
        response = http.get(url, timeout=timeout, headers=headers)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise PartResolutionError(f"Could not fetch {url}: {e}", url=url) from e
    except ValueError as e:
        # Older requests releases raise plain ValueError on bad JSON
        raise PartResolutionError(f"Invalid JSON from {url}: {e}", url=url) from e

    if not isinstance(payload, dict):
        raise PartResolutionError(
            f"Part document from {url} must be a JSON object, "
            f"got {type(payload).__name__}",
            url=url,
        )
    return payload  # type: ignore[return-value]


class HttpPart(Part):
    """
    A part whose document is served over HTTP(S).

    Args:
        url: Reference of the part.
        factory: Factory used for sub-parts.
        session: Optional shared ``requests.Session``.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        factory: "PartFactory | None" = None,
        session: requests.Session | None = None,
        timeout: float = C.REQUEST_TIMEOUT_S,
        refresh_interval: float = C.PART_REFRESH_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(
            url, factory=factory, refresh_interval=refresh_interval, clock=clock
        )
        self.session = session
        self.timeout = timeout

    def _load(self) -> PartDocument:
        logger.debug(f"GET {self.url}")
        return fetch_part_document(self.url, session=self.session, timeout=self.timeout)

    def _options(self) -> dict[str, Any]:
        options = super()._options()
        options.update(session=self.session, timeout=self.timeout)
        return options
