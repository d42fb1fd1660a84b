"""HTTP transport for the geocoding backends."""

import logging
from typing import Any, Optional

import requests

from .settings import settings
from .utils.errors import NetworkError

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Fetches a URL and decodes its JSON body.

    Status codes are not interpreted here; the payload goes to the
    normalizer as-is. Nothing is retried.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            session: requests session to reuse (defaults to a new one)
            timeout: Transport timeout in seconds, None to wait indefinitely
            user_agent: User-Agent header; Nominatim rejects anonymous clients
        """
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.headers = {
            "Accept": "application/json",
            "User-Agent": user_agent or settings.user_agent,
        }

    def fetch(self, url: str) -> Any:
        """
        GET `url` and return the decoded JSON payload.

        Raises:
            NetworkError on transport failures or an undecodable body
        """
        logger.debug(f"Fetching {url}")
        try:
            # The context manager releases the connection even if decoding fails
            with self.session.get(url, headers=self.headers, timeout=self.timeout) as response:
                logger.debug(f"HTTP {response.status_code} from {url}")
                return response.json()
        except requests.exceptions.JSONDecodeError as e:
            raise NetworkError(url, f"Response is not valid JSON: {e}") from e
        except requests.RequestException as e:
            raise NetworkError(url, f"Request failed: {e}") from e
