"""
api_client.py - Building API Client

Fetches the building list from the inspection backend.

Usage:
    from crack_monitor.api_client import BuildingApiClient

    client = BuildingApiClient("http://localhost:8080")
    buildings = client.fetch_buildings()
"""

from typing import Optional, Tuple
import logging

import requests

from .exceptions import BuildingFetchError, ConfigurationError
from .models import Building, parse_buildings

logger = logging.getLogger(__name__)


class BuildingApiClient:
    """
    Client for the building inspection REST API.

    Exactly one GET per fetch_buildings() call; failures are raised,
    never retried.

    Attributes:
        base_url (str): API root without trailing slash
        buildings_path (str): Path of the building list endpoint
        timeout (float): Per-request timeout in seconds
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str,
        buildings_path: str = "/buildings",
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.base_url = base_url.rstrip('/')
        self.buildings_path = '/' + buildings_path.lstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config: dict) -> "BuildingApiClient":
        """
        Build a client from the 'api' config section.

        Raises:
            ConfigurationError: If api.base_url is missing or empty
        """
        api = config.get('api') or {}
        if not api.get('base_url'):
            raise ConfigurationError("api.base_url is not configured")
        return cls(
            base_url=api['base_url'],
            buildings_path=api.get('buildings_path', '/buildings'),
            timeout=float(api.get('timeout_seconds', cls.DEFAULT_TIMEOUT))
        )

    @property
    def buildings_url(self) -> str:
        return f"{self.base_url}{self.buildings_path}"

    def fetch_buildings(self) -> Tuple[Building, ...]:
        """
        GET the building list.

        Returns:
            Tuple of Building records in response order

        Raises:
            BuildingFetchError: On network errors, non-2xx status,
                a non-JSON body, or a body that is not a JSON array
        """
        url = self.buildings_url
        logger.info(f"Fetching buildings from {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Building request failed: {e}")
            raise BuildingFetchError(f"Building data request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Building request returned HTTP {response.status_code}")
            raise BuildingFetchError(f"Failed to load building data (HTTP {response.status_code})")

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Building response is not valid JSON: {e}")
            raise BuildingFetchError("Building data response is not valid JSON") from e

        try:
            buildings = parse_buildings(payload)
        except ValueError as e:
            logger.error(str(e))
            raise BuildingFetchError(str(e)) from e

        logger.info(f"Loaded {len(buildings)} buildings")
        return buildings
