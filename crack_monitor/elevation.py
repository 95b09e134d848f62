"""
elevation.py - Elevation Lookup Proxy

Small Flask service that forwards a lat/lon elevation lookup to the Google
Maps Elevation API so the API key stays on the server.

    GET /elevation?lat=37.56&lon=126.97
        200  upstream JSON body, verbatim
        400  {"error": "Missing lat/lon"}
        500  {"error": "Failed to fetch elevation data"}

The key is read from the GOOGLE_ELEVATION_KEY environment variable
(a .env file in the working directory is loaded first).

Usage:
    python -m crack_monitor.elevation
"""

import os
from typing import Optional
import logging

import requests
from dotenv import load_dotenv
from flask import Blueprint, Flask, Response, current_app, jsonify, request

from .config_loader import get_config, load_config
from .exceptions import ElevationLookupError
from .logger import setup_logging_from_config

logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_URL = "https://maps.googleapis.com/maps/api/elevation/json"
DEFAULT_KEY_ENV = "GOOGLE_ELEVATION_KEY"

MISSING_PARAMS_ERROR = "Missing lat/lon"
UPSTREAM_ERROR = "Failed to fetch elevation data"

bp = Blueprint('elevation', __name__)


class ElevationClient:
    """Client for the Google Maps Elevation API."""

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        api_key: Optional[str],
        upstream_url: str = DEFAULT_UPSTREAM_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        self.api_key = api_key
        self.upstream_url = upstream_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def lookup(self, lat: str, lon: str) -> bytes:
        """
        Fetch elevation data for one location.

        The upstream status code is not inspected; whatever JSON the
        service returns (including its own error payloads) is passed back.

        Args:
            lat: Latitude as received from the caller
            lon: Longitude as received from the caller

        Returns:
            Raw upstream JSON body, byte for byte

        Raises:
            ElevationLookupError: On network failure or a non-JSON body
        """
        params = {'locations': f"{lat},{lon}"}
        if self.api_key:
            params['key'] = self.api_key
        else:
            logger.warning("Elevation API key is not set; forwarding request without it")

        try:
            response = self.session.get(self.upstream_url, params=params, timeout=self.timeout)
            response.json()
        except requests.RequestException as e:
            raise ElevationLookupError(f"Elevation request failed: {e}") from e
        except ValueError as e:
            raise ElevationLookupError("Elevation response is not valid JSON") from e
        return response.content


@bp.route('/elevation', methods=['GET'])
def elevation():
    lat = request.args.get('lat')
    lon = request.args.get('lon')
    if not lat or not lon:
        return jsonify({'error': MISSING_PARAMS_ERROR}), 400

    client: ElevationClient = current_app.extensions['elevation_client']
    try:
        body = client.lookup(lat, lon)
    except ElevationLookupError as e:
        current_app.logger.error(f"Elevation lookup failed for {lat},{lon}: {e}")
        return jsonify({'error': UPSTREAM_ERROR}), 500

    return Response(body, status=200, mimetype="application/json")


def create_app(config: Optional[dict] = None, client: Optional[ElevationClient] = None) -> Flask:
    """
    Build the elevation proxy Flask app.

    Args:
        config: Configuration dictionary (default: config_loader.get_config())
        client: Pre-built ElevationClient (tests inject one)
    """
    load_dotenv()
    config = config or get_config()
    settings = config.get('elevation', {})

    if client is None:
        key_env = settings.get('api_key_env', DEFAULT_KEY_ENV)
        client = ElevationClient(
            api_key=os.environ.get(key_env),
            upstream_url=settings.get('upstream_url', DEFAULT_UPSTREAM_URL),
            timeout=float(settings.get('timeout_seconds', ElevationClient.DEFAULT_TIMEOUT))
        )

    app = Flask(__name__)
    app.extensions['elevation_client'] = client
    app.register_blueprint(bp)
    return app


if __name__ == '__main__':
    config = load_config()
    setup_logging_from_config(config)
    settings = config['elevation']
    app = create_app(config)
    app.run(host=settings.get('host', '0.0.0.0'), port=int(settings.get('port', 8888)))
