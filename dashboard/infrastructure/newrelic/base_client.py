"""Base New Relic client with common functionality."""
import httpx
import logging
import xml.etree.ElementTree as ET
from typing import Dict, Any, Optional, Mapping
from dashboard.config import settings
from dashboard.infrastructure.newrelic.endpoints import ENDPOINT_TEMPLATES, MetricKind, ResponseFormat
from dashboard.infrastructure.newrelic.exceptions import MissingParameterError, TimeParseError, TransportError
from dashboard.utils.time_parser import format_api_timestamp, parse_time_expression
from dashboard.utils.url_builder import build_url

logger = logging.getLogger(__name__)

DATE_TIME_PARAMS = ("beginDateTime", "endDateTime")


class BaseNewRelicClient:
    """Base class for New Relic REST API clients with common functionality."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the HTTP client."""
        self._api_key = api_key if api_key is not None else settings.newrelic_api_key
        self._base_url = (base_url or settings.NEWRELIC_BASE_URL).rstrip("/")
        self.client = httpx.Client(
            timeout=timeout if timeout is not None else settings.NEWRELIC_TIMEOUT,
            transport=transport,
        )

    def _get_headers(self, api_key: Optional[str] = None, response_format: ResponseFormat = ResponseFormat.JSON) -> Dict[str, str]:
        """Get standard New Relic API headers."""
        headers = {
            "Accept": "application/xml" if response_format is ResponseFormat.XML else "application/json",
        }
        key = api_key or self._api_key
        if key:
            headers["X-Api-Key"] = key
        return headers

    def assemble_url(self, kind: MetricKind, params: Mapping[str, Any]) -> str:
        """Build the request URL for an endpoint, resolving relative date expressions first."""
        params = dict(params)
        params.pop("apiKey", None)

        for field in DATE_TIME_PARAMS:
            if params.get(field) is None:
                continue
            try:
                moment = parse_time_expression(params[field])
            except ValueError as e:
                raise TimeParseError(field, str(params[field])) from e
            params[field] = format_api_timestamp(moment)

        try:
            path = build_url(ENDPOINT_TEMPLATES[kind], params)
        except KeyError as e:
            raise MissingParameterError(e.args[0], kind.value) from e

        return f"{self._base_url}{path}"

    def _make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make HTTP request with error handling."""
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ New Relic API error {e.response.status_code} for {url}")
            raise TransportError(
                f"New Relic API returned {e.response.status_code}",
                upstream_status=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP request failed: {e}")
            raise TransportError(f"Request to New Relic failed: {e}") from e

    def request(self, kind: MetricKind, params: Mapping[str, Any], response_format: ResponseFormat = ResponseFormat.JSON) -> Any:
        """GET an endpoint and decode the body.

        Returns the decoded JSON value, or the root ``Element`` for XML. A body
        that does not decode in the declared format is returned as ``None``.
        """
        url = self.assemble_url(kind, params)
        logger.info(f"🔍 Fetching {kind.value} from New Relic")
        logger.debug(f"GET {url}")

        response = self._make_request(
            "GET",
            url,
            headers=self._get_headers(params.get("apiKey"), response_format),
        )

        if response_format is ResponseFormat.XML:
            try:
                return ET.fromstring(response.content)
            except ET.ParseError as e:
                logger.warning(f"⚠️ Invalid XML from New Relic for {kind.value}: {e}")
                return None

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"⚠️ Invalid JSON from New Relic for {kind.value}: {e}")
            return None

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
