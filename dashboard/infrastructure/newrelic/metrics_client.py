"""New Relic metrics fetcher - reshapes REST API responses for dashboard widgets."""

import logging
import threading
import xml.etree.ElementTree as ET
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional

import httpx

from dashboard.config import settings
from dashboard.domain.entities.metric import ThresholdRecord, TimeSeriesPoint
from dashboard.infrastructure.newrelic.base_client import BaseNewRelicClient
from dashboard.infrastructure.newrelic.endpoints import VALUE_FIELDS, MetricKind, ResponseFormat
from dashboard.infrastructure.newrelic.exceptions import InvalidMetricValueError, MissingMetricError
from dashboard.utils.time_parser import to_epoch_seconds

logger = logging.getLogger(__name__)

# Graph window used when a widget does not configure beginDateTime
DEFAULT_GRAPH_BEGIN = "-30 minutes"


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(repr(value)).to_integral_value(rounding=ROUND_HALF_UP))


class NewRelicMetricsFetcher(BaseNewRelicClient):
    """Fetches New Relic application metrics for number and graph widgets.

    Every public method takes the widget's request params (``appId``,
    ``accountId``, optional ``beginDateTime``/``endDateTime``, ...) and makes a
    single request upstream. The caller's mapping is never modified.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        display_offset_seconds: Optional[int] = None,
    ):
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, transport=transport)
        self._display_offset = (
            display_offset_seconds
            if display_offset_seconds is not None
            else settings.NEWRELIC_DISPLAY_OFFSET_SECONDS
        )
        self.unexpected_response_count = 0
        self._counter_lock = threading.Lock()

    # Number widgets

    def fetch_rpm_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> int:
        """Current requests per minute for an application."""
        points = self.fetch_rpm_for_graph_widget(self._with_window(params, "-5 minutes"))
        return self._latest_value(points)

    def fetch_fe_rpm_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> int:
        """Current front-end (browser) requests per minute for an application."""
        points = self.fetch_fe_rpm_for_graph_widget(self._with_window(params, "-5 minutes"))
        return self._latest_value(points)

    def fetch_cpu_usage_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> int:
        """Percentage of time spent in user space by the CPU, averaged over reporting agents."""
        points = self.fetch_cpu_usage_for_graph_widget(self._with_window(params, "-1 minute"))
        return self._latest_value(points)

    def fetch_average_response_time_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> int:
        """Average response time over the last minutes, in milliseconds."""
        points = self.fetch_average_response_time_for_graph_widget(self._with_window(params, "-5 minutes"))
        return self._latest_value(points)

    def fetch_apdex_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> float:
        return self._threshold_metric_value(params, "Apdex")

    def fetch_error_rate_for_error_widget(self, params: Optional[Mapping[str, Any]] = None) -> float:
        """Errors per minute compared to the total number of requests."""
        return self._threshold_metric_value(params, "Error Rate")

    def fetch_memory_for_number_widget(self, params: Optional[Mapping[str, Any]] = None) -> float:
        """Memory used by the application."""
        return self._threshold_metric_value(params, "Memory")

    # Graph widgets

    def fetch_rpm_for_graph_widget(self, params: Optional[Mapping[str, Any]] = None) -> List[TimeSeriesPoint]:
        """Requests per minute from beginDateTime to endDateTime at constant intervals."""
        return self._fetch_series(MetricKind.RPM, params, scale=1)

    def fetch_fe_rpm_for_graph_widget(self, params: Optional[Mapping[str, Any]] = None) -> List[TimeSeriesPoint]:
        return self._fetch_series(MetricKind.FE_RPM, params, scale=1)

    def fetch_cpu_usage_for_graph_widget(self, params: Optional[Mapping[str, Any]] = None) -> List[TimeSeriesPoint]:
        return self._fetch_series(MetricKind.CPU_USAGE, params, scale=1)

    def fetch_average_response_time_for_graph_widget(self, params: Optional[Mapping[str, Any]] = None) -> List[TimeSeriesPoint]:
        """Average response time series; upstream seconds are converted to milliseconds."""
        return self._fetch_series(MetricKind.AVERAGE_RESPONSE_TIME, params, scale=1000)

    # Thresholds

    def fetch_threshold_values(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, ThresholdRecord]:
        """Fetch all threshold values for the application, keyed by threshold name.

        This endpoint is only available as XML.
        """
        params = self._with_window(params, "-5 minutes")
        root = self.request(MetricKind.THRESHOLD_VALUES, params, ResponseFormat.XML)
        if root is None:
            self._record_unexpected_response(MetricKind.THRESHOLD_VALUES, "no XML document")
            return {}

        result: Dict[str, ThresholdRecord] = {}
        for element in root.iter("threshold_value"):
            name = element.get("name")
            if name is None:
                continue
            result[name] = dict(element.attrib)

        logger.info(f"✅ Fetched {len(result)} threshold values from New Relic")
        return result

    def fetch_threshold(self, params: Optional[Mapping[str, Any]] = None) -> ThresholdRecord:
        """Fetch the alert threshold configured for ``params['metric']``, if any.

        Returns an empty mapping when no threshold matches.
        """
        params = dict(params or {})
        metric = str(params.get("metric") or "").lower()

        root = self.request(MetricKind.THRESHOLDS, params, ResponseFormat.XML)
        if root is None:
            self._record_unexpected_response(MetricKind.THRESHOLDS, "no XML document")
            return {}
        if not metric:
            return {}

        for element in root.iter("threshold"):
            record = self._element_to_record(element)
            if record.get("type", "").lower() == metric:
                return record

        logger.info(f"ℹ️  No threshold configured for metric '{metric}'")
        return {}

    # Helpers

    def _with_window(self, params: Optional[Mapping[str, Any]], begin: str) -> Dict[str, Any]:
        """Copy params with the time window forced to ``begin``..now."""
        params = dict(params or {})
        params["beginDateTime"] = begin
        params["endDateTime"] = "now"
        return params

    def _latest_value(self, points: List[TimeSeriesPoint]) -> int:
        if not points:
            return 0
        return points[-1].y

    def _fetch_series(self, kind: MetricKind, params: Optional[Mapping[str, Any]], scale: int) -> List[TimeSeriesPoint]:
        params = dict(params or {})
        params.setdefault("beginDateTime", DEFAULT_GRAPH_BEGIN)
        params.setdefault("endDateTime", "now")

        response = self.request(kind, params, ResponseFormat.JSON)
        if not isinstance(response, list):
            self._record_unexpected_response(kind, f"expected an array, got {type(response).__name__}")
            return []

        field = VALUE_FIELDS[kind]
        points = []
        for record in response:
            try:
                x = 1000 * (to_epoch_seconds(record["begin"]) + self._display_offset)
                y = round_half_away_from_zero(float(record[field]) * scale)
            except (KeyError, TypeError, ValueError, OverflowError) as e:
                logger.warning(f"Skipping malformed {kind.value} record {record!r}: {e}")
                continue
            points.append(TimeSeriesPoint(x=x, y=y))

        logger.info(f"✅ Fetched {len(points)} {kind.value} points from New Relic")
        return points

    def _threshold_metric_value(self, params: Optional[Mapping[str, Any]], name: str) -> float:
        threshold_values = self.fetch_threshold_values(params)
        record = threshold_values.get(name)
        if record is None or record.get("metric_value") is None:
            raise MissingMetricError(name, sorted(threshold_values))
        try:
            return float(record["metric_value"])
        except ValueError as e:
            raise InvalidMetricValueError(name, record["metric_value"]) from e

    def _element_to_record(self, element: ET.Element) -> ThresholdRecord:
        """Flatten an element's attributes and child element texts into one mapping."""
        record = dict(element.attrib)
        for child in element:
            record[child.tag] = (child.text or "").strip()
        return record

    def _record_unexpected_response(self, kind: MetricKind, reason: str):
        with self._counter_lock:
            self.unexpected_response_count += 1
            count = self.unexpected_response_count
        logger.warning(
            f"⚠️ Unexpected {kind.value} response from New Relic ({reason}); treating as no data "
            f"[{count} so far]"
        )
