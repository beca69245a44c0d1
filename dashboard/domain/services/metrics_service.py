"""Metrics Service - Resolves dashboard widgets to New Relic fetches"""
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional
from dashboard.infrastructure.newrelic.metrics_client import NewRelicMetricsFetcher
from dashboard.infrastructure.newrelic.exceptions import UnknownWidgetError
from dashboard.config import settings

logger = logging.getLogger(__name__)

class MetricsService:
    def __init__(self, fetcher: Optional[NewRelicMetricsFetcher] = None):
        self.fetcher = fetcher or NewRelicMetricsFetcher()
        self._widgets: Dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "rpm_number": self.fetcher.fetch_rpm_for_number_widget,
            "rpm_graph": self.fetcher.fetch_rpm_for_graph_widget,
            "fe_rpm_number": self.fetcher.fetch_fe_rpm_for_number_widget,
            "fe_rpm_graph": self.fetcher.fetch_fe_rpm_for_graph_widget,
            "cpu_number": self.fetcher.fetch_cpu_usage_for_number_widget,
            "cpu_graph": self.fetcher.fetch_cpu_usage_for_graph_widget,
            "response_time_number": self.fetcher.fetch_average_response_time_for_number_widget,
            "response_time_graph": self.fetcher.fetch_average_response_time_for_graph_widget,
            "apdex_number": self.fetcher.fetch_apdex_for_number_widget,
            "error_rate": self.fetcher.fetch_error_rate_for_error_widget,
            "memory_number": self.fetcher.fetch_memory_for_number_widget,
            "threshold_values": self.fetcher.fetch_threshold_values,
            "threshold": self.fetcher.fetch_threshold,
        }

    @property
    def widget_names(self) -> List[str]:
        return sorted(self._widgets)

    def get_widget_data(self, widget: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Fetch the data a single widget renders.

        Args:
            widget: Widget name, e.g. ``rpm_graph`` or ``apdex_number``
            params: Widget params; ``accountId`` defaults to the configured account
        """
        fetch = self._widgets.get(widget)
        if fetch is None:
            raise UnknownWidgetError(widget)

        params = dict(params or {})
        if not params.get("accountId") and settings.newrelic_account_id:
            params["accountId"] = settings.newrelic_account_id

        logger.info(f"📊 Fetching widget '{widget}' for app {params.get('appId')}")
        return fetch(params)

    def close(self):
        self.fetcher.close()
