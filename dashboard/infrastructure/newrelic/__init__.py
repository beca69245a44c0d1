"""
New Relic data-access layer for the dashboard.

This package builds New Relic REST API requests and reshapes the responses
into values that number and graph widgets can render directly.
"""

from .endpoints import ENDPOINT_TEMPLATES, MetricKind, ResponseFormat
from .exceptions import (
    InvalidMetricValueError,
    MissingMetricError,
    MissingParameterError,
    NewRelicError,
    TimeParseError,
    TransportError,
    UnknownWidgetError,
)
from .metrics_client import NewRelicMetricsFetcher

__all__ = [
    "ENDPOINT_TEMPLATES",
    "MetricKind",
    "ResponseFormat",
    "NewRelicMetricsFetcher",
    "NewRelicError",
    "TimeParseError",
    "MissingParameterError",
    "MissingMetricError",
    "InvalidMetricValueError",
    "TransportError",
    "UnknownWidgetError",
]
