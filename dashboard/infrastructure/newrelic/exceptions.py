"""Errors raised by the New Relic data-access layer."""
from typing import Optional


class NewRelicError(Exception):
    """Base class for every error raised while fetching New Relic data."""

    status_code: int = 500
    error_code: str = "NEWRELIC_ERROR"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class TimeParseError(NewRelicError):
    """A beginDateTime/endDateTime expression could not be interpreted."""

    status_code = 400
    error_code = "TIME_PARSE_ERROR"

    def __init__(self, field: str, value: str):
        super().__init__(f"Cannot parse {field}={value!r} as a date/time expression")
        self.field = field
        self.value = value


class MissingParameterError(NewRelicError):
    status_code = 400
    error_code = "MISSING_PARAMETER"

    def __init__(self, parameter: str, endpoint: str):
        super().__init__(f"Endpoint {endpoint} requires parameter '{parameter}'")
        self.parameter = parameter
        self.endpoint = endpoint


class MissingMetricError(NewRelicError):
    """The threshold values payload has no entry for the requested metric."""

    status_code = 404
    error_code = "MISSING_METRIC"

    def __init__(self, metric: str, available: Optional[list] = None):
        available = available or []
        super().__init__(
            f"Metric '{metric}' not found in threshold values (available: {', '.join(available) or 'none'})"
        )
        self.metric = metric
        self.available = available


class TransportError(NewRelicError):
    status_code = 502
    error_code = "UPSTREAM_ERROR"

    def __init__(self, detail: str, upstream_status: Optional[int] = None):
        super().__init__(detail)
        self.upstream_status = upstream_status


class UnknownWidgetError(NewRelicError):
    status_code = 404
    error_code = "UNKNOWN_WIDGET"

    def __init__(self, widget: str):
        super().__init__(f"Unknown widget '{widget}'")
        self.widget = widget


class InvalidMetricValueError(NewRelicError):
    """The threshold value for a metric is present but not numeric."""

    status_code = 502
    error_code = "INVALID_METRIC_VALUE"

    def __init__(self, metric: str, value: str):
        super().__init__(f"Metric '{metric}' has non-numeric metric_value {value!r}")
        self.metric = metric
        self.value = value
