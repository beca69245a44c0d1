"""New Relic REST API endpoint table."""
from enum import Enum
from typing import Dict


class MetricKind(str, Enum):
    RPM = "rpm"
    FE_RPM = "fe_rpm"
    CPU_USAGE = "cpu_usage"
    AVERAGE_RESPONSE_TIME = "average_response_time"
    THRESHOLD_VALUES = "threshold_values"
    THRESHOLDS = "thresholds"


class ResponseFormat(str, Enum):
    JSON = "json"
    XML = "xml"


_APPLICATION = "/api/v1/accounts/{accountId}/applications/{appId}"
_DATA = _APPLICATION + "/data.json?begin={beginDateTime}&end={endDateTime}&summary=0"

# Paths are relative to settings.NEWRELIC_BASE_URL
ENDPOINT_TEMPLATES: Dict[MetricKind, str] = {
    MetricKind.RPM: _DATA + "&metrics[]=HttpDispatcher&field=requests_per_minute",
    MetricKind.FE_RPM: _DATA + "&metrics[]=EndUser&field=requests_per_minute",
    MetricKind.CPU_USAGE: _DATA + "&metrics[]=CPU/User Time&field=percent",
    MetricKind.AVERAGE_RESPONSE_TIME: _DATA + "&metrics[]=HttpDispatcher&field=average_response_time",
    MetricKind.THRESHOLD_VALUES: _APPLICATION + "/threshold_values.xml",
    MetricKind.THRESHOLDS: _APPLICATION + "/thresholds.xml",
}

# Field carrying the value in each record of a JSON data response
VALUE_FIELDS: Dict[MetricKind, str] = {
    MetricKind.RPM: "requests_per_minute",
    MetricKind.FE_RPM: "requests_per_minute",
    MetricKind.CPU_USAGE: "percent",
    MetricKind.AVERAGE_RESPONSE_TIME: "average_response_time",
}
