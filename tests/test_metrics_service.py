import pytest

from dashboard.config import settings
from dashboard.domain.services.metrics_service import MetricsService
from dashboard.infrastructure.newrelic import UnknownWidgetError
from tests.conftest import APP_PARAMS


@pytest.fixture
def service(fetcher):
    return MetricsService(fetcher)


def test_widget_names(service):
    assert "rpm_graph" in service.widget_names
    assert "apdex_number" in service.widget_names
    assert service.widget_names == sorted(service.widget_names)


def test_dispatches_to_fetcher(service, newrelic):
    newrelic.reply_json([{"begin": "2013-05-10T12:00:00Z", "requests_per_minute": 12.4}])
    assert service.get_widget_data("rpm_number", APP_PARAMS) == 12


def test_unknown_widget(service):
    with pytest.raises(UnknownWidgetError):
        service.get_widget_data("uptime", APP_PARAMS)


def test_account_id_defaults_from_settings(service, newrelic, monkeypatch):
    monkeypatch.setattr(settings, "NEWRELIC_ACCOUNT_ID", "999")
    newrelic.reply_json([])
    service.get_widget_data("cpu_graph", {"appId": "42", "beginDateTime": "-1 hour", "endDateTime": "now"})
    assert newrelic.last_request.url.path == "/api/v1/accounts/999/applications/42/data.json"


def test_explicit_account_id_wins(service, newrelic, monkeypatch):
    monkeypatch.setattr(settings, "NEWRELIC_ACCOUNT_ID", "999")
    newrelic.reply_json([])
    service.get_widget_data("cpu_graph", dict(APP_PARAMS, beginDateTime="-1 hour", endDateTime="now"))
    assert newrelic.last_request.url.path == "/api/v1/accounts/1234/applications/42/data.json"
