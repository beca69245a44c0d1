import pytest
from fastapi.testclient import TestClient

from dashboard.dependencies import get_metrics_service
from dashboard.domain.services.metrics_service import MetricsService
from dashboard.main import create_app
from tests.test_metrics_client import THRESHOLD_VALUES_XML, THRESHOLDS_XML


@pytest.fixture
def client(fetcher):
    app = create_app()
    app.dependency_overrides[get_metrics_service] = lambda: MetricsService(fetcher)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_widgets(client):
    response = client.get("/api/v1/widgets")
    assert response.status_code == 200
    assert "memory_number" in response.json()["widgets"]


def test_graph_widget(client, newrelic):
    newrelic.reply_json([{"begin": "2013-05-10T12:00:00Z", "average_response_time": 0.2567}])
    response = client.get(
        "/api/v1/widgets/response_time_graph",
        params={"accountId": "1234", "appId": "42", "beginDateTime": "-30 minutes", "endDateTime": "now"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["widget"] == "response_time_graph"
    assert body["data"] == [{"x": 1000 * (1368187200 + 7200), "y": 257}]
    assert "X-Process-Time" in response.headers


def test_number_widget(client, newrelic):
    newrelic.reply_xml(THRESHOLD_VALUES_XML)
    response = client.get("/api/v1/widgets/apdex_number", params={"accountId": "1234", "appId": "42"})
    assert response.status_code == 200
    assert response.json()["data"] == pytest.approx(0.95)


def test_threshold_widget(client, newrelic):
    newrelic.reply_xml(THRESHOLDS_XML)
    response = client.get("/api/v1/widgets/threshold", params={"accountId": "1234", "appId": "42", "metric": "CPU"})
    assert response.status_code == 200
    assert response.json()["data"]["critical_value"] == "90"


def test_unknown_widget_is_404(client):
    response = client.get("/api/v1/widgets/uptime", params={"accountId": "1234", "appId": "42"})
    assert response.status_code == 404
    assert response.json()["error_code"] == "UNKNOWN_WIDGET"


def test_bad_date_is_400(client):
    response = client.get(
        "/api/v1/widgets/rpm_graph",
        params={"accountId": "1234", "appId": "42", "beginDateTime": "someday", "endDateTime": "now"},
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "TIME_PARSE_ERROR"


def test_missing_metric_is_404(client, newrelic):
    newrelic.reply_xml('<threshold-values><threshold_value name="Apdex" metric_value="1"/></threshold-values>')
    response = client.get("/api/v1/widgets/memory_number", params={"accountId": "1234", "appId": "42"})
    assert response.status_code == 404
    assert response.json()["error_code"] == "MISSING_METRIC"


def test_upstream_failure_is_502(client, newrelic):
    newrelic.reply_json({"error": "boom"}, status_code=500)
    response = client.get("/api/v1/widgets/rpm_number", params={"accountId": "1234", "appId": "42"})
    assert response.status_code == 502
    assert response.json()["error_code"] == "UPSTREAM_ERROR"


def test_non_numeric_metric_value_is_502(client, newrelic):
    newrelic.reply_xml('<threshold-values><threshold_value name="Memory" metric_value=""/></threshold-values>')
    response = client.get("/api/v1/widgets/memory_number", params={"accountId": "1234", "appId": "42"})
    assert response.status_code == 502
    assert response.json()["error_code"] == "INVALID_METRIC_VALUE"


def test_shutdown_closes_shared_service():
    get_metrics_service.cache_clear()
    service = get_metrics_service()

    with TestClient(create_app()):
        pass

    assert service.fetcher.client.is_closed
    assert get_metrics_service.cache_info().currsize == 0


def test_shutdown_without_service_creates_none():
    get_metrics_service.cache_clear()

    with TestClient(create_app()):
        pass

    assert get_metrics_service.cache_info().currsize == 0
