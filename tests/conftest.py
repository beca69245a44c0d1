import httpx
import pytest

from dashboard.infrastructure.newrelic.metrics_client import NewRelicMetricsFetcher

BASE_URL = "https://api.newrelic.test"
APP_PARAMS = {"accountId": "1234", "appId": "42"}


class FakeNewRelic:
    """Serves canned responses and records every request the fetcher makes."""

    def __init__(self):
        self.requests = []
        self.responses = []

    def reply_json(self, body, status_code=200):
        self.responses.append(httpx.Response(status_code, json=body))

    def reply_xml(self, body, status_code=200):
        self.responses.append(
            httpx.Response(status_code, content=body.encode(), headers={"Content-Type": "application/xml"})
        )

    def reply(self, response):
        self.responses.append(response)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(200, json=[])
        return self.responses.pop(0)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def newrelic():
    return FakeNewRelic()


@pytest.fixture
def fetcher(newrelic):
    client = NewRelicMetricsFetcher(
        api_key="test-key",
        base_url=BASE_URL,
        transport=httpx.MockTransport(newrelic.handler),
        display_offset_seconds=7200,
    )
    yield client
    client.close()
