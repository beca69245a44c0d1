from urllib.parse import parse_qsl, urlsplit

import pytest

from dashboard.utils.url_builder import build_url, template_fields


def test_template_fields():
    assert template_fields("/accounts/{accountId}/applications/{appId}/x.xml?begin={beginDateTime}") == [
        "accountId",
        "appId",
        "beginDateTime",
    ]


def test_placeholders_are_filled_and_quoted():
    url = build_url("/apps/{appId}/data.json?begin={begin}", {"appId": "my app", "begin": "2024-01-02T03:04:05Z"})
    parts = urlsplit(url)
    assert parts.path == "/apps/my%20app/data.json"
    assert dict(parse_qsl(parts.query)) == {"begin": "2024-01-02T03:04:05Z"}


def test_unused_params_become_query_string():
    url = build_url("/apps/{appId}/thresholds.xml", {"appId": 7, "metric": "Apdex", "skipped": None})
    assert url == "/apps/7/thresholds.xml?metric=Apdex"


def test_unused_params_extend_existing_query():
    url = build_url("/apps/{appId}/data.json?field=percent", {"appId": 7, "tags": ["a", "b"]})
    assert parse_qsl(urlsplit(url).query) == [("field", "percent"), ("tags", "a"), ("tags", "b")]


def test_missing_placeholder_raises_key_error():
    with pytest.raises(KeyError) as excinfo:
        build_url("/apps/{appId}/data.json", {})
    assert excinfo.value.args[0] == "appId"
