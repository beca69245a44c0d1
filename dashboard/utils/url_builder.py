"""Generic endpoint URL builder.

Templates carry ``{name}`` placeholders that are filled (URL-quoted) from the
request params. Any params that no placeholder consumes are appended to the
query string.
"""
import string
from typing import Any, Dict, Iterable, List, Mapping, Tuple
from urllib.parse import quote, urlencode

_formatter = string.Formatter()


def template_fields(template: str) -> List[str]:
    """Return placeholder names used in an endpoint template, in order."""
    return [field for _, field, _, _ in _formatter.parse(template) if field]


def _query_items(params: Mapping[str, Any], skip: Iterable[str]) -> List[Tuple[str, Any]]:
    skip = set(skip)
    items = []
    for key, value in params.items():
        if key in skip or value is None:
            continue
        if isinstance(value, (list, tuple)):
            items.extend((key, v) for v in value)
        else:
            items.append((key, value))
    return items


def build_url(template: str, params: Mapping[str, Any]) -> str:
    """Fill placeholders from params and append the leftovers as a query string.

    Raises:
        KeyError: with the placeholder name, if params has no value for it.
    """
    fields = template_fields(template)
    values: Dict[str, str] = {}
    for field in fields:
        if params.get(field) is None:
            raise KeyError(field)
        values[field] = quote(str(params[field]), safe="")

    url = template.format(**values)

    extra = _query_items(params, fields)
    if extra:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(extra)}"
    return url
