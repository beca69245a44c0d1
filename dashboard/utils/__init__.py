"""
Utility modules for the dashboard service.

This package contains helpers shared by the New Relic client: time
expression parsing and endpoint URL building.
"""

from .time_parser import format_api_timestamp, parse_time_expression
from .url_builder import build_url

__all__ = ["build_url", "format_api_timestamp", "parse_time_expression"]
