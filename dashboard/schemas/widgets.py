"""
Response models for the dashboard widget API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field

from dashboard.domain.entities.metric import TimeSeriesPoint


class WidgetResponse(BaseModel):
    """Data for a single widget."""
    widget: str = Field(..., description="Widget name")
    data: Union[int, float, List[TimeSeriesPoint], Dict[str, Any]] = Field(
        ..., description="Scalar for number widgets, points for graph widgets, mapping for thresholds"
    )
    timestamp: datetime = Field(default_factory=datetime.now, description="Response timestamp")


class WidgetListResponse(BaseModel):
    widgets: List[str] = Field(..., description="Available widget names")


class ErrorResponse(BaseModel):
    """Response model for errors."""
    success: bool = Field(False, description="Always false for error responses")
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Optional error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.now, description="Response timestamp")
