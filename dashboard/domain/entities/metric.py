from typing import Dict
from pydantic import BaseModel

class TimeSeriesPoint(BaseModel):
    """One graph-widget point: x in epoch milliseconds, y the metric value."""
    x: int
    y: int

# Attribute name -> value of a single threshold element
ThresholdRecord = Dict[str, str]
