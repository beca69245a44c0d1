from fastapi import APIRouter, Depends, Request
from dashboard.schemas.widgets import WidgetListResponse, WidgetResponse
from dashboard.dependencies import get_metrics_service
from dashboard.domain.services.metrics_service import MetricsService

router = APIRouter()

@router.get("/widgets", response_model=WidgetListResponse)
def list_widgets(service: MetricsService = Depends(get_metrics_service)):
    """List widget names that can be fetched."""
    return WidgetListResponse(widgets=service.widget_names)

@router.get("/widgets/{widget}", response_model=WidgetResponse)
def get_widget(widget: str, request: Request, service: MetricsService = Depends(get_metrics_service)):
    """Get data for one widget. Query params (appId, beginDateTime, ...) are passed upstream."""
    data = service.get_widget_data(widget, dict(request.query_params))
    return WidgetResponse(widget=widget, data=data)
