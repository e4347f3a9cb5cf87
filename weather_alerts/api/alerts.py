"""Alert API routes: CRUD, status history and on-demand evaluation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from weather_alerts.api.deps import get_alert_store, get_evaluator
from weather_alerts.schemas.alert import (
    AlertCreateRequest,
    AlertCreateResponse,
    AlertDeleteResponse,
    AlertListResponse,
    AlertRead,
    AlertStatusUpdateRequest,
    AlertStatusUpdateResponse,
    TriggeredAlertsResponse,
)
from weather_alerts.schemas.evaluation import EvaluationResponse
from weather_alerts.services.alert_evaluator import AlertEvaluator
from weather_alerts.services.alert_store import (
    AlertCapacityError,
    AlertNotFoundError,
    AlertStore,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", status_code=201, response_model=AlertCreateResponse)
def api_create_alert(
    data: AlertCreateRequest,
    store: AlertStore = Depends(get_alert_store),
) -> AlertCreateResponse:
    """Create an alert; 429 once the alert cap is reached."""
    try:
        alert = store.create(
            lat=data.lat,
            lon=data.lon,
            parameter=data.parameter,
            operator=data.operator,
            threshold=data.threshold,
            description=data.description,
        )
    except AlertCapacityError as exc:
        raise HTTPException(
            status_code=429,
            detail={
                "error": "Maximum alert limit reached",
                "message": (
                    f"You can only have up to {exc.max_allowed} alerts. "
                    "Please delete an existing alert first."
                ),
                "current_count": exc.current_count,
                "max_allowed": exc.max_allowed,
            },
        ) from None
    return AlertCreateResponse(
        message="Alert created successfully",
        alert=AlertRead.model_validate(alert),
    )


@router.get("", response_model=AlertListResponse)
def api_list_alerts(store: AlertStore = Depends(get_alert_store)) -> AlertListResponse:
    """List alerts with their latest evaluation status."""
    alerts = store.list_with_latest_status()
    return AlertListResponse(count=len(alerts), alerts=alerts)


@router.get("/status", response_model=TriggeredAlertsResponse)
def api_list_triggered(store: AlertStore = Depends(get_alert_store)) -> TriggeredAlertsResponse:
    """List only alerts whose latest status is triggered."""
    triggered = store.list_triggered()
    if triggered:
        message = f"{len(triggered)} alert(s) are currently triggered"
    else:
        message = "No alerts are currently triggered"
    return TriggeredAlertsResponse(
        count=len(triggered),
        triggered_alerts=triggered,
        message=message,
    )


@router.post("/evaluate", response_model=EvaluationResponse)
async def api_evaluate_alerts(
    evaluator: AlertEvaluator = Depends(get_evaluator),
) -> EvaluationResponse:
    """Run an evaluation pass now and return every per-alert outcome."""
    try:
        results = await evaluator.evaluate_all()
    except Exception as exc:
        logger.exception("Manual alert evaluation failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to evaluate alerts: {exc}",
        ) from exc
    return EvaluationResponse(message="Alert evaluation completed", results=results)


@router.delete("/{alert_id}", response_model=AlertDeleteResponse)
def api_delete_alert(
    alert_id: int = Path(..., gt=0),
    store: AlertStore = Depends(get_alert_store),
) -> AlertDeleteResponse:
    """Delete an alert and its status history."""
    try:
        alert = store.delete(alert_id)
    except AlertNotFoundError:
        raise HTTPException(status_code=404, detail="Alert not found") from None
    return AlertDeleteResponse(
        message="Alert deleted successfully",
        alert_id=alert_id,
        description=alert.description,
    )


@router.put("/{alert_id}/status", response_model=AlertStatusUpdateResponse)
def api_update_alert_status(
    data: AlertStatusUpdateRequest,
    alert_id: int = Path(..., gt=0),
    store: AlertStore = Depends(get_alert_store),
) -> AlertStatusUpdateResponse:
    """Append a status row for an alert."""
    try:
        status = store.upsert_status(
            alert_id,
            is_triggered=data.is_triggered,
            checked_at=data.checked_at,
            current_value=data.current_value,
        )
    except AlertNotFoundError:
        raise HTTPException(status_code=404, detail="Alert not found") from None
    return AlertStatusUpdateResponse(
        message="Alert status updated successfully",
        alert_id=alert_id,
        is_triggered=status.is_triggered,
        checked_at=status.checked_at,
    )
