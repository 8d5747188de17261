from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from app.schemas.common import PitrWindowDescriptor
from app.schemas.window import TimelineResponse
from app.services.window_service import describe_window, drop_window, load_window, store_window

router = APIRouter(prefix="/clusters")


@router.put("/{cluster_id}/pitr/window", status_code=status.HTTP_204_NO_CONTENT)
def put_window_endpoint(cluster_id: str, payload: PitrWindowDescriptor) -> None:
    store_window(cluster_id, payload)


@router.get("/{cluster_id}/pitr/window", response_model=TimelineResponse)
def get_window_endpoint(cluster_id: str) -> TimelineResponse:
    descriptor = load_window(cluster_id)
    if descriptor is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="PITR_WINDOW_NOT_FOUND",
        )
    return TimelineResponse(**describe_window(descriptor))


@router.delete("/{cluster_id}/pitr/window", status_code=status.HTTP_204_NO_CONTENT)
def delete_window_endpoint(cluster_id: str) -> None:
    drop_window(cluster_id)
