"""Liveness endpoint with realtime presence figures."""

from fastapi import APIRouter, Request

from board_realtime.interfaces.api.schemas import ApiResponse, HealthRead
from board_realtime.utils import now_in_app_timezone

router = APIRouter(tags=["health"])


@router.get("/health", response_model=ApiResponse[HealthRead])
def health(request: Request) -> ApiResponse[HealthRead]:
    registry = request.app.state.connection_registry
    return ApiResponse(
        success=True,
        data=HealthRead(
            status="ok",
            timestamp=now_in_app_timezone(),
            connected_users=registry.connected_user_count(),
            sessions=registry.session_count(),
        ),
    )
