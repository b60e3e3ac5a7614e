"""Health endpoint."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from src.api.health import get_http_status_code, perform_health_check

router = APIRouter(tags=["System"])


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    result = await perform_health_check(
        getattr(request.app.state, "db", None),
        getattr(request.app.state, "lock_helper", None),
    )
    return JSONResponse(
        status_code=get_http_status_code(result.status),
        content=result.to_dict(),
        headers={"Cache-Control": "no-cache"},
    )
