"""Health check endpoint."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, str | int]:
    """Return service health status."""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": settings.service_name,
        "environment": settings.environment,
        "skills": len(request.app.state.skills),
    }
