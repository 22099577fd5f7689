from fastapi import APIRouter

from ...infrastructure.config.settings import get_settings
from .books import router as books_router

router = APIRouter(prefix=get_settings().API_PREFIX)
router.include_router(books_router)


@router.get(
    "/health",
    summary="API Health Check",
    description="Simple health check endpoint for monitoring and container orchestration.",
    responses={
        200: {"description": "API is healthy and responding"},
    },
)
async def health_check():
    """Health check endpoint for Docker health checks."""
    return {"status": "healthy", "message": "Book Catalog API is running"}
