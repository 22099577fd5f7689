import os

from fastapi.responses import HTMLResponse

from ..infrastructure.app_factory import create_application
from ..infrastructure.config.settings import get_settings
from ..infrastructure.logging import configure_logging
from ..interfaces.api import router as api_router
from ..interfaces.ui.router import router as ui_router

settings = get_settings()

configure_logging()

app = create_application(
    router=api_router,
    settings=settings,
    summary="REST API and browser UI for a library book catalog",
    description="""
    # Book Catalog API

    Manage the books of a small library:

    * 📚 **Books**: create, read, replace and delete book records
    * 🔍 **Catalog**: search by title or author, filter by genre and status, 10 books per page
    * 🌐 **Browser UI**: HTMX catalog screen with add/edit forms at `/`

    ## Errors

    Failures return `{"detail": "..."}`. Validation failures (400) also list
    the offending fields under `errors`.
    """,
)

app.include_router(ui_router)

templates_dir = os.path.join(os.path.dirname(__file__), "templates")


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def get_index():
    """Serve the main HTMX interface."""
    with open(os.path.join(templates_dir, "index.html"), "r", encoding="utf-8") as f:
        return HTMLResponse(content=f.read())
