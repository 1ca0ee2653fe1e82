from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from iiif_search.api.search import router as search_router
from iiif_search.config import get_settings
from iiif_search.logging_config import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="IIIF Search API")
app.include_router(search_router)


@app.get("/", response_class=PlainTextResponse)
def read_root() -> str:
    """Healthcheck endpoint for the service."""
    return "ok"
