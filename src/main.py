import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.router import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
    setup_logging,
)
from core.middleware import CorrelationIdMiddleware


INDEX_PAGE = Path(__file__).resolve().parent / "static" / "index.html"

settings = get_settings()
setup_logging()

app = FastAPI(
    title="AI Email Assistant API",
    description="Draft emails with a language model and send them over SMTP",
    version="0.1.0",
)

# Middleware added last runs first: correlation IDs are set before the
# normalization layer can log anything.
app.add_middleware(ExceptionNormalizationMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)

app.include_router(api_router, prefix="/api")


@app.get("/", include_in_schema=False)
def index() -> FileResponse:
    """Serve the single-page drafting form."""
    return FileResponse(INDEX_PAGE, media_type="text/html")


logging.getLogger(__name__).info(
    "%s started (environment=%s)", settings.APP_NAME, settings.ENVIRONMENT
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
