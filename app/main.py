from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import dashboard as dashboard_router
from app.core.errors import (
    WellbeingException,
    wellbeing_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Wellbeing Dashboard API",
    description=(
        "**Burnout and mood dashboard for the HR portal**\n\n"
        "Fetches the latest burnout test and the mood diary from the portal API, "
        "classifies burnout levels and aggregates the monthly mood calendar.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(WellbeingException, wellbeing_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(dashboard_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """
    Returns `{"status": "ok"}` when the API process is up.
    The portal API is not probed; its outages show up as `failed` source
    states on the dashboard instead.
    """
    return {"status": "ok", "env": settings.APP_ENV}
