from fastapi import FastAPI

from entity_normalizer.routers.normalize import router as normalize_router
from entity_normalizer.setup_logging import setup_logging
from entity_normalizer.settings import SERVICE_NAME, SERVICE_VERSION
from entity_normalizer.models import HealthResponse

# --------------------------------------------------------------------
# App bootstrap
# --------------------------------------------------------------------
setup_logging() # Init Logging

app = FastAPI(
    title="Entity Normalizer",
    description="Flatten nested JSON into per-type entity tables keyed by ID, and back",
    version=str(SERVICE_VERSION),
)

# --------------------------------------------------------------------
# Routes
# --------------------------------------------------------------------
@app.get("/healthz", response_model=HealthResponse)
def health():
    """Simple health probe for monitoring."""
    return {"ok": True, "service": SERVICE_NAME, "version": SERVICE_VERSION}

# Register API routers:
app.include_router(normalize_router)
