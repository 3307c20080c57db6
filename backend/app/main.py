import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .api import api_router


# Reuse uvicorn's logger so publishing diagnostics are visible in normal dev logs.
logger = logging.getLogger("uvicorn.error")


app = FastAPI(
    title="Ad Publisher",
    description="Publishes generated ad creatives to Instagram",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router)
logger.info("Meta Graph API base: %s", settings.meta_graph_base_url)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
