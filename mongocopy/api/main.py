"""FastAPI application entry point."""

from fastapi import FastAPI

from .. import __version__
from .routes import replications

app = FastAPI(
    title="MongoCopy API",
    description="API for replicating MongoDB collections",
    version=__version__,
)

app.include_router(replications.router, prefix="/api/replications", tags=["replications"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
