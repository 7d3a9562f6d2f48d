"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from photofind import config
from photofind.api.routes import images, search, tags
from photofind.logging_config import configure_logging

configure_logging()

app = FastAPI(
    title="PhotoFind API",
    description="Photo library API with natural language search",
    version=config.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict to app origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(images.router)
app.include_router(search.router)
app.include_router(tags.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "PhotoFind API", "status": "running", "version": config.APP_VERSION}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
