"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from omninews.database import engine, Base
from omninews.routers import articles, generate
from omninews.config import HOST, PORT
from omninews.utils.logger import configure_logging

configure_logging()

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    logger.info("Starting OmniNews backend server...")

    # Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    yield

    logger.info("Shutting down OmniNews backend server...")

class APICORSMiddleware(CORSMiddleware):
    """CORS for the REST API; function endpoints answer their own preflight and headers."""
    def __init__(self, app, skip_prefixes=(), **options):
        super().__init__(app, **options)
        self.skip_prefixes = tuple(skip_prefixes)

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http" and scope["path"].startswith(self.skip_prefixes):
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)

# Create FastAPI app
app = FastAPI(
    title="OmniNews API",
    description="News feed, admin article management and AI article drafting",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    APICORSMiddleware,
    skip_prefixes=(generate.router.prefix,),
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(articles.router)
app.include_router(generate.router)

@app.get("/", include_in_schema=False)
async def root():
    return {"message": "OmniNews API", "version": "1.0.0", "status": "running"}

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
