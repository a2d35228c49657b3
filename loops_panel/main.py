"""Main FastAPI application for the Loops.so admin panel"""
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loops_panel.api.deps import install_services
from loops_panel.api.endpoints import accounts, analytics, contacts, emails, imports, jobs
from loops_panel.config import get_settings
from loops_panel.database import SessionLocal, init_db
from loops_panel.exceptions import PanelError
from loops_panel.services.job_store import JobStore
import logging

settings = get_settings()

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Loops Admin Panel API",
    description="Manage Loops.so accounts: bulk and single contact imports, transactional email and loop analytics",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /api prefix
app.include_router(accounts.router, prefix="/api", tags=["Accounts"])
app.include_router(imports.router, prefix="/api", tags=["Imports"])
app.include_router(jobs.router, prefix="/api", tags=["Jobs"])
app.include_router(contacts.router, prefix="/api", tags=["Contacts"])
app.include_router(emails.router, prefix="/api", tags=["Emails"])
app.include_router(analytics.router, prefix="/api", tags=["Analytics"])


@app.exception_handler(PanelError)
async def panel_error_handler(request: Request, exc: PanelError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def startup_event():
    """Create tables and wire the job services"""
    logger.info("Initializing database...")
    init_db()

    if settings.reconcile_orphaned_jobs:
        JobStore(SessionLocal).reconcile_orphans()

    install_services(app)
    logger.info("Loops admin panel ready")


@app.on_event("shutdown")
async def shutdown_event():
    """Running imports cannot outlive the process; cancel them and close the HTTP client"""
    await app.state.job_runner.shutdown()
    await app.state.loops_client.close()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
