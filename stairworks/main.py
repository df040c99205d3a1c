from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base, SessionLocal
from .routers import stairs, materials

logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("stairworks")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Stairworks",
    description="Stair construction estimator for " + settings.COMPANY_NAME,
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(stairs.router, prefix="/api")
app.include_router(materials.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "stairworks", "company": settings.COMPANY_NAME}


@app.on_event("startup")
def auto_seed():
    """Auto-seed material prices on first run."""
    db = SessionLocal()
    try:
        added = materials.seed_defaults(db)
        if added:
            logger.info("Seeded %d default material prices", added)
    finally:
        db.close()
