from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from .agreement_pack import MissingSectionError
from .calculators.base import InvalidNumericInput
from .config import settings
from .database import engine, Base
from .models import QuotationLocked
from .routers import quotations, items, pdf, agreement, brands, pricing

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("interior_quotes")

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Interior Quotes",
    description="Quotation pricing, agreements and document packs for interior design projects",
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
app.include_router(quotations.router, prefix="/api")
app.include_router(items.router, prefix="/api")
app.include_router(pdf.router, prefix="/api")
app.include_router(agreement.router, prefix="/api")
app.include_router(brands.router, prefix="/api")
app.include_router(pricing.router, prefix="/api")


@app.exception_handler(InvalidNumericInput)
def invalid_numeric_input(request: Request, exc: InvalidNumericInput):
    return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(QuotationLocked)
def quotation_locked(request: Request, exc: QuotationLocked):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(MissingSectionError)
def missing_section(request: Request, exc: MissingSectionError):
    logger.warning("Agreement pack refused: %s", exc)
    return JSONResponse(status_code=409, content={"detail": str(exc), "missing_sections": exc.sections})


@app.get("/health")
def health():
    return {"status": "ok", "app": "interior-quotes"}


@app.on_event("startup")
def auto_seed():
    """Auto-seed the brand adder table on first run."""
    from .database import SessionLocal
    from .routers.brands import seed_default_brands
    db = SessionLocal()
    try:
        seed_default_brands(db)
    finally:
        db.close()
