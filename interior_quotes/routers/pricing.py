"""
Stateless pricing helpers for the scope screen.

POST /api/pricing/rate      - rate per sqft for a material combination
POST /api/pricing/sanitize  - normalize a typed numeric string
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..calculators.base import sanitize_decimal_input
from ..database import get_db
from ..rates import (
    DEFAULT_CORE,
    DEFAULT_FINISH,
    DEFAULT_HARDWARE,
    effective_build_type,
    resolve_rate,
)
from .quotations import brand_adders

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.post("/rate")
def lookup_rate(request: schemas.RateRequest, db: Session = Depends(get_db)):
    build_type = effective_build_type(request.build_type, request.description)
    core = request.material or DEFAULT_CORE
    finish = request.finish or DEFAULT_FINISH
    hardware = request.hardware or DEFAULT_HARDWARE
    return {
        "build_type": build_type,
        "material": core,
        "finish": finish,
        "hardware": hardware,
        "rate": resolve_rate(build_type, core, finish, hardware, brand_adders(db)),
    }


@router.post("/sanitize")
def sanitize(request: schemas.SanitizeRequest):
    return {"value": sanitize_decimal_input(request.text)}
