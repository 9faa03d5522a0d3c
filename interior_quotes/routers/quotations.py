import logging
import random
import string
import time
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from .. import models, schemas
from ..config import settings
from ..database import get_db
from ..pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotations", tags=["quotations"])

pricing_engine = PricingEngine()

QUOTE_CODE_CHARS = string.ascii_uppercase + string.digits


def generate_quote_id(db: Session, now: datetime = None) -> str:
    """<PREFIX>_YYMMDD_XXXX with a random 4-character code."""
    date_part = (now or datetime.utcnow()).strftime("%y%m%d")
    while True:
        code = "".join(random.choices(QUOTE_CODE_CHARS, k=4))
        quote_id = f"{settings.QUOTE_ID_PREFIX}_{date_part}_{code}"
        exists = db.query(models.Quotation).filter(models.Quotation.quote_id == quote_id).first()
        if not exists:
            return quote_id


def brand_adders(db: Session) -> dict:
    """Active brand table as {"core": {name: adder}, "finish": {...}, "hardware": {...}}."""
    adders = {}
    for brand in db.query(models.Brand).filter(models.Brand.is_active.is_(True)).all():
        kind = brand.type.value if hasattr(brand.type, "value") else brand.type
        adders.setdefault(kind, {})[brand.name] = brand.adder_per_sft or 0.0
    return adders


def get_quotation_or_404(quotation_id: int, db: Session) -> models.Quotation:
    quotation = db.query(models.Quotation).filter(models.Quotation.id == quotation_id).first()
    if not quotation:
        raise HTTPException(status_code=404, detail="Quotation not found")
    return quotation


def recalculate_quotation_totals(quotation: models.Quotation, db: Session) -> bool:
    """
    Recompute the totals snapshot from the quotation's items.

    The snapshot (and its updated_at) is only written when one of the
    subtotals actually changed. Returns True when it wrote.
    """
    totals = pricing_engine.aggregate(
        quotation.interior_items, quotation.false_ceiling_items, quotation.other_items,
    )
    if not pricing_engine.totals_changed(quotation.totals, totals):
        return False

    totals["updated_at"] = int(time.time() * 1000)
    quotation.totals = totals
    flag_modified(quotation, "totals")
    db.commit()
    logger.debug("Totals written for %s: %s", quotation.quote_id, totals)
    return True


def _discount_type(quotation: models.Quotation) -> str:
    dt = quotation.discount_type
    return dt.value if hasattr(dt, "value") else (dt or "percent")


def quotation_summary(quotation: models.Quotation) -> dict:
    totals = quotation.totals or pricing_engine.aggregate([], [], [])
    return pricing_engine.quote_summary(totals, _discount_type(quotation), quotation.discount_value or 0.0)


def quotation_to_dict(q: models.Quotation, include_items: bool = True) -> dict:
    data = {
        "id": q.id,
        "quote_id": q.quote_id,
        "project_name": q.project_name,
        "project_type": q.project_type,
        "client_name": q.client_name,
        "client_email": q.client_email,
        "client_phone": q.client_phone,
        "project_address": q.project_address,
        "build_type": q.build_type,
        "status": q.status.value if q.status else "draft",
        "discount_type": _discount_type(q),
        "discount_value": q.discount_value or 0.0,
        "totals": q.totals,
        "include_annexure_interiors": bool(q.include_annexure_interiors),
        "include_annexure_fc": bool(q.include_annexure_fc),
        "agreement_customizations": q.agreement_customizations,
        "approved_at": q.approved_at.isoformat() if q.approved_at else None,
        "created_at": q.created_at.isoformat() if q.created_at else None,
        "updated_at": q.updated_at.isoformat() if q.updated_at else None,
    }
    if include_items:
        data["interior_items"] = [schemas.InteriorItem.model_validate(i).model_dump() for i in q.interior_items]
        data["false_ceiling_items"] = [schemas.FalseCeilingItem.model_validate(i).model_dump() for i in q.false_ceiling_items]
        data["other_items"] = [schemas.OtherItem.model_validate(i).model_dump() for i in q.other_items]
    return data


# --- Endpoints ---

@router.post("/")
def create_quotation(payload: schemas.QuotationCreate, db: Session = Depends(get_db)):
    quotation = models.Quotation(
        quote_id=generate_quote_id(db),
        status=models.QuoteStatus.DRAFT,
        totals=None,
        **payload.model_dump(),
    )
    db.add(quotation)
    db.commit()
    db.refresh(quotation)
    recalculate_quotation_totals(quotation, db)
    db.refresh(quotation)
    logger.info("Created quotation %s for %s", quotation.quote_id, quotation.client_name)
    return quotation_to_dict(quotation)


@router.get("/")
def list_quotations(status: Optional[models.QuoteStatus] = None, skip: int = 0, limit: int = 50,
                    db: Session = Depends(get_db)):
    query = db.query(models.Quotation)
    if status:
        query = query.filter(models.Quotation.status == status)
    quotations = query.order_by(models.Quotation.created_at.desc()).offset(skip).limit(limit).all()
    return [quotation_to_dict(q, include_items=False) for q in quotations]


@router.get("/{quotation_id}")
def get_quotation(quotation_id: int, db: Session = Depends(get_db)):
    return quotation_to_dict(get_quotation_or_404(quotation_id, db))


@router.patch("/{quotation_id}")
def update_quotation(quotation_id: int, update: schemas.QuotationUpdate, db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    quotation.ensure_editable()
    changes = update.model_dump(exclude_unset=True)
    if changes.get("status") == models.QuoteStatus.APPROVED:
        raise HTTPException(status_code=400, detail="Use POST /quotations/{id}/approve to approve a quotation")
    for field, value in changes.items():
        setattr(quotation, field, value)
    db.commit()
    db.refresh(quotation)
    recalculate_quotation_totals(quotation, db)
    return quotation_to_dict(quotation)


@router.delete("/{quotation_id}")
def delete_quotation(quotation_id: int, db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    quotation.ensure_editable()
    db.delete(quotation)
    db.commit()
    return {"ok": True}


@router.post("/{quotation_id}/approve")
def approve_quotation(quotation_id: int, db: Session = Depends(get_db)):
    """
    Freeze the quotation.

    Stores status "approved", approved_at and a snapshot of the items, totals
    and per-document breakdowns. Every later edit is refused with 409.
    """
    quotation = get_quotation_or_404(quotation_id, db)
    quotation.ensure_editable()
    recalculate_quotation_totals(quotation, db)

    snapshot = quotation_to_dict(quotation)
    snapshot["summary"] = quotation_summary(quotation)
    quotation.snapshot_json = snapshot
    quotation.status = models.QuoteStatus.APPROVED
    quotation.approved_at = datetime.utcnow()
    db.commit()
    db.refresh(quotation)
    logger.info("Approved quotation %s", quotation.quote_id)
    return quotation_to_dict(quotation)


@router.get("/{quotation_id}/totals")
def get_totals(quotation_id: int, db: Session = Depends(get_db)):
    """Combined breakdown plus the interiors and false ceiling document breakdowns."""
    quotation = get_quotation_or_404(quotation_id, db)
    summary = quotation_summary(quotation)
    summary["updated_at"] = (quotation.totals or {}).get("updated_at")
    return summary
