from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..agreement import build_agreement_data
from ..database import get_db
from .quotations import get_quotation_or_404, quotation_to_dict

router = APIRouter(prefix="/quotations", tags=["agreement"])


@router.get("/{quotation_id}/agreement")
def get_agreement(quotation_id: int, db: Session = Depends(get_db)):
    """Composed agreement data: room totals, financials, materials, payment schedule."""
    quotation = get_quotation_or_404(quotation_id, db)
    try:
        return build_agreement_data(quotation_to_dict(quotation))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.patch("/{quotation_id}/agreement/customizations")
def update_agreement_customizations(quotation_id: int, update: schemas.AgreementCustomizations,
                                    db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    quotation.ensure_editable()

    changes = update.model_dump(mode="json", exclude_unset=True)
    schedule = changes.get("payment_schedule")
    if schedule:
        total_pct = sum(m["percent"] for m in schedule)
        if abs(total_pct - 100) > 0.01:
            raise HTTPException(
                status_code=422,
                detail=f"Payment schedule percentages must sum to 100% (currently {total_pct:g}%)",
            )

    customizations = dict(quotation.agreement_customizations or {})
    customizations.update(changes)
    quotation.agreement_customizations = customizations
    db.commit()
    db.refresh(quotation)
    return {"ok": True, "agreement_customizations": quotation.agreement_customizations}
