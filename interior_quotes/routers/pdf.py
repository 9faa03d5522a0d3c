"""
PDF download endpoints.

GET /api/quotations/{id}/pdf/interiors        - interiors quotation
GET /api/quotations/{id}/pdf/false-ceiling    - false ceiling quotation
GET /api/quotations/{id}/pdf/agreement        - service agreement
GET /api/quotations/{id}/pdf/agreement-pack   - agreement + enabled annexures, one file
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import models
from ..agreement import build_agreement_data
from ..agreement_pack import (
    AGREEMENT_VIEW,
    FALSE_CEILING_VIEW,
    INTERIORS_VIEW,
    AgreementPackAssembler,
    PackRequest,
    ViewRegistry,
)
from ..database import get_db
from ..pdf_generator import generate_agreement_pdf, generate_false_ceiling_pdf, generate_interiors_pdf
from .quotations import get_quotation_or_404, quotation_summary, quotation_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotations", tags=["pdf"])


def _pdf_response(pdf_bytes: bytes, filename: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
        },
    )


def _agreement_data(quote: dict) -> dict:
    try:
        return build_agreement_data(quote)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def build_view_registry(quotation: models.Quotation) -> ViewRegistry:
    """
    Mount the documents this quotation can produce.

    The interiors view exists only when there are interior items; the false
    ceiling view only when there are false ceiling or other items.
    """
    quote = quotation_to_dict(quotation)
    summary = quotation_summary(quotation)
    agreement = _agreement_data(quote)

    registry = ViewRegistry()
    registry.mount(AGREEMENT_VIEW, lambda: generate_agreement_pdf(agreement))
    if quote["interior_items"]:
        registry.mount(INTERIORS_VIEW, lambda: generate_interiors_pdf(quote, summary["interiors"]))
    if quote["false_ceiling_items"] or quote["other_items"]:
        registry.mount(FALSE_CEILING_VIEW, lambda: generate_false_ceiling_pdf(quote, summary["false_ceiling"]))
    return registry


@router.get("/{quotation_id}/pdf/interiors")
def download_interiors_pdf(quotation_id: int, db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    pdf_bytes = generate_interiors_pdf(quotation_to_dict(quotation), quotation_summary(quotation)["interiors"])
    return _pdf_response(pdf_bytes, f"Interiors_{quotation.quote_id}.pdf")


@router.get("/{quotation_id}/pdf/false-ceiling")
def download_false_ceiling_pdf(quotation_id: int, db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    pdf_bytes = generate_false_ceiling_pdf(quotation_to_dict(quotation), quotation_summary(quotation)["false_ceiling"])
    return _pdf_response(pdf_bytes, f"FalseCeiling_{quotation.quote_id}.pdf")


@router.get("/{quotation_id}/pdf/agreement")
def download_agreement_pdf(quotation_id: int, db: Session = Depends(get_db)):
    quotation = get_quotation_or_404(quotation_id, db)
    pdf_bytes = generate_agreement_pdf(_agreement_data(quotation_to_dict(quotation)))
    return _pdf_response(pdf_bytes, f"Agreement_{quotation.quote_id}.pdf")


@router.get("/{quotation_id}/pdf/agreement-pack")
def download_agreement_pack(
    quotation_id: int,
    include_interiors: Optional[bool] = None,
    include_false_ceiling: Optional[bool] = None,
    db: Session = Depends(get_db),
):
    """
    Agreement followed by the enabled annexures.

    Annexure flags default to the quotation's saved settings.
    Returns 409 naming the missing sections when an enabled annexure has nothing to show.
    """
    quotation = get_quotation_or_404(quotation_id, db)
    request = PackRequest(
        quote_id=quotation.quote_id,
        client_name=quotation.client_name,
        include_interiors=quotation.include_annexure_interiors if include_interiors is None else include_interiors,
        include_false_ceiling=quotation.include_annexure_fc if include_false_ceiling is None else include_false_ceiling,
    )
    pack = AgreementPackAssembler(build_view_registry(quotation)).assemble(request)
    return _pdf_response(pack.pdf_bytes, pack.filename)
