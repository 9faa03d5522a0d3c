from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Enum, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum


class QuotationLocked(RuntimeError):
    """Edit attempted on an approved quotation."""

    def __init__(self, quote_id):
        self.quote_id = quote_id
        super().__init__(f"Quotation {quote_id} is approved and can no longer be edited")


class QuoteStatus(str, enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    APPROVED = "approved"


class DiscountType(str, enum.Enum):
    PERCENT = "percent"
    AMOUNT = "amount"


class BrandType(str, enum.Enum):
    CORE = "core"
    FINISH = "finish"
    HARDWARE = "hardware"


class Quotation(Base):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quote_id = Column(String, unique=True, nullable=False)  # QT_251017_AB12
    project_name = Column(String, nullable=False)
    project_type = Column(String, nullable=True)  # '2BHK' | '3BHK' | 'Villa' | ...
    client_name = Column(String, nullable=False)
    client_email = Column(String, nullable=True)
    client_phone = Column(String, nullable=True)
    project_address = Column(Text, nullable=True)
    build_type = Column(String, default="handmade")  # 'handmade' | 'factory'
    status = Column(Enum(QuoteStatus), default=QuoteStatus.DRAFT)

    discount_type = Column(Enum(DiscountType), default=DiscountType.PERCENT)
    discount_value = Column(Float, default=0.0)

    # Derived cache: {interiors_subtotal, fc_subtotal, grand_subtotal, updated_at}
    totals = Column(JSON, nullable=True)

    include_annexure_interiors = Column(Boolean, default=True)
    include_annexure_fc = Column(Boolean, default=True)
    agreement_customizations = Column(JSON, nullable=True)  # payment schedule, extra terms

    approved_at = Column(DateTime, nullable=True)
    snapshot_json = Column(JSON, nullable=True)  # frozen items + totals at approval

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    interior_items = relationship("InteriorItem", back_populates="quotation",
                                  cascade="all, delete-orphan", order_by="InteriorItem.id")
    false_ceiling_items = relationship("FalseCeilingItem", back_populates="quotation",
                                       cascade="all, delete-orphan", order_by="FalseCeilingItem.id")
    other_items = relationship("OtherItem", back_populates="quotation",
                               cascade="all, delete-orphan", order_by="OtherItem.id")

    @property
    def is_locked(self) -> bool:
        return self.status == QuoteStatus.APPROVED

    def ensure_editable(self):
        if self.is_locked:
            raise QuotationLocked(self.quote_id)


class InteriorItem(Base):
    __tablename__ = "interior_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False)
    room_type = Column(String, nullable=True)
    description = Column(String, nullable=True)

    # Dimensions (feet)
    length = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    sqft = Column(Float, default=0.0)

    build_type = Column(String, default="handmade")
    material = Column(String, default="Generic Ply")
    finish = Column(String, default="Generic Laminate")
    hardware = Column(String, default="Nimmi")

    # Pricing
    rate_auto = Column(Float, default=0.0)
    rate_override = Column(Float, nullable=True)
    is_rate_overridden = Column(Boolean, default=False)
    unit_price = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)

    quotation = relationship("Quotation", back_populates="interior_items")


class FalseCeilingItem(Base):
    __tablename__ = "false_ceiling_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False)
    room_type = Column(String, nullable=True)
    description = Column(String, nullable=True)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    area = Column(Float, default=0.0)
    unit_price = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)

    quotation = relationship("Quotation", back_populates="false_ceiling_items")


class OtherItem(Base):
    """Painting, lights, fan hook rods: grouped with false ceiling in totals."""
    __tablename__ = "other_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False)
    item_type = Column(String, nullable=False)
    description = Column(String, nullable=True)
    value_type = Column(String, default="lumpsum")  # 'lumpsum' | 'count'
    value = Column(Float, default=0.0)
    unit_price = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow)

    quotation = relationship("Quotation", back_populates="other_items")


class Brand(Base):
    """Per-sqft adders for core, finish and hardware brands."""
    __tablename__ = "brands"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(BrandType), nullable=False)
    name = Column(String, nullable=False)
    adder_per_sft = Column(Float, default=0.0)
    is_default = Column(Boolean, default=False)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
