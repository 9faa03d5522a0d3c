from pydantic import BaseModel, Field
from typing import Optional, List, Union, Literal
from datetime import datetime
from .models import QuoteStatus, DiscountType, BrandType

# Dimensions arrive as typed in the scope grid: numbers or partially typed strings
NumericInput = Optional[Union[float, str]]


class QuotationBase(BaseModel):
    project_name: str
    project_type: Optional[str] = None
    client_name: str
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    project_address: Optional[str] = None
    build_type: Literal["handmade", "factory"] = "handmade"
    discount_type: DiscountType = DiscountType.PERCENT
    discount_value: float = Field(0.0, ge=0)
    include_annexure_interiors: bool = True
    include_annexure_fc: bool = True


class QuotationCreate(QuotationBase):
    pass


class QuotationUpdate(BaseModel):
    project_name: Optional[str] = None
    project_type: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    project_address: Optional[str] = None
    build_type: Optional[Literal["handmade", "factory"]] = None
    status: Optional[QuoteStatus] = None
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(None, ge=0)
    include_annexure_interiors: Optional[bool] = None
    include_annexure_fc: Optional[bool] = None


# --- Interior items ---

class InteriorItemCreate(BaseModel):
    room_type: Optional[str] = None
    description: Optional[str] = None
    length: NumericInput = None
    height: NumericInput = None
    width: NumericInput = None
    build_type: Optional[str] = None
    material: Optional[str] = None
    finish: Optional[str] = None
    hardware: Optional[str] = None
    rate_override: Optional[float] = Field(None, ge=0)


class InteriorItemUpdate(InteriorItemCreate):
    is_rate_overridden: Optional[bool] = None


class InteriorItem(BaseModel):
    id: int
    quotation_id: int
    room_type: Optional[str] = None
    description: Optional[str] = None
    length: Optional[float] = None
    height: Optional[float] = None
    width: Optional[float] = None
    sqft: float
    build_type: str
    material: str
    finish: str
    hardware: str
    rate_auto: float
    rate_override: Optional[float] = None
    is_rate_overridden: bool
    unit_price: float
    total_price: float
    class Config:
        from_attributes = True


# --- False ceiling items ---

class FalseCeilingItemCreate(BaseModel):
    room_type: Optional[str] = None
    description: Optional[str] = None
    length: NumericInput = None
    width: NumericInput = None
    unit_price: NumericInput = None


class FalseCeilingItemUpdate(FalseCeilingItemCreate):
    pass


class FalseCeilingItem(BaseModel):
    id: int
    quotation_id: int
    room_type: Optional[str] = None
    description: Optional[str] = None
    length: Optional[float] = None
    width: Optional[float] = None
    area: float
    unit_price: float
    total_price: float
    class Config:
        from_attributes = True


# --- Other items ---

class OtherItemCreate(BaseModel):
    item_type: str
    description: Optional[str] = None
    value_type: Literal["lumpsum", "count"] = "lumpsum"
    value: NumericInput = None
    unit_price: NumericInput = None


class OtherItemUpdate(BaseModel):
    item_type: Optional[str] = None
    description: Optional[str] = None
    value_type: Optional[Literal["lumpsum", "count"]] = None
    value: NumericInput = None
    unit_price: NumericInput = None


class OtherItem(BaseModel):
    id: int
    quotation_id: int
    item_type: str
    description: Optional[str] = None
    value_type: str
    value: float
    unit_price: float
    total_price: float
    class Config:
        from_attributes = True


# --- Brands ---

class BrandUpdate(BaseModel):
    adder_per_sft: Optional[float] = Field(None, ge=0)
    is_default: Optional[bool] = None
    is_active: Optional[bool] = None


class Brand(BaseModel):
    id: int
    type: BrandType
    name: str
    adder_per_sft: float
    is_default: bool
    is_active: bool
    class Config:
        from_attributes = True


# --- Pricing helpers ---

class RateRequest(BaseModel):
    build_type: Optional[str] = None
    material: Optional[str] = None
    finish: Optional[str] = None
    hardware: Optional[str] = None
    description: Optional[str] = None


class SanitizeRequest(BaseModel):
    text: Optional[str] = None


# --- Agreement ---

class PaymentMilestone(BaseModel):
    label: str
    percent: float = Field(..., ge=0, le=100)


class AgreementCustomizations(BaseModel):
    payment_schedule: Optional[List[PaymentMilestone]] = None
    additional_terms: Optional[List[str]] = None
    agreement_date: Optional[datetime] = None
