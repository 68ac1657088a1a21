"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class MessageResponse(BaseModel):
    """Acknowledgement for update/delete"""

    message: str


class CreatedResponse(BaseModel):
    """Acknowledgement for create, carries the new record id"""

    message: str
    id: int


class RevisionResponse(BaseModel):
    """Current change revision for cache invalidation"""

    revision: int


class UserRequest(BaseModel):
    """Request body for POST /api/users and PUT /api/users/{id}"""

    name: str = Field(..., min_length=1, description="Customer name")
    email: str = Field(..., min_length=1, description="Contact email")
    phone: Optional[str] = None
    address: Optional[str] = None


class UserResponse(BaseModel):
    """Single user"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PurchaseRequest(BaseModel):
    """
    Request body for PUT /api/purchases/{id}.

    Deposit purchases need a due date on create and update alike. Omitting
    monthly_rate_percent or paid_date leaves the stored values in place.
    """

    user_id: int = Field(..., gt=0)
    buy_date: date
    immediate: bool
    deposit_percentage: Decimal = Field(..., ge=0, le=100, description="Share of total paid upfront")
    total_amount: Decimal = Field(..., gt=0, description="Purchase total")
    due_date: Optional[date] = None
    monthly_rate_percent: Optional[Decimal] = Field(None, ge=0, le=100, description="Interest per elapsed month")
    paid_date: Optional[date] = None

    @model_validator(mode="after")
    def require_due_date_for_deposit(self):
        if not self.immediate and self.due_date is None:
            raise ValueError("Due date is required for deposit payment")
        return self


class PurchaseCreateRequest(PurchaseRequest):
    """Request body for POST /api/purchases"""

    deposit_percentage: Decimal = Field(Decimal(0), ge=0, le=100, description="Share of total paid upfront")


class PaymentRequest(BaseModel):
    """Request body for POST /api/purchases/{id}/pay"""

    paid_date: Optional[date] = Field(None, description="Defaults to today")


class PurchaseResponse(BaseModel):
    """Purchase with its deposit split and accrued interest"""

    id: int
    user_id: int
    user_name: Optional[str] = None
    buy_date: date
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    immediate: bool
    payment_type: str
    total_amount: Decimal
    deposit_percentage: Decimal
    deposit_amount: Optional[Decimal] = None
    remaining_amount: Optional[Decimal] = None
    monthly_rate_percent: Decimal
    accruing: bool
    elapsed_months: float
    interest_amount: Decimal
    total_with_interest: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PurchaseDetailResponse(PurchaseResponse):
    """Response for GET /api/purchases/{id}"""

    user_email: Optional[str] = None
    user_phone: Optional[str] = None
    user_address: Optional[str] = None
