"""/api/purchases - purchase CRUD, settlement and export with live interest"""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ag_shop.api import export
from ag_shop.api.dependencies import get_change_notifier, get_request_id, get_today
from ag_shop.api.presenters import to_purchase_response
from ag_shop.api.schemas import (
    CreatedResponse,
    MessageResponse,
    PaymentRequest,
    PurchaseCreateRequest,
    PurchaseDetailResponse,
    PurchaseRequest,
    PurchaseResponse,
)
from ag_shop.config import settings
from ag_shop.domain.exceptions import InvalidUserReferenceError, PurchaseNotFoundError
from ag_shop.infrastructure.clients.change_webhook import ChangeNotifier
from ag_shop.infrastructure.database.repositories import PurchaseRepository
from ag_shop.infrastructure.database.session import get_db
from ag_shop.infrastructure.observability.logging import log_change
from ag_shop.infrastructure.observability.metrics import record_purchase, purchase_paid_counter

router = APIRouter()

PaymentType = Literal["immediate", "deposit"]


def _purchase_fields(request_body: PurchaseRequest, creating: bool = False) -> dict:
    """
    Normalize a purchase body: immediate purchases carry no deposit or due date.

    On update, an omitted monthly rate or payment date keeps the stored value.
    """
    fields = request_body.model_dump()
    if fields["monthly_rate_percent"] is None:
        if creating:
            fields["monthly_rate_percent"] = Decimal(str(settings.default_monthly_rate_percent))
        else:
            del fields["monthly_rate_percent"]
    if creating or "paid_date" not in request_body.model_fields_set:
        del fields["paid_date"]
    if fields["immediate"]:
        fields["deposit_percentage"] = Decimal(0)
        fields["due_date"] = None
    return fields


@router.get("/purchases", response_model=List[PurchaseResponse])
def list_purchases(
    month: Optional[int] = Query(None, ge=1, le=12, description="Buy-date month, any year"),
    payment_type: Optional[PaymentType] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive customer name filter"),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    All purchases, newest first, each with deposit split and interest.

    Open credit purchases accrue up to today; paid ones show their final
    interest.
    """
    purchases = PurchaseRepository(db).list_purchases(month=month, payment_type=payment_type, search=search)
    return [to_purchase_response(p, today) for p in purchases]


@router.get("/purchases/export")
def export_purchases(
    month: Optional[int] = Query(None, ge=1, le=12),
    payment_type: Optional[PaymentType] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Download the (filtered) purchase list as purchase_list.xlsx"""
    purchases = PurchaseRepository(db).list_purchases(month=month, payment_type=payment_type, search=search)
    content = export.to_xlsx(
        export.purchases_frame(to_purchase_response(p, today) for p in purchases),
        sheet_name="Purchases",
    )
    return Response(
        content=content,
        media_type=export.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="purchase_list.xlsx"'},
    )


@router.post("/purchases", response_model=CreatedResponse, status_code=201)
def create_purchase(
    request_body: PurchaseCreateRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Record a purchase paid immediately or on deposit"""
    request_id = get_request_id(request)
    fields = _purchase_fields(request_body, creating=True)

    try:
        purchase = PurchaseRepository(db).create_purchase(**fields)
        db.commit()
    except InvalidUserReferenceError as e:
        db.rollback()
        logging.warning(f"Invalid user reference: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Invalid user ID")
    except Exception as e:
        db.rollback()
        logging.error(f"Error adding purchase: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to add purchase")

    record_purchase(purchase.immediate)
    log_change(request_id, "created", "purchase", purchase.id, user_id=purchase.user_id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("purchase", "created", purchase.id))
    return CreatedResponse(message="Purchase added successfully", id=purchase.id)


@router.get("/purchases/{purchase_id}", response_model=PurchaseDetailResponse)
def get_purchase(
    purchase_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """Purchase with customer contact details and interest as of today"""
    purchase = PurchaseRepository(db).get_purchase(purchase_id)
    if not purchase:
        raise HTTPException(status_code=404, detail="Purchase not found")
    return to_purchase_response(purchase, today, PurchaseDetailResponse)


@router.put("/purchases/{purchase_id}", response_model=MessageResponse)
def update_purchase(
    purchase_id: int,
    request_body: PurchaseRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    request_id = get_request_id(request)

    try:
        PurchaseRepository(db).update_purchase(purchase_id, _purchase_fields(request_body))
        db.commit()
    except PurchaseNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Purchase not found")
    except InvalidUserReferenceError as e:
        db.rollback()
        logging.warning(f"Invalid user reference: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail="Invalid user ID")
    except Exception as e:
        db.rollback()
        logging.error(f"Error updating purchase: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update purchase")

    log_change(request_id, "updated", "purchase", purchase_id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("purchase", "updated", purchase_id))
    return MessageResponse(message="Purchase updated successfully")


@router.post("/purchases/{purchase_id}/pay", response_model=PurchaseDetailResponse)
def mark_purchase_paid(
    purchase_id: int,
    background_tasks: BackgroundTasks,
    request: Request,
    request_body: Optional[PaymentRequest] = None,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """
    Mark a purchase as fully paid.

    Interest stops accruing on the payment date (today unless given) and the
    purchase becomes an immediate payment with no deposit or due date.
    """
    request_id = get_request_id(request)
    paid_date = request_body.paid_date if request_body and request_body.paid_date else today
    repo = PurchaseRepository(db)

    try:
        repo.mark_paid(purchase_id, paid_date)
        db.commit()
    except PurchaseNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Purchase not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Error marking purchase paid: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to mark purchase as paid")

    purchase_paid_counter.inc()
    log_change(request_id, "paid", "purchase", purchase_id, paid_date=paid_date.isoformat())
    background_tasks.add_task(notifier.send_change_event, notifier.publish("purchase", "paid", purchase_id))
    return to_purchase_response(repo.get_purchase(purchase_id), today, PurchaseDetailResponse)


@router.delete("/purchases/{purchase_id}", response_model=MessageResponse)
def delete_purchase(
    purchase_id: int,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    request_id = get_request_id(request)

    try:
        PurchaseRepository(db).delete_purchase(purchase_id)
        db.commit()
    except PurchaseNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Purchase not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Error deleting purchase: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to delete purchase")

    log_change(request_id, "deleted", "purchase", purchase_id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("purchase", "deleted", purchase_id))
    return MessageResponse(message="Purchase deleted successfully")
