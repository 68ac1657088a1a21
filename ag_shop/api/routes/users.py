"""/api/users - customer CRUD, export and per-customer purchases"""

import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ag_shop.api import export
from ag_shop.api.dependencies import get_change_notifier, get_request_id, get_today
from ag_shop.api.presenters import to_purchase_response
from ag_shop.api.schemas import CreatedResponse, MessageResponse, PurchaseResponse, UserRequest, UserResponse
from ag_shop.domain.exceptions import UserNotFoundError
from ag_shop.infrastructure.clients.change_webhook import ChangeNotifier
from ag_shop.infrastructure.database.repositories import PurchaseRepository, UserRepository
from ag_shop.infrastructure.database.session import get_db
from ag_shop.infrastructure.observability.logging import log_change

router = APIRouter()


@router.get("/users", response_model=List[UserResponse])
def list_users(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    db: Session = Depends(get_db),
):
    """All customers ordered by name"""
    users = UserRepository(db).list_users(search=search)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/users/export")
def export_users(
    search: Optional[str] = Query(None, description="Case-insensitive name filter"),
    db: Session = Depends(get_db),
):
    """Download the (filtered) customer list as user_list.xlsx"""
    users = UserRepository(db).list_users(search=search)
    content = export.to_xlsx(
        export.users_frame(UserResponse.model_validate(u) for u in users),
        sheet_name="Users",
    )
    return Response(
        content=content,
        media_type=export.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="user_list.xlsx"'},
    )


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = UserRepository(db).get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(user)


@router.post("/users", response_model=CreatedResponse, status_code=201)
def create_user(
    request_body: UserRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Register a new customer. Name and email are required."""
    request_id = get_request_id(request)

    try:
        user = UserRepository(db).create_user(
            name=request_body.name,
            email=request_body.email,
            phone=request_body.phone,
            address=request_body.address,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Error adding user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to add user")

    log_change(request_id, "created", "user", user.id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("user", "created", user.id))
    return CreatedResponse(message="User added successfully", id=user.id)


@router.put("/users/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    request_body: UserRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    request_id = get_request_id(request)

    try:
        UserRepository(db).update_user(user_id, request_body.model_dump())
        db.commit()
    except UserNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="User not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Error updating user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to update user")

    log_change(request_id, "updated", "user", user_id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("user", "updated", user_id))
    return MessageResponse(message="User updated successfully")


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_change_notifier),
):
    """Delete a customer and all of their purchases"""
    request_id = get_request_id(request)

    try:
        UserRepository(db).delete_user(user_id)
        db.commit()
    except UserNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="User not found")
    except Exception as e:
        db.rollback()
        logging.error(f"Error deleting user: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to delete user")

    log_change(request_id, "deleted", "user", user_id)
    background_tasks.add_task(notifier.send_change_event, notifier.publish("user", "deleted", user_id))
    return MessageResponse(message="User deleted successfully")


@router.get("/users/{user_id}/purchases", response_model=List[PurchaseResponse])
def list_user_purchases(
    user_id: int,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    """
    A customer's purchases, newest first, with interest accrued as of today.

    Unknown users simply have no purchases.
    """
    purchases = PurchaseRepository(db).list_purchases_by_user(user_id)
    return [to_purchase_response(p, today) for p in purchases]
