"""Data access layer for shop entities"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import extract
from sqlalchemy.orm import Session, joinedload
from ag_shop.infrastructure.database.models import User, Purchase
from ag_shop.domain.exceptions import UserNotFoundError, PurchaseNotFoundError, InvalidUserReferenceError


class UserRepository:
    """Repository for shop users"""

    def __init__(self, db: Session):
        self.db = db

    def list_users(self, search: Optional[str] = None) -> List[User]:
        """All users ordered by name, optionally narrowed to names containing search"""
        query = self.db.query(User)
        if search:
            query = query.filter(User.name.icontains(search, autoescape=True))
        return query.order_by(User.name).all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create_user(self, name: str, email: str, phone: Optional[str] = None, address: Optional[str] = None) -> User:
        """Persist a new user"""
        db_user = User(name=name, email=email, phone=phone or None, address=address or None)
        self.db.add(db_user)
        self.db.flush()  # Get ID without committing
        return db_user

    def update_user(self, user_id: int, fields: Dict[str, Any]) -> User:
        """
        Overwrite user fields.

        Raises:
            UserNotFoundError: If no user has this id
        """
        db_user = self.get_user(user_id)
        if db_user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        for name, value in fields.items():
            setattr(db_user, name, value)
        self.db.flush()
        return db_user

    def delete_user(self, user_id: int) -> None:
        """Delete a user together with their purchases"""
        db_user = self.get_user(user_id)
        if db_user is None:
            raise UserNotFoundError(f"User {user_id} not found")

        self.db.delete(db_user)
        self.db.flush()


class PurchaseRepository:
    """Repository for purchases"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Purchase).options(joinedload(Purchase.user))

    def _require_user(self, user_id: int) -> None:
        if self.db.query(User.id).filter(User.id == user_id).first() is None:
            raise InvalidUserReferenceError(f"User {user_id} does not exist")

    def list_purchases(
        self,
        month: Optional[int] = None,
        payment_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Purchase]:
        """
        Fetch purchases, newest buy date first.

        Args:
            month: Calendar month (1-12) of the buy date, any year
            payment_type: "immediate" or "deposit"
            search: Case-insensitive substring of the buyer's name
        """
        query = self._query()

        if month is not None:
            query = query.filter(extract("month", Purchase.buy_date) == month)
        if payment_type == "immediate":
            query = query.filter(Purchase.immediate.is_(True))
        elif payment_type == "deposit":
            query = query.filter(Purchase.immediate.is_(False))
        if search:
            query = query.join(Purchase.user).filter(User.name.icontains(search, autoescape=True))

        return query.order_by(Purchase.buy_date.desc(), Purchase.id.desc()).all()

    def list_purchases_by_user(self, user_id: int) -> List[Purchase]:
        """Fetch a user's purchases, newest buy date first"""
        return (
            self._query()
            .filter(Purchase.user_id == user_id)
            .order_by(Purchase.buy_date.desc(), Purchase.id.desc())
            .all()
        )

    def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        return self._query().filter(Purchase.id == purchase_id).first()

    def create_purchase(
        self,
        user_id: int,
        buy_date: date,
        immediate: bool,
        deposit_percentage: Decimal,
        total_amount: Decimal,
        monthly_rate_percent: Decimal,
        due_date: Optional[date] = None,
    ) -> Purchase:
        """
        Persist a new purchase.

        Raises:
            InvalidUserReferenceError: If user_id does not exist
        """
        self._require_user(user_id)

        db_purchase = Purchase(
            user_id=user_id,
            buy_date=buy_date,
            immediate=immediate,
            deposit_percentage=deposit_percentage,
            total_amount=total_amount,
            monthly_rate_percent=monthly_rate_percent,
            due_date=due_date,
        )
        self.db.add(db_purchase)
        self.db.flush()
        return db_purchase

    def update_purchase(self, purchase_id: int, fields: Dict[str, Any]) -> Purchase:
        """
        Overwrite purchase fields.

        Raises:
            PurchaseNotFoundError: If no purchase has this id
            InvalidUserReferenceError: If the new user_id does not exist
        """
        db_purchase = self.get_purchase(purchase_id)
        if db_purchase is None:
            raise PurchaseNotFoundError(f"Purchase {purchase_id} not found")

        if "user_id" in fields:
            self._require_user(fields["user_id"])

        for name, value in fields.items():
            setattr(db_purchase, name, value)
        self.db.flush()
        return db_purchase

    def mark_paid(self, purchase_id: int, paid_date: date) -> Purchase:
        """Settle a purchase in full: no deposit, no due date, accrual closed at paid_date"""
        return self.update_purchase(
            purchase_id,
            {
                "immediate": True,
                "deposit_percentage": Decimal(0),
                "due_date": None,
                "paid_date": paid_date,
            },
        )

    def delete_purchase(self, purchase_id: int) -> None:
        db_purchase = self.get_purchase(purchase_id)
        if db_purchase is None:
            raise PurchaseNotFoundError(f"Purchase {purchase_id} not found")

        self.db.delete(db_purchase)
        self.db.flush()
