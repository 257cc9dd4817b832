from uuid import UUID
from typing import Optional

from sqlalchemy.orm import Session

from shared.core.exceptions import InvalidRequest, NotFound
from shared.models.users import Users


def parse_uuid(value, message: str = "Invalid user ID") -> UUID:
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidRequest(message)


def get_user_by_email(db: Session, email: str) -> Optional[Users]:
    return db.query(Users).filter(Users.email == email).first()


def get_user_or_404(db: Session, user_id, message: str = "User not found") -> Users:
    user = db.query(Users).filter(Users.id == parse_uuid(user_id)).first()
    if not user:
        raise NotFound(message)
    return user


def get_user_for_update(db: Session, user_id, message: str = "User not found") -> Users:
    """Load the account under a row lock; writers of its JSON documents go through here."""
    user = (
        db.query(Users)
        .filter(Users.id == parse_uuid(user_id))
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not user:
        raise NotFound(message)
    return user
