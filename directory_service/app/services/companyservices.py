import logging

from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from shared.core.exceptions import NotFound
from shared.models.users import Users
from shared.helpers.user_helper import get_user_for_update, parse_uuid
from shared.utils.enums import UserType

from ..schemas.companyschemas import CompanyDataUpdate

logger = logging.getLogger(__name__)


def get_company_data(db: Session, account_id: str) -> dict:
    company = (
        db.query(Users)
        .filter(Users.id == parse_uuid(account_id, "Invalid user ID"),
                Users.user_type == UserType.COMPANY.value)
        .first()
    )
    if not company:
        raise NotFound("Company not found")

    info = company.company_info or {}
    return {
        "companyInfo": {
            "name": info.get("name", ""),
            "Category": info.get("Category", ""),
            "subCategory": info.get("subCategory", ""),
            "logo": info.get("logo", ""),
        },
        "location": company.location,
    }


def update_company_data(db: Session, account_id: str, payload: CompanyDataUpdate) -> bool:
    """Replace the contact record; returns False when nothing changed."""
    account = get_user_for_update(db, parse_uuid(account_id, "Invalid user ID format"))

    detail = payload.to_document()
    info = dict(account.company_info or {})
    if info.get("details") == [detail]:
        db.rollback()
        return False

    info["details"] = [detail]
    account.company_info = info
    flag_modified(account, "company_info")
    db.commit()

    logger.info(f"Updated contact details of {account_id}")
    return True
