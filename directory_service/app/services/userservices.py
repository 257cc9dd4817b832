import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from shared.core.exceptions import InvalidRequest
from shared.helpers.asset_store import AssetStore, CleanupResult
from shared.helpers.user_helper import get_user_for_update, get_user_or_404
from shared.models.users import Users
from shared.utils.enums import UploadFolder, UserType

from ..schemas.userschemas import (
    AccountOut,
    AvailabilityRequest,
    LocationUpdateRequest,
    ProfileUpdateRequest,
)

logger = logging.getLogger(__name__)

OTHER = "Other"


def account_document(user: Users) -> dict:
    return AccountOut.model_validate(user).to_document()


def get_profile(db: Session, account_id: str) -> dict:
    return account_document(get_user_or_404(db, account_id))


def update_location(db: Session, account_id: str, payload: LocationUpdateRequest):
    if payload.location is None:
        raise InvalidRequest("Location is required")

    user = get_user_or_404(db, account_id)
    user.location = payload.location.to_document()
    db.commit()


def _merged_company_info(current: Optional[dict], incoming: dict) -> dict:
    # branches are managed through their own endpoints and survive a profile edit
    merged = dict(incoming)
    for key in ("branches", "details", "logo"):
        if key not in merged and (current or {}).get(key) is not None:
            merged[key] = current[key]
    return merged


def update_profile(db: Session, account_id: str, payload: ProfileUpdateRequest):
    spi = payload.service_provider_info
    if spi is not None and spi.service_type == OTHER and not spi.custom_service_type:
        raise InvalidRequest("Please specify your service type")

    company = payload.company_info
    if company is not None and company.category == OTHER and not company.custom_category:
        raise InvalidRequest("Please specify your Category type")

    user = get_user_for_update(db, account_id)

    # empty strings leave the stored value untouched
    for field in ("full_name", "gender", "date_of_birth", "phone"):
        value = getattr(payload, field)
        if value:
            setattr(user, field, value)

    if payload.location is not None:
        user.location = payload.location.to_document()
    if company is not None:
        user.company_info = _merged_company_info(user.company_info, company.to_document())
    if spi is not None:
        user.service_provider_info = spi.to_document()
    if payload.wholesaler_info is not None:
        user.wholesaler_info = payload.wholesaler_info.to_document()

    db.commit()
    logger.info(f"Updated profile of {account_id}")


def _referenced_files(user: Users) -> List[str]:
    references = [user.logo_path]
    company = user.company_info or {}
    references.append(company.get("logo"))
    references.append((user.service_provider_info or {}).get("profilePhoto"))
    for branch in company.get("branches") or []:
        references.extend(branch.get("images") or [])

    unique = []
    for reference in references:
        if reference and reference not in unique:
            unique.append(reference)
    return unique


def delete_account(db: Session, store: AssetStore, account_id: str) -> CleanupResult:
    user = get_user_for_update(db, account_id)
    references = _referenced_files(user)

    db.delete(user)
    db.commit()
    logger.info(f"Deleted account {account_id}")

    return store.delete_many(references)


def _require_image(upload: Optional[UploadFile]) -> UploadFile:
    if upload is None or not upload.filename:
        raise InvalidRequest("No file uploaded or invalid file")
    if not (upload.content_type or "").startswith("image/"):
        raise InvalidRequest("Only image files are allowed")
    return upload


def upload_logo(db: Session, store: AssetStore, account_id: str, upload: Optional[UploadFile]) -> str:
    user = get_user_for_update(db, account_id)
    if user.user_type not in (UserType.COMPANY.value, UserType.WHOLESALER.value):
        raise InvalidRequest("Only company or wholesaler accounts can upload a logo")

    reference = store.save_upload(_require_image(upload), UploadFolder.LOGOS.value)
    previous = user.logo_path

    user.logo_path = reference
    if user.user_type == UserType.COMPANY.value:
        info = dict(user.company_info or {})
        previous = previous or info.get("logo")
        info["logo"] = reference
        user.company_info = info
        flag_modified(user, "company_info")
    db.commit()

    if previous and previous != reference:
        store.delete(previous)
    return reference


def upload_profile_photo(db: Session, store: AssetStore, account_id: str, upload: Optional[UploadFile]) -> str:
    user = get_user_for_update(db, account_id)
    if user.user_type != UserType.SERVICE_PROVIDER.value:
        raise InvalidRequest("Only service providers can upload a profile photo")

    reference = store.save_upload(_require_image(upload), UploadFolder.PROFILES.value)

    info = dict(user.service_provider_info or {})
    previous = info.get("profilePhoto")
    info["profilePhoto"] = reference
    user.service_provider_info = info
    flag_modified(user, "service_provider_info")
    db.commit()

    if previous and previous != reference:
        store.delete(previous)
    return reference


def update_availability(db: Session, account_id: str, payload: AvailabilityRequest):
    user = get_user_for_update(db, account_id)
    if user.user_type != UserType.SERVICE_PROVIDER.value:
        raise InvalidRequest("Only service providers can update availability")

    if not payload.available_days or not payload.available_hours:
        raise InvalidRequest("Available days and hours are required")

    info = dict(user.service_provider_info or {})
    info["availableDays"] = payload.available_days
    info["availableHours"] = payload.available_hours
    user.service_provider_info = info
    flag_modified(user, "service_provider_info")
    db.commit()


def get_companies_with_locations(db: Session) -> List[dict]:
    companies = (
        db.query(Users)
        .filter(Users.user_type == UserType.COMPANY.value,
                Users.location.isnot(None))
        .order_by(Users.created_at)
        .all()
    )
    return [account_document(company) for company in companies]
