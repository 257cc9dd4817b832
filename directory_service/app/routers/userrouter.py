from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.claims import UserClaims
from shared.core.database import get_db
from shared.helpers.asset_store import AssetStore, get_asset_store
from shared.helpers.json_response_helper import success_response
from shared.utils.enums import UserType
from ..schemas.userschemas import AvailabilityRequest, LocationUpdateRequest, ProfileUpdateRequest
from ..services import userservices

router = APIRouter(prefix="/api", tags=["Users"])

company_or_wholesaler = auth.require_user_type(UserType.COMPANY.value, UserType.WHOLESALER.value)
service_provider = auth.require_user_type(UserType.SERVICE_PROVIDER.value)


@router.get("/users/profile")
def get_profile(
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    return success_response(userservices.get_profile(db, current_user.subject_id),
                            "Profile retrieved successfully")


@router.put("/users/profile")
def update_profile(
        payload: ProfileUpdateRequest,
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    userservices.update_profile(db, current_user.subject_id, payload)
    return success_response(message="Profile updated successfully")


@router.put("/users/location")
@router.post("/save-locations")
def update_location(
        payload: LocationUpdateRequest,
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    userservices.update_location(db, current_user.subject_id, payload)
    return success_response(message="Location updated successfully")


@router.delete("/users")
def delete_user(
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    userservices.delete_account(db, store, current_user.subject_id)
    return success_response(message="User deleted successfully")


@router.get("/user/companies")
def get_companies_with_locations(
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    return success_response(userservices.get_companies_with_locations(db),
                            "Companies retrieved successfully")


# -------- Company / wholesaler logo --------

def _upload_logo(db, store, current_user, logo):
    logo_url = userservices.upload_logo(db, store, current_user.subject_id, logo)
    return success_response({"logoURL": logo_url}, "Company logo uploaded successfully")


@router.post("/upload-logo")
def upload_logo(
        logo: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    return _upload_logo(db, store, current_user, logo)


@router.post("/company/logo")
def upload_company_logo(
        logo: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(company_or_wholesaler)):
    return _upload_logo(db, store, current_user, logo)


# -------- Service provider --------

def _upload_photo(db, store, current_user, photo):
    photo_url = userservices.upload_profile_photo(db, store, current_user.subject_id, photo)
    return success_response({"photoURL": photo_url}, "Profile photo uploaded successfully")


@router.post("/upload-profile-photo")
def upload_profile_photo(
        photo: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    return _upload_photo(db, store, current_user, photo)


@router.post("/service-provider/photo")
def upload_service_provider_photo(
        photo: Optional[UploadFile] = File(None),
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store),
        current_user: UserClaims = Depends(service_provider)):
    return _upload_photo(db, store, current_user, photo)


@router.post("/update-availability")
def update_availability(
        payload: AvailabilityRequest,
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(auth.validate_current_token)):
    userservices.update_availability(db, current_user.subject_id, payload)
    return success_response(message="Availability updated successfully")


@router.post("/service-provider/availability")
def update_service_provider_availability(
        payload: AvailabilityRequest,
        db: Session = Depends(get_db),
        current_user: UserClaims = Depends(service_provider)):
    userservices.update_availability(db, current_user.subject_id, payload)
    return success_response(message="Availability updated successfully")
