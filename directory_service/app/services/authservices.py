import json
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from fastapi import BackgroundTasks, Request, UploadFile
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as StarletteUploadFile

from shared.core import auth
from shared.core.config import settings
from shared.core.exceptions import Conflict, InvalidRequest, Unauthorized
from shared.helpers.asset_store import AssetStore
from shared.helpers.email_helper import EmailHelper
from shared.helpers.user_helper import get_user_by_email
from shared.models.users import Users
from shared.utils.enums import UploadFolder, UserType
from shared.utils.timeutils import as_utc, utc_now

from ..schemas import authschemas

logger = logging.getLogger(__name__)

OTP_DIGITS = 6
FORGET_PASSWORD_MESSAGE = "If the email is registered, a reset code has been sent"


def _session_data(user: Users, include_logo: bool = False) -> dict:
    token = auth.create_access_token(str(user.id), user.email, user.user_type)
    summary = {
        "id": str(user.id),
        "email": user.email,
        "fullName": user.full_name,
        "userType": user.user_type,
    }
    if include_logo:
        summary["logoPath"] = user.logo_path or ""
    return {"token": token, "user": summary}


#### SIGNUP ###

async def read_signup_request(request: Request) -> Tuple[authschemas.SignupRequest, Optional[UploadFile]]:
    """Signup arrives either as a JSON body or as multipart with a ``data`` JSON field and an optional ``logo``."""
    logo = None
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/"):
        form = await request.form()
        data = form.get("data")
        if not isinstance(data, str) or not data:
            raise InvalidRequest("Missing data field in multipart form")
        try:
            raw = json.loads(data)
        except ValueError as e:
            raise InvalidRequest(f"Invalid JSON in data field: {e}")

        candidate = form.get("logo")
        if isinstance(candidate, StarletteUploadFile) and candidate.filename:
            logo = candidate
    else:
        try:
            raw = await request.json()
        except ValueError:
            raise InvalidRequest("Invalid request body")

    if not isinstance(raw, dict):
        raise InvalidRequest("Invalid request body")

    try:
        return authschemas.SignupRequest.model_validate(raw), logo
    except ValidationError:
        raise InvalidRequest("Invalid request body")


def signup(
        db: Session,
        store: AssetStore,
        payload: authschemas.SignupRequest,
        logo: Optional[UploadFile] = None) -> dict:
    if not (payload.email and payload.password and payload.full_name and payload.user_type):
        raise InvalidRequest("Missing required fields")

    if payload.user_type not in UserType.values():
        raise InvalidRequest("Invalid user type")

    if get_user_by_email(db, payload.email):
        raise Conflict("User with this email already exists")

    logo_path = store.save_upload(logo, UploadFolder.LOGOS.value) if logo else None

    user = Users(
        email=payload.email,
        full_name=payload.full_name,
        user_type=payload.user_type,
        date_of_birth=payload.date_of_birth,
        gender=payload.gender,
        phone=payload.phone,
        referral_code=payload.referral_code,
        interested_deals=payload.interested_deals,
        location=payload.location.to_document() if payload.location else None,
        company_info=payload.company_info.to_document() if payload.company_info else None,
        service_provider_info=(
            payload.service_provider_info.to_document() if payload.service_provider_info else None),
        wholesaler_info=payload.wholesaler_info.to_document() if payload.wholesaler_info else None,
        logo_path=logo_path,
    )
    user.set_password(payload.password)

    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup with the same email
        db.rollback()
        if logo_path:
            store.delete(logo_path)
        raise Conflict("User with this email already exists")

    db.refresh(user)
    logger.info(f"New {user.user_type} signup: {user.email} ({user.id})")
    return _session_data(user, include_logo=True)


#### LOGIN ###

def login(db: Session, payload: authschemas.LoginRequest) -> dict:
    user = get_user_by_email(db, payload.email) if payload.email else None
    if not user or not user.verify_password(payload.password):
        raise Unauthorized("Invalid email or password")

    return _session_data(user)


#### GOOGLE ###

def google_login(db: Session, payload: authschemas.GoogleLoginRequest) -> dict:
    if not payload.email or not payload.uid:
        raise InvalidRequest("Email and UID are required")

    user = get_user_by_email(db, payload.email)
    if not user:
        user = Users(
            email=payload.email,
            full_name=payload.display_name,
            user_type=UserType.USER.value,
            google_uid=payload.uid,
            profile_pic=payload.photo_url,
        )
        db.add(user)
        logger.info(f"Created account for Google user {payload.email}")
    else:
        user.google_uid = payload.uid
        user.full_name = payload.display_name
        user.profile_pic = payload.photo_url

    db.commit()
    db.refresh(user)
    return _session_data(user)


#### PASSWORD RESET ###

def _generate_otp() -> str:
    return f"{secrets.randbelow(10 ** OTP_DIGITS):0{OTP_DIGITS}d}"


def forget_password(
        db: Session,
        background_tasks: BackgroundTasks,
        mailer: EmailHelper,
        payload: authschemas.ForgetPasswordRequest) -> None:
    if not payload.email:
        raise InvalidRequest("Email is required")

    user = get_user_by_email(db, payload.email)
    if not user:
        logger.info(f"Password reset requested for unknown email {payload.email}")
        return

    otp = _generate_otp()
    expires_at = utc_now() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
    user.otp_info = {"otp": otp, "expiresAt": expires_at.isoformat()}
    db.commit()

    background_tasks.add_task(mailer.send_password_reset_otp, user.email, otp)


def verify_otp(db: Session, payload: authschemas.VerifyOtpRequest) -> dict:
    if not payload.email or not payload.otp:
        raise InvalidRequest("Email and OTP are required")

    user = get_user_by_email(db, payload.email)
    otp_info = (user.otp_info or {}) if user else {}
    stored = otp_info.get("otp")
    if not stored or not secrets.compare_digest(str(stored).encode(), payload.otp.encode()):
        raise InvalidRequest("Invalid or expired OTP")

    try:
        expires_at = as_utc(datetime.fromisoformat(otp_info.get("expiresAt")))
    except (TypeError, ValueError):
        expires_at = None
    if expires_at is None or utc_now() >= expires_at:
        raise InvalidRequest("Invalid or expired OTP")

    reset_token = secrets.token_urlsafe(32)
    user.otp_info = None
    user.reset_password_token = reset_token
    user.reset_token_expires_at = utc_now() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    db.commit()

    return {"resetToken": reset_token}


def reset_password(db: Session, payload: authschemas.ResetPasswordRequest) -> None:
    if not payload.token or not payload.new_password:
        raise InvalidRequest("Token and new password are required")

    user = db.query(Users).filter(Users.reset_password_token == payload.token).first()
    expires_at = as_utc(user.reset_token_expires_at) if user else None
    if not user or expires_at is None or utc_now() >= expires_at:
        raise InvalidRequest("Invalid or expired reset token")

    user.set_password(payload.new_password)
    user.reset_password_token = None
    user.reset_token_expires_at = None
    db.commit()
    logger.info(f"Password reset for {user.email}")
