from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from shared.core.database import get_db
from shared.helpers.asset_store import AssetStore, get_asset_store
from shared.helpers.email_helper import EmailHelper, get_email_helper
from shared.helpers.json_response_helper import success_response
from ..schemas import authschemas
from ..services import authservices

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/signup")
async def signup(
        request: Request,
        db: Session = Depends(get_db),
        store: AssetStore = Depends(get_asset_store)):
    payload, logo = await authservices.read_signup_request(request)
    data = await run_in_threadpool(authservices.signup, db, store, payload, logo)
    return success_response(data, "User created successfully", status.HTTP_201_CREATED)


@router.post("/login")
def login(
        payload: authschemas.LoginRequest,
        db: Session = Depends(get_db)):
    return success_response(authservices.login(db, payload), "Login successful")


@router.post("/google")
def google_login(
        payload: authschemas.GoogleLoginRequest,
        db: Session = Depends(get_db)):
    return success_response(authservices.google_login(db, payload), "Login successful")


@router.post("/forget-password")
def forget_password(
        payload: authschemas.ForgetPasswordRequest,
        background_tasks: BackgroundTasks,
        db: Session = Depends(get_db),
        mailer: EmailHelper = Depends(get_email_helper)):
    authservices.forget_password(db, background_tasks, mailer, payload)
    return success_response(message=authservices.FORGET_PASSWORD_MESSAGE)


@router.post("/verify-otp")
def verify_otp(
        payload: authschemas.VerifyOtpRequest,
        db: Session = Depends(get_db)):
    return success_response(authservices.verify_otp(db, payload), "OTP verified successfully")


@router.post("/reset-password")
def reset_password(
        payload: authschemas.ResetPasswordRequest,
        db: Session = Depends(get_db)):
    authservices.reset_password(db, payload)
    return success_response(message="Password reset successfully")
