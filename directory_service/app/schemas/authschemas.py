from typing import List, Optional

from pydantic import BaseModel, Field

from .userschemas import (
    DOCUMENT_CONFIG,
    CompanyInfo,
    LocationInfo,
    ServiceProviderInfo,
    WholesalerInfo,
)


# -------- Email / password --------

class SignupRequest(BaseModel):
    email: str = ""
    password: str = ""
    full_name: str = Field("", alias="fullName")
    user_type: str = Field("", alias="userType")
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")
    gender: Optional[str] = None
    phone: Optional[str] = None
    referral_code: Optional[str] = Field(None, alias="referralCode")
    interested_deals: Optional[List[str]] = Field(None, alias="interestedDeals")
    location: Optional[LocationInfo] = None
    company_info: Optional[CompanyInfo] = Field(None, alias="companyInfo")
    service_provider_info: Optional[ServiceProviderInfo] = Field(
        None, alias="serviceProviderInfo")
    wholesaler_info: Optional[WholesalerInfo] = Field(None, alias="wholesalerInfo")

    model_config = DOCUMENT_CONFIG


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


# -------- Google --------

class GoogleLoginRequest(BaseModel):
    email: str = ""
    uid: str = ""
    display_name: str = Field("", alias="displayName")
    photo_url: str = Field("", alias="photoURL")

    model_config = DOCUMENT_CONFIG


# -------- Password reset --------

class ForgetPasswordRequest(BaseModel):
    email: str = ""


class VerifyOtpRequest(BaseModel):
    email: str = ""
    otp: str = ""


class ResetPasswordRequest(BaseModel):
    token: str = ""
    new_password: str = Field("", alias="newPassword")

    model_config = DOCUMENT_CONFIG
