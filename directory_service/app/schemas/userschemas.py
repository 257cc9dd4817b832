from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

DOCUMENT_CONFIG = {"populate_by_name": True, "extra": "ignore"}


class DocumentModel(BaseModel):
    """Sub-document stored as JSON on the account row, camelCase keys."""

    model_config = DOCUMENT_CONFIG

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LocationInfo(DocumentModel):
    city: str = ""
    country: str = ""
    district: str = ""
    street: str = ""
    postal_code: str = Field("", alias="postalCode")
    lat: float = 0.0
    lng: float = 0.0
    allowed: bool = False


class ContactDetail(DocumentModel):
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None


class CompanyInfo(DocumentModel):
    name: str = ""
    category: str = Field("", alias="Category")
    custom_category: Optional[str] = Field(None, alias="customCategory")
    logo: Optional[str] = None
    sub_category: Optional[str] = Field(None, alias="subCategory")
    details: Optional[List[ContactDetail]] = None


class WholesalerInfo(DocumentModel):
    business_name: str = Field("", alias="businessName")
    category: str = Field("", alias="Category")
    referral_code: Optional[str] = Field(None, alias="referralCode")


class ServiceProviderInfo(DocumentModel):
    service_type: str = Field("", alias="serviceType")
    custom_service_type: Optional[str] = Field(None, alias="customServiceType")
    years_experience: int = Field(0, alias="yearsExperience")
    profile_photo: Optional[str] = Field(None, alias="profilePhoto")
    available_hours: Optional[List[str]] = Field(None, alias="availableHours")
    available_days: Optional[List[str]] = Field(None, alias="availableDays")


class ProfileUpdateRequest(BaseModel):
    full_name: Optional[str] = Field(None, alias="fullName")
    gender: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")
    phone: Optional[str] = None
    location: Optional[LocationInfo] = None
    company_info: Optional[CompanyInfo] = Field(None, alias="companyInfo")
    service_provider_info: Optional[ServiceProviderInfo] = Field(
        None, alias="serviceProviderInfo")
    wholesaler_info: Optional[WholesalerInfo] = Field(None, alias="wholesalerInfo")

    model_config = DOCUMENT_CONFIG


class LocationUpdateRequest(BaseModel):
    location: Optional[LocationInfo] = None


class AvailabilityRequest(BaseModel):
    available_days: List[str] = Field(default_factory=list, alias="availableDays")
    available_hours: List[str] = Field(default_factory=list, alias="availableHours")

    model_config = DOCUMENT_CONFIG


class AccountOut(BaseModel):
    """Public view of an account; credential digest, OTP and reset token never leave the service."""

    id: UUID
    email: str
    full_name: str = Field(serialization_alias="fullName")
    user_type: str = Field(serialization_alias="userType")
    date_of_birth: Optional[str] = Field(None, serialization_alias="dateOfBirth")
    gender: Optional[str] = None
    phone: Optional[str] = None
    referral_code: Optional[str] = Field(None, serialization_alias="referralCode")
    interested_deals: Optional[List[str]] = Field(
        None, serialization_alias="interestedDeals")
    location: Optional[dict] = None
    company_info: Optional[dict] = Field(None, serialization_alias="companyInfo")
    service_provider_info: Optional[dict] = Field(
        None, serialization_alias="serviceProviderInfo")
    wholesaler_info: Optional[dict] = Field(None, serialization_alias="wholesalerInfo")
    logo_path: Optional[str] = Field(None, serialization_alias="logoPath")
    google_uid: Optional[str] = Field(None, serialization_alias="googleUID")
    profile_pic: Optional[str] = Field(None, serialization_alias="profilePic")
    created_at: Optional[datetime] = Field(None, serialization_alias="createdAt")
    updated_at: Optional[datetime] = Field(None, serialization_alias="updatedAt")

    model_config = {"from_attributes": True}

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
