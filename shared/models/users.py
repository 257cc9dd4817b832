import uuid
from sqlalchemy import JSON, Column, DateTime, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from passlib.context import CryptContext

from shared.core.database import Base
from shared.utils.timeutils import utc_now

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

# JSONB on postgres, plain JSON elsewhere (sqlite in tests)
Document = JSON(none_as_null=True).with_variant(
    JSONB(none_as_null=True), "postgresql")


class Users(Base):
    """
    One registered account. Role specific payloads, location, OTP state and
    the company's branch sequence live inside the row as JSON documents.
    """
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(200), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=True)
    full_name = Column(String(200), nullable=False, default="")
    user_type = Column(String(32), nullable=False, index=True)

    date_of_birth = Column(String(32), nullable=True)
    gender = Column(String(32), nullable=True)
    phone = Column(String(32), nullable=True)
    referral_code = Column(String(64), nullable=True)
    interested_deals = Column(Document, nullable=True)

    location = Column(Document, nullable=True)
    company_info = Column(Document, nullable=True)
    wholesaler_info = Column(Document, nullable=True)
    service_provider_info = Column(Document, nullable=True)
    logo_path = Column(Text, nullable=True)

    otp_info = Column(Document, nullable=True)
    reset_password_token = Column(String(128), nullable=True, index=True)
    reset_token_expires_at = Column(DateTime(timezone=True), nullable=True)

    google_uid = Column(String(128), nullable=True)
    profile_pic = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now)
    updated_at = Column(DateTime(timezone=True),
                        default=utc_now, onupdate=utc_now)

    def set_password(self, password: str):
        self.password = bcrypt_context.hash(password)

    def verify_password(self, password: str) -> bool:
        # accounts created through Google have no password
        if not self.password or not password:
            return False
        return bcrypt_context.verify(password, self.password)
