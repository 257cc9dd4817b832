from enum import Enum


class UserType(str, Enum):
    USER = "user"
    COMPANY = "company"
    WHOLESALER = "wholesaler"
    SERVICE_PROVIDER = "serviceProvider"

    @classmethod
    def values(cls) -> set[str]:
        return {member.value for member in cls}


class UploadFolder(str, Enum):
    BRANCHES = ""
    LOGOS = "logos"
    PROFILES = "profiles"
