"""
Pydantic schemas for API request bodies and cached records
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from catalog.models import ApprovalStatus, GradeLevel, Platform, PrivacyStatus, Subject


# ===== APP SCHEMAS =====

class AppBase(BaseModel):
    """Base app schema; defaults match a blank catalog entry"""
    name: str = ""
    url: str = ""
    embed: str = ""
    approval: ApprovalStatus = ApprovalStatus.UNKNOWN
    privacy: PrivacyStatus = PrivacyStatus.UNKNOWN
    platforms: List[Platform] = []
    grades: List[GradeLevel] = []
    subjects: List[Subject] = []

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True


class AppCreate(AppBase):
    """Request body for creating an app"""
    pass


class AppPatch(BaseModel):
    """Request body for patching an app; empty fields are left unchanged"""
    name: Optional[str] = None
    url: Optional[str] = None
    embed: Optional[str] = None
    approval: Optional[ApprovalStatus] = None
    privacy: Optional[PrivacyStatus] = None
    platforms: Optional[List[Platform]] = None
    grades: Optional[List[GradeLevel]] = None
    subjects: Optional[List[Subject]] = None

    class Config:
        use_enum_values = True


class App(AppBase):
    """App record as served to clients and held in the apps cache"""
    id: str


# ===== USER SCHEMAS =====

class User(BaseModel):
    """User record as held in the users cache"""
    id: str
    email: str
    is_editor: bool = False
    is_admin: bool = False

    class Config:
        from_attributes = True

    def public(self) -> dict:
        """Client-facing representation"""
        return {
            "id": self.id,
            "email": self.email,
            "isEditor": self.is_editor,
            "isAdmin": self.is_admin,
        }


class SignUpRequest(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPatch(BaseModel):
    """Admin changes to another user"""
    email: Optional[str] = None
    is_editor: Optional[bool] = Field(None, alias="isEditor")


class PasswordChange(BaseModel):
    password: str
