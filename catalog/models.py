"""
Database models for the app catalog
SQLAlchemy ORM models for catalog apps and user accounts
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, JSON, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ApprovalStatus(str, enum.Enum):
    APPROVED = "APPROVED"
    PENDING = "PENDING"
    DENIED = "DENIED"
    UNKNOWN = "UNK"


class PrivacyStatus(str, enum.Enum):
    PASSING = "PASSING"
    FAILING = "FAILING"
    UNKNOWN = "UNK"


class Platform(str, enum.Enum):
    WEB = "Web"
    IOS = "iOS"
    ANDROID = "Android"
    CHROME_EXTENSION = "Chrome Extension"
    WINDOWS = "Windows"
    MAC = "Mac"


class GradeLevel(str, enum.Enum):
    K = "K"
    G1 = "1"
    G2 = "2"
    G3 = "3"
    G4 = "4"
    G5 = "5"
    G6 = "6"
    G7 = "7"
    G8 = "8"
    G9 = "9"
    G10 = "10"
    G11 = "11"
    G12 = "12"
    HIGHER_ED = "Higher Ed"


class Subject(str, enum.Enum):
    MATH = "Math"
    SCIENCE = "Science"
    ELA = "ELA"
    SOCIAL_STUDIES = "Social Studies"
    ART = "Art"
    MUSIC = "Music"
    PE = "PE"
    WORLD_LANGUAGES = "World Languages"
    CS = "CS"
    OTHER = "Other"


def _new_id() -> str:
    return str(uuid.uuid4())


class App(Base):
    """
    App entity - one catalog entry
    Platforms, grades and subjects are stored as JSON lists of enum values
    """
    __tablename__ = "apps"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=False, default="", index=True)
    url = Column(String, nullable=False, default="")
    embed = Column(String, nullable=False, default="")
    approval = Column(String, nullable=False, default=ApprovalStatus.UNKNOWN.value)
    privacy = Column(String, nullable=False, default=PrivacyStatus.UNKNOWN.value)
    platforms = Column(JSON, nullable=False, default=list)
    grades = Column(JSON, nullable=False, default=list)
    subjects = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<App(id='{self.id}', name='{self.name}')>"


class User(Base):
    """
    User entity - an account that can log in
    Admin status is not stored; it comes from the configured admin emails
    """
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    is_editor = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<User(id='{self.id}', email='{self.email}', is_editor={self.is_editor})>"
