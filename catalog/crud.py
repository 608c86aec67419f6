"""
CRUD operations (Create, Read, Update, Delete)
Synchronous database query functions for apps and users
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from catalog.models import App, User


# ===== APPS =====

def get_apps(db: Session) -> List[App]:
    """
    Get every app in creation order
    """
    return db.query(App).order_by(App.created_at).all()


def get_app_by_id(db: Session, app_id: str) -> Optional[App]:
    """
    Get a specific app by ID
    """
    return db.get(App, app_id)


def create_app(db: Session, data: Dict[str, Any]) -> App:
    """
    Insert one app and return it with server-assigned fields populated
    """
    app = App(**data)
    db.add(app)
    db.commit()
    db.refresh(app)
    return app


def bulk_create_apps(db: Session, items: List[Dict[str, Any]]) -> List[App]:
    """
    Insert several apps in one transaction
    """
    apps = [App(**data) for data in items]
    db.add_all(apps)
    db.commit()
    for app in apps:
        db.refresh(app)
    return apps


def update_app(db: Session, app: App, changes: Dict[str, Any]) -> App:
    """
    Apply column changes to an app and persist them
    """
    for key, value in changes.items():
        setattr(app, key, value)
    db.commit()
    db.refresh(app)
    return app


def delete_app(db: Session, app: App) -> None:
    db.delete(app)
    db.commit()


# ===== USERS =====

def get_users(db: Session) -> List[User]:
    """
    Get every user in creation order
    """
    return db.query(User).order_by(User.created_at).all()


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Get a user by email (case-insensitive)
    """
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def create_user(db: Session, email: str, password_hash: str) -> User:
    user = User(email=email, password_hash=password_hash)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, changes: Dict[str, Any]) -> User:
    """
    Apply column changes to a user and persist them
    """
    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user
