"""
Role-based user management for the restaurant
Handles: Manager, Staff and Cashier accounts
"""
from sqlalchemy.orm import Session
from restaurant_pos.database import commit_or_500
from restaurant_pos.models.models import UserORM, ROLES, ROLE_MANAGER, ROLE_STAFF, ROLE_CASHIER
from typing import Optional, List
import logging
import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_USERS = [
    ("manager", "manager123", ROLE_MANAGER),
    ("staff", "staff123", ROLE_STAFF),
    ("cashier", "cashier123", ROLE_CASHIER),
]


class UserValidationError(ValueError):
    """Raised when a user form fails validation; the message is shown to the user."""


def hash_password(password: str) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        return False


def authenticate_user(db: Session, username: str, password: str) -> Optional[UserORM]:
    """Return the user matching the credentials, or None"""
    user = db.query(UserORM).filter(UserORM.username == username).first()
    if user and verify_password(password, user.password_hash):
        return user
    return None


def insert_initial_users_if_needed(db: Session) -> List[str]:
    """
    Create the default manager, staff and cashier accounts when no user exists yet.
    Returns the usernames that were created.
    """
    if db.query(UserORM).count() > 0:
        return []

    created = []
    for username, password, role in DEFAULT_USERS:
        db.add(UserORM(username=username, password_hash=hash_password(password), role=role))
        created.append(username)
    commit_or_500(db, "save initial users")
    logger.info(f"✅ Created initial users: {', '.join(created)}")
    return created


def _validate(db: Session, username: str, password: Optional[str], role: str, editing: Optional[UserORM] = None) -> str:
    trimmed_username = (username or "").strip()
    if not trimmed_username:
        raise UserValidationError("Username cannot be empty.")
    if password is not None and password == "":
        raise UserValidationError("Password cannot be empty.")
    if role not in ROLES:
        raise UserValidationError(f"Invalid role: {role}")

    duplicate = db.query(UserORM).filter(UserORM.username == trimmed_username)
    if editing is not None:
        duplicate = duplicate.filter(UserORM.user_id != editing.user_id)
    if duplicate.first():
        raise UserValidationError("Username already exists.")
    return trimmed_username


def create_user(db: Session, username: str, password: str, role: str = ROLE_STAFF) -> UserORM:
    """Validate and create a new user"""
    if password is None:
        raise UserValidationError("Password cannot be empty.")
    trimmed_username = _validate(db, username, password, role)

    user = UserORM(username=trimmed_username, password_hash=hash_password(password), role=role)
    db.add(user)
    commit_or_500(db, "save user")
    db.refresh(user)
    logger.info(f"✅ Created user {user.username} ({user.role})")
    return user


def update_user(
    db: Session,
    user: UserORM,
    username: Optional[str] = None,
    password: Optional[str] = None,
    role: Optional[str] = None
) -> UserORM:
    """
    Validate and update an existing user.
    Fields left as None keep their current value.
    """
    new_username = username if username is not None else user.username
    new_role = role if role is not None else user.role
    trimmed_username = _validate(db, new_username, password, new_role, editing=user)

    user.username = trimmed_username
    user.role = new_role
    if password is not None:
        user.password_hash = hash_password(password)
    commit_or_500(db, "save user")
    db.refresh(user)
    logger.info(f"✏️ Updated user {user.username} ({user.role})")
    return user


def delete_user(db: Session, user: UserORM) -> None:
    username = user.username
    db.delete(user)
    commit_or_500(db, "delete user")
    logger.info(f"🗑️ Deleted user {username}")
