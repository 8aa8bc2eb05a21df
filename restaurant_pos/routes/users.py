from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db
from restaurant_pos.dependencies import require_roles, sessions
from restaurant_pos.models.models import UserORM, ROLE_MANAGER  # SQLAlchemy model
from restaurant_pos.schemas.schemas import User as UserSchema, UserCreate, UserUpdate   # Pydantic schema
from restaurant_pos.user_management import create_user, update_user, delete_user, UserValidationError

manage_users = require_roles(ROLE_MANAGER, message="You do not have permission to manage users.")

router = APIRouter()


def get_user_or_404(db: Session, user_id: int) -> UserORM:
    user = db.query(UserORM).filter(UserORM.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/", response_model=List[UserSchema], dependencies=[Depends(manage_users)])
def get_all_users(db: Session = Depends(get_db)):
    return db.query(UserORM).order_by(UserORM.username.asc()).all()


@router.post("/", response_model=UserSchema, status_code=201, dependencies=[Depends(manage_users)])
def add_user(user: UserCreate, db: Session = Depends(get_db)):
    try:
        return create_user(db, user.username, user.password, user.role)
    except UserValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{user_id}", response_model=UserSchema, dependencies=[Depends(manage_users)])
def edit_user(user_id: int, changes: UserUpdate, db: Session = Depends(get_db)):
    user = get_user_or_404(db, user_id)
    try:
        return update_user(db, user, username=changes.username, password=changes.password, role=changes.role)
    except UserValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{user_id}", response_model=dict)
def remove_user(user_id: int, db: Session = Depends(get_db), current: UserORM = Depends(manage_users)):
    user = get_user_or_404(db, user_id)
    if user.user_id == current.user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account.")
    username = user.username
    delete_user(db, user)
    sessions.revoke_user(user_id)
    return {"message": f"User {username} deleted successfully"}
