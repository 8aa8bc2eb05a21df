# restaurant_pos/routes/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from restaurant_pos.database import get_db
from restaurant_pos.dependencies import sessions, get_token, get_current_user
from restaurant_pos.models.models import UserORM
from restaurant_pos.schemas.schemas import LoginRequest, LoginResponse, CurrentUser
from restaurant_pos.user_management import authenticate_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """
    Check username/password against the stored users.
    - Returns a bearer token to send as `Authorization: Bearer <token>`
    """
    if not credentials.username or not credentials.password:
        raise HTTPException(status_code=422, detail="Please enter both username and password.")

    user = authenticate_user(db, credentials.username, credentials.password)
    if not user:
        logger.info(f"🚫 Failed login for {credentials.username}")
        raise HTTPException(status_code=401, detail="Invalid username or password.")

    token = sessions.create(user.user_id)
    logger.info(f"🔑 {user.username} logged in as {user.role}")
    return {"token": token, "username": user.username, "role": user.role}


@router.post("/logout")
def logout(token: str = Depends(get_token), user: UserORM = Depends(get_current_user)):
    sessions.revoke(token)
    logger.info(f"👋 {user.username} logged out")
    return {"message": "Logged out"}


@router.get("/me", response_model=CurrentUser)
def me(user: UserORM = Depends(get_current_user)):
    return user
