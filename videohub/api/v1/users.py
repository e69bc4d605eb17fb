from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from videohub.core.exceptions import NotFoundError
from videohub.database import get_db
from videohub.models.user import User
from videohub.schemas.user import UserResponse
from videohub.api.deps import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError(f"User not found with ID: {user_id}")
    return user
