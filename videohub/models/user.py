from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from videohub.database import Base
import enum


class UserRole(str, enum.Enum):
    user = "user"
    admin = "admin"


class UserStatus(str, enum.Enum):
    active = "active"
    blocked = "blocked"


class User(Base):
    __tablename__ = "Users"
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    fullName = Column(String(255))
    avatarUrl = Column(String(500))
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.active)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    updatedAt = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    videos = relationship("Video", back_populates="uploader", cascade="all, delete-orphan", foreign_keys="Video.uploaderId")
    comments = relationship("Comment", back_populates="user", cascade="all, delete-orphan")
    comment_ratings = relationship("CommentRating", back_populates="user", cascade="all, delete-orphan")
