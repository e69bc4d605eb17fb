from sqlalchemy import Column, BigInteger, Integer, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from videohub.database import Base
import enum


class RatingType(str, enum.Enum):
    like = "like"
    dislike = "dislike"


class CommentRating(Base):
    __tablename__ = "CommentRatings"
    __table_args__ = (
        UniqueConstraint("userId", "commentId", name="uq_comment_rating_user_comment"),
    )
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    userId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), nullable=False)
    commentId = Column(BigInteger, ForeignKey("Comments.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Enum(RatingType), nullable=False)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    updatedAt = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="comment_ratings")
    comment = relationship("Comment", back_populates="ratings")
