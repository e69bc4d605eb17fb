from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from videohub.database import Base


class Comment(Base):
    __tablename__ = "Comments"
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    videoId = Column(BigInteger, ForeignKey("Videos.id", ondelete="CASCADE"), nullable=False, index=True)
    userId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), nullable=False, index=True)
    parentId = Column(BigInteger, ForeignKey("Comments.id", ondelete="CASCADE"), index=True)
    content = Column(String(1000), nullable=False)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    # Denormalized from CommentRatings, recomputed on every rating change
    likesCount = Column(Integer, nullable=False, default=0)
    dislikesCount = Column(Integer, nullable=False, default=0)
    
    # Relationships
    user = relationship("User", back_populates="comments")
    video = relationship("Video", back_populates="comments")
    parent = relationship("Comment", back_populates="replies", remote_side=[id])
    replies = relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="Comment.createdAt"
    )
    ratings = relationship("CommentRating", back_populates="comment", cascade="all, delete-orphan")
