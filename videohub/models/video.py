from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from videohub.database import Base


class Video(Base):
    __tablename__ = "Videos"
    
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, index=True, autoincrement=True)
    uploaderId = Column(BigInteger, ForeignKey("Users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    description = Column(String(2200))
    durationSec = Column(Integer)
    url = Column(String(500), nullable=False)
    publicId = Column(String(255))  # media host identifier
    thumbUrl = Column(String(500))
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    
    # Relationships
    uploader = relationship("User", back_populates="videos", foreign_keys=[uploaderId])
    comments = relationship("Comment", back_populates="video", cascade="all, delete-orphan")
