"""
User account model
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from rubhub.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False, default="")
    last_name = Column(String(255), nullable=False, default="")
    role = Column(String(50), nullable=False, default="provider")
    created_at = Column(DateTime, default=datetime.utcnow)

    # At most one provider profile per user
    provider = relationship("Provider", back_populates="user", uselist=False)
