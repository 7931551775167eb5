"""
Provider coupon / promotion
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Coupon(Base):
    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    small_print = Column(Text, nullable=True)
    promo_code = Column(String(100), nullable=True)
    expiration_date = Column(DateTime, nullable=True)

    # Eligibility
    first_time_only = Column(Boolean, nullable=False, default=False)
    appointment_only = Column(Boolean, nullable=False, default=False)

    hidden = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    provider = relationship("Provider", back_populates="coupons")
