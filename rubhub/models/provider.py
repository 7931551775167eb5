"""
Provider profile and its taxonomy junctions
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Provider(Base):
    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    status = Column(String(50), nullable=False, default="active")
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="provider")
    contacts = relationship("Contact", back_populates="provider", order_by="Contact.id")
    locations = relationship("Location", back_populates="provider", order_by="Location.id")
    services = relationship("Service", back_populates="provider", order_by="(Service.sort_order, Service.id)")
    photos = relationship("Photo", back_populates="provider", order_by="(Photo.sort_order, Photo.id)")
    events = relationship("Event", back_populates="provider", order_by="Event.start_date")
    coupons = relationship("Coupon", back_populates="provider", order_by="(Coupon.sort_order, Coupon.id)")
    reviews = relationship("Review", back_populates="provider", order_by="Review.created_at")
    categories = relationship("ProviderCategory", back_populates="provider")
    specialties = relationship("ProviderSpecialty", back_populates="provider")


class ProviderCategory(Base):
    __tablename__ = "provider_categories"

    provider_id = Column(Integer, ForeignKey("providers.id"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id"), primary_key=True)

    provider = relationship("Provider", back_populates="categories")
    category = relationship("Category", back_populates="providers")


class ProviderSpecialty(Base):
    __tablename__ = "provider_specialties"

    provider_id = Column(Integer, ForeignKey("providers.id"), primary_key=True)
    specialty_id = Column(Integer, ForeignKey("specialties.id"), primary_key=True)

    provider = relationship("Provider", back_populates="specialties")
    specialty = relationship("Specialty", back_populates="providers")
