"""
Directory taxonomies: categories (modalities) and specialties (ailments)
"""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)

    providers = relationship("ProviderCategory", back_populates="category")


class Specialty(Base):
    __tablename__ = "specialties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)

    providers = relationship("ProviderSpecialty", back_populates="specialty")
