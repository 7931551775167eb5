"""
Service (menu item) offered by a provider
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from rubhub.database import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(255), nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    description = Column(Text, nullable=True)
    is_special = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    provider = relationship("Provider", back_populates="services")
