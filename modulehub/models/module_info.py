"""Module info model definitions."""

from sqlalchemy import Column, DateTime, Integer, String, func
from modulehub.database import Base


class ModuleInfo(Base):
    """Represents a course module and how it is examined."""
    __tablename__ = "module_info"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    module_name = Column(String(255), nullable=False)
    module_duration = Column(Integer, nullable=False)
    exam_type = Column(String(255), nullable=False)
    version = Column(String(64), nullable=False)
