from sqlalchemy import Column, Integer, String, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hrtalent.database import Base
import enum


class PlanStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DevelopmentPlan(Base):
    """PDI (individual development plan). At most one active plan per employee."""
    __tablename__ = "development_plans"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cycle_id = Column(Integer, ForeignKey("evaluation_cycles.id"), nullable=True, index=True)
    leader_evaluation_id = Column(Integer, ForeignKey("evaluations.id"), nullable=True)
    items = Column(JSON, nullable=False, default=list)
    periodo = Column(String, default="Anual")
    status = Column(String, default=PlanStatus.ACTIVE.value, nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("User", foreign_keys=[employee_id])
