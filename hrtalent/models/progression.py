from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hrtalent.database import Base
import enum


class ProgressionType(str, enum.Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    MERIT = "merit"


class ProgressionRule(Base):
    """Directed edge between two track positions. Looked up by (from, to, type)."""
    __tablename__ = "progression_rules"

    id = Column(Integer, primary_key=True, index=True)
    from_position_id = Column(Integer, ForeignKey("track_positions.id"), nullable=False, index=True)
    to_position_id = Column(Integer, ForeignKey("track_positions.id"), nullable=False, index=True)
    progression_type = Column(String, nullable=False)  # ProgressionType value
    min_time_months = Column(Integer, nullable=True)
    performance_requirement = Column(Float, nullable=True)
    additional_requirements = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    from_position = relationship("TrackPosition", foreign_keys=[from_position_id])
    to_position = relationship("TrackPosition", foreign_keys=[to_position_id])


class ProgressionHistory(Base):
    """Append-only record of an executed progression."""
    __tablename__ = "progression_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    from_track_position_id = Column(Integer, ForeignKey("track_positions.id"), nullable=True)
    to_track_position_id = Column(Integer, ForeignKey("track_positions.id"), nullable=False)
    from_salary_level_id = Column(Integer, ForeignKey("salary_levels.id"), nullable=True)
    to_salary_level_id = Column(Integer, ForeignKey("salary_levels.id"), nullable=False)
    from_salary = Column(Float, nullable=True)
    to_salary = Column(Float, nullable=False)
    progression_type = Column(String, nullable=False)
    progression_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    from_position = relationship("TrackPosition", foreign_keys=[from_track_position_id])
    to_position = relationship("TrackPosition", foreign_keys=[to_track_position_id])
    from_level = relationship("SalaryLevel", foreign_keys=[from_salary_level_id])
    to_level = relationship("SalaryLevel", foreign_keys=[to_salary_level_id])
    approver = relationship("User", foreign_keys=[approved_by])
