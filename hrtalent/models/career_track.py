from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, Text, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hrtalent.database import Base


class CareerTrack(Base):
    __tablename__ = "career_tracks"

    id = Column(Integer, primary_key=True, index=True)
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    name = Column(String, nullable=False)
    code = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    department = relationship("Department", back_populates="career_tracks")
    positions = relationship(
        "TrackPosition",
        back_populates="track",
        order_by="TrackPosition.order_index",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<CareerTrack {self.name}>"


class TrackPosition(Base):
    """A job position / salary class pairing ranked inside one career track."""
    __tablename__ = "track_positions"

    id = Column(Integer, primary_key=True, index=True)
    track_id = Column(Integer, ForeignKey("career_tracks.id"), nullable=False, index=True)
    position_id = Column(Integer, ForeignKey("job_positions.id"), nullable=False)
    class_id = Column(Integer, ForeignKey("salary_classes.id"), nullable=False)
    base_salary = Column(Float, nullable=False)
    order_index = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    vacancies = Column(Integer, nullable=True)  # None = not restricted
    # {"<salary_level_id>": percentage} overrides the interlevel default
    custom_level_percentages = Column(JSON, nullable=True, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    track = relationship("CareerTrack", back_populates="positions")
    position = relationship("JobPosition")
    salary_class = relationship("SalaryClass")

    def __repr__(self):
        return f"<TrackPosition {self.id} track={self.track_id} order={self.order_index}>"
