"""
User Model.
Carries the career placement (track position, interlevel, salary) mutated by progressions.
"""
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from hrtalent.database import Base


class UserRole(str, enum.Enum):
    """
    Roles derived from the user's flags.

    Hierarchy (most to least permissions):
    - DIRECTOR: manages salary structure, approves progressions
    - LEADER: evaluates team members, proposes progressions
    - EMPLOYEE: self-service access
    """
    DIRECTOR = "director"
    LEADER = "leader"
    EMPLOYEE = "employee"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    position = Column(String, nullable=True)  # Display name of the current job position

    is_active = Column(Boolean, default=True, nullable=False)
    is_leader = Column(Boolean, default=False, nullable=False)
    is_director = Column(Boolean, default=False, nullable=False)

    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True)

    # Career placement
    current_track_position_id = Column(Integer, ForeignKey("track_positions.id"), nullable=True)
    current_salary_level_id = Column(Integer, ForeignKey("salary_levels.id"), nullable=True)
    current_salary = Column(Float, nullable=True)
    position_start_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    department = relationship("Department", back_populates="employees")
    current_track_position = relationship("TrackPosition", foreign_keys=[current_track_position_id])
    current_salary_level = relationship("SalaryLevel", foreign_keys=[current_salary_level_id])
    notifications = relationship("Notification", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    @property
    def role(self) -> UserRole:
        if self.is_director:
            return UserRole.DIRECTOR
        if self.is_leader:
            return UserRole.LEADER
        return UserRole.EMPLOYEE

    @property
    def can_manage_careers(self) -> bool:
        """Directors and leaders may assign tracks and execute progressions."""
        return self.role in [UserRole.DIRECTOR, UserRole.LEADER]
