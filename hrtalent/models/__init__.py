# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    department, user, salary, career_track, progression,
    evaluation, consensus, development_plan, audit_log, notification
)

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .department import Department
from .salary import SalaryClass, JobPosition, SalaryLevel
from .career_track import CareerTrack, TrackPosition
from .progression import ProgressionRule, ProgressionHistory, ProgressionType
from .evaluation import Evaluation, EvaluationCompetency, EvaluationCycle
from .consensus import ConsensusMeeting
from .development_plan import DevelopmentPlan
from .audit_log import AuditLog
from .notification import Notification

__all__ = [
    "User",
    "UserRole",
    "Department",
    "SalaryClass",
    "JobPosition",
    "SalaryLevel",
    "CareerTrack",
    "TrackPosition",
    "ProgressionRule",
    "ProgressionHistory",
    "ProgressionType",
    "Evaluation",
    "EvaluationCompetency",
    "EvaluationCycle",
    "ConsensusMeeting",
    "DevelopmentPlan",
    "AuditLog",
    "Notification",
]
