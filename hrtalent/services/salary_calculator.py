"""
Salary calculation.

A salary is the track position's base salary plus the interlevel percentage:

    salary = base_salary * (1 + percentage / 100), rounded to cents

The percentage is the level default unless the track position overrides it
in ``custom_level_percentages``.
"""
from typing import Any, Dict, List, Optional, Iterable

from hrtalent.core.exceptions import NotFoundError
from hrtalent.models.career_track import TrackPosition
from hrtalent.models.salary import SalaryLevel
from hrtalent.services.base import BaseService


def calculate_salary(base_salary: float, level_percentage: float) -> float:
    """Pure salary formula, rounded to two decimals."""
    return round(base_salary * (1 + level_percentage / 100), 2)


def resolve_level_percentage(position: TrackPosition, level: SalaryLevel) -> float:
    """Percentage for `level` on `position`: custom override first, level default otherwise."""
    overrides: Dict[str, Any] = position.custom_level_percentages or {}
    custom = overrides.get(str(level.id))
    if custom is not None:
        return float(custom)
    return float(level.percentage or 0.0)


def build_level_table(position: TrackPosition, levels: Iterable[SalaryLevel]) -> List[Dict[str, Any]]:
    """One row per interlevel (ordered by order_index) with the resulting salary."""
    overrides = position.custom_level_percentages or {}
    table = []
    for level in sorted(levels, key=lambda lvl: lvl.order_index):
        percentage = resolve_level_percentage(position, level)
        table.append({
            "salaryLevelId": level.id,
            "levelName": level.name,
            "levelPercentage": percentage,
            "isCustom": str(level.id) in overrides,
            "calculatedSalary": calculate_salary(position.base_salary, percentage),
        })
    return table


class SalaryService(BaseService):
    """Resolves track positions and interlevels from the store and prices them."""

    def get_track_position(self, track_position_id: int) -> TrackPosition:
        position = self.db.get(TrackPosition, track_position_id)
        if position is None:
            raise NotFoundError("Track position", track_position_id)
        return position

    def get_salary_level(self, salary_level_id: int) -> SalaryLevel:
        level = self.db.get(SalaryLevel, salary_level_id)
        if level is None:
            raise NotFoundError("Salary level", salary_level_id)
        return level

    def calculate(self, track_position_id: int, salary_level_id: int) -> Dict[str, float]:
        """
        Price a (track position, interlevel) pair.

        Raises:
            NotFoundError: if either row does not exist
        """
        position = self.get_track_position(track_position_id)
        level = self.get_salary_level(salary_level_id)
        percentage = resolve_level_percentage(position, level)
        return {
            "baseSalary": position.base_salary,
            "levelPercentage": percentage,
            "calculatedSalary": calculate_salary(position.base_salary, percentage),
        }

    def level_table(self, track_position_id: int) -> List[Dict[str, Any]]:
        position = self.get_track_position(track_position_id)
        levels = self.db.query(SalaryLevel).order_by(SalaryLevel.order_index).all()
        return build_level_table(position, levels)

    def user_calculated_salary(self, position: Optional[TrackPosition], level: Optional[SalaryLevel],
                               fallback: Optional[float]) -> Optional[float]:
        """Salary implied by a user's placement, or their stored salary when unplaced."""
        if position is None or level is None:
            return fallback
        return calculate_salary(position.base_salary, resolve_level_percentage(position, level))
