"""
Salary reporting and budget simulation.

Salaries are derived from each user's placement (track position + interlevel)
and fall back to the stored ``current_salary`` for unplaced users.
"""
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from hrtalent.core.config import settings
from hrtalent.models.career_track import CareerTrack, TrackPosition
from hrtalent.models.user import User
from hrtalent.services.base import BaseService
from hrtalent.services.salary_calculator import SalaryService

NO_DEPARTMENT = "Sem Departamento"
NO_POSITION = "Sem Cargo"


def _summarise(key_fields: Dict[str, Any], salaries: List[float]) -> Dict[str, Any]:
    total = sum(salaries)
    return {
        **key_fields,
        "count": len(salaries),
        "totalSalary": round(total, 2),
        "avgSalary": round(total / len(salaries), 2) if salaries else 0.0,
        "minSalary": min(salaries) if salaries else 0.0,
        "maxSalary": max(salaries) if salaries else 0.0,
    }


class SalaryReportService(BaseService):
    def __init__(self, db, actor_id: Optional[int] = None):
        super().__init__(db, actor_id)
        self.salaries = SalaryService(db)

    def _active_users(self) -> List[User]:
        return (
            self.db.query(User)
            .options(
                joinedload(User.department),
                joinedload(User.current_salary_level),
                joinedload(User.current_track_position).joinedload(TrackPosition.position),
                joinedload(User.current_track_position).joinedload(TrackPosition.salary_class),
            )
            .filter(User.is_active.is_(True))
            .order_by(User.id)
            .all()
        )

    def calculated_salary(self, user: User) -> float:
        return self.salaries.user_calculated_salary(
            user.current_track_position, user.current_salary_level, user.current_salary
        ) or 0.0

    def overview(self) -> Dict[str, Any]:
        users = self._active_users()
        salaries = [self.calculated_salary(u) for u in users]
        placed = [u for u in users if u.current_track_position_id]
        total = sum(salaries)
        return {
            "totalEmployees": len(users),
            "employeesWithTrack": len(placed),
            "employeesWithoutTrack": len(users) - len(placed),
            "totalPayroll": round(total, 2),
            "averageSalary": round(total / len(salaries), 2) if salaries else 0.0,
            "minSalary": min(salaries) if salaries else 0.0,
            "maxSalary": max(salaries) if salaries else 0.0,
            "activeTracks": self.db.query(CareerTrack).filter(CareerTrack.is_active.is_(True)).count(),
        }

    def by_department(self) -> List[Dict[str, Any]]:
        groups: "OrderedDict[str, List[float]]" = OrderedDict()
        for user in self._active_users():
            name = user.department.name if user.department else NO_DEPARTMENT
            groups.setdefault(name, []).append(self.calculated_salary(user))
        return [_summarise({"department": name}, values) for name, values in groups.items()]

    def by_position(self) -> List[Dict[str, Any]]:
        groups: "OrderedDict[tuple, List[float]]" = OrderedDict()
        for user in self._active_users():
            position = user.current_track_position
            job_name = position.position.name if position is not None and position.position else None
            class_code = position.salary_class.code if position is not None and position.salary_class else None
            groups.setdefault((job_name or user.position or NO_POSITION, class_code), []).append(
                self.calculated_salary(user)
            )
        return [
            _summarise({"position": name, "class": code}, values)
            for (name, code), values in groups.items()
        ]

    def _scenario_users(self, scenario: Dict[str, Any]) -> List[User]:
        kind = scenario.get("type")
        target = scenario.get("targetId")
        if kind == "individual":
            user = self.db.get(User, target) if target is not None else None
            return [user] if user is not None else []
        if kind == "department":
            return [u for u in self._active_users() if u.department_id == target]
        if kind == "global":
            return self._active_users()
        raise ValueError(f"Unknown scenario type: {kind}")

    def simulate_budget_impact(self, scenarios: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Cost impact of raise scenarios. A scenario is
        ``{"type": "individual"|"department"|"global", "targetId"?,
        "percentageIncrease"? | "absoluteIncrease"?}``; the absolute raise is
        per affected employee.
        """
        charges = settings.rules.labour_charges_factor
        results = []
        for scenario in scenarios:
            users = self._scenario_users(scenario)
            current = sum(self.calculated_salary(u) for u in users)
            if scenario.get("percentageIncrease"):
                new = current * (1 + scenario["percentageIncrease"] / 100)
            elif scenario.get("absoluteIncrease"):
                new = current + scenario["absoluteIncrease"] * len(users)
            else:
                new = current
            increase = new - current
            results.append({
                "scenario": scenario,
                "affectedCount": len(users),
                "currentCost": round(current, 2),
                "newCost": round(new, 2),
                "increase": round(increase, 2),
                "percentageIncrease": round(increase / current * 100, 2) if current else 0.0,
                "monthlyImpact": round(increase / 12, 2),
                "yearlyImpact": round(increase, 2),
                "totalCostWithCharges": round(increase * charges, 2),
            })

        self.log_info("Budget simulation", scenarios=len(results))
        return {
            "scenarios": results,
            "totalImpact": round(sum(r["increase"] for r in results), 2),
            "totalWithCharges": round(sum(r["totalCostWithCharges"] for r in results), 2),
        }
