"""
Career progression business rules.

Every public check returns a ValidationResult: errors block the operation,
warnings are surfaced to the caller but never block. Lookup faults inside a
check are logged and collapsed into a single synthetic error, so callers
always get a result value back instead of an exception.
"""
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import func
from sqlalchemy.orm import Session

from hrtalent.core.config import RuleSettings, settings
from hrtalent.core.schemas import ValidationResult
from hrtalent.models.career_track import CareerTrack, TrackPosition
from hrtalent.models.evaluation import Evaluation, EvaluationStatus
from hrtalent.models.progression import ProgressionHistory, ProgressionRule, ProgressionType
from hrtalent.models.salary import SalaryClass, SalaryLevel
from hrtalent.models.user import User
from hrtalent.services.base import BaseService
from hrtalent.services.salary_calculator import calculate_salary, resolve_level_percentage


class AdditionalRequirements(BaseModel):
    """Typed form of a progression rule's ``additional_requirements`` column."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    certifications: List[str] = Field(default_factory=list)
    minimum_projects: Optional[int] = Field(None, alias="minimumProjects")

    @classmethod
    def parse(cls, raw: Optional[Dict[str, Any]]) -> Optional["AdditionalRequirements"]:
        if not raw:
            return None
        return cls.model_validate(raw)


class ProgressionPolicy:
    """
    Extension points for rules whose data lives outside this system.

    The defaults are permissive except for vacancy (read from
    ``TrackPosition.vacancies``) and the same-class check used by horizontal
    moves. Subclass and pass an instance to ProgressionValidator to tighten.
    """

    def has_multifunctional_skills(self, user: User) -> bool:
        return True

    def has_vacancy(self, db: Session, position: TrackPosition) -> bool:
        if position.vacancies is None:
            return True
        occupied = (
            db.query(func.count(User.id))
            .filter(User.current_track_position_id == position.id, User.is_active.is_(True))
            .scalar()
        )
        return occupied < position.vacancies

    def is_same_class(self, from_position: TrackPosition, to_position: TrackPosition) -> bool:
        return from_position.class_id == to_position.class_id

    def missing_certifications(self, user: User, certifications: Sequence[str]) -> List[str]:
        return []

    def completed_project_count(self, user: User) -> Optional[int]:
        """Number of finished projects, or None when unknown (check skipped)."""
        return None

    def merit_criteria_missing(self, user: User) -> List[str]:
        return []

    def check_additional_requirements(self, user: User,
                                      requirements: AdditionalRequirements) -> ValidationResult:
        errors: List[str] = []
        if requirements.certifications:
            missing = self.missing_certifications(user, requirements.certifications)
            if missing:
                errors.append("Certificações necessárias: " + ", ".join(missing))
        if requirements.minimum_projects:
            done = self.completed_project_count(user)
            if done is not None and done < requirements.minimum_projects:
                errors.append(f"Projetos mínimos: {requirements.minimum_projects} (atual: {done})")
        return ValidationResult.from_messages(errors, [])


def months_between(start: Optional[Union[date, datetime]], end: Union[date, datetime]) -> int:
    """Whole calendar months from start to end; the day of month is ignored."""
    if start is None:
        return 0
    return (end.year - start.year) * 12 + end.month - start.month


class ProgressionValidator(BaseService):
    def __init__(
        self,
        db: Session,
        policy: Optional[ProgressionPolicy] = None,
        clock: Callable[[], datetime] = datetime.now,
        rules: Optional[RuleSettings] = None,
    ):
        super().__init__(db)
        self.policy = policy or ProgressionPolicy()
        self.clock = clock
        self.rules = rules or settings.rules

    # ------------------------------------------------------------------
    # Track assignment
    # ------------------------------------------------------------------
    def validate_track_assignment(self, user_id: int, track_position_id: int,
                                  salary_level_id: int) -> ValidationResult:
        try:
            return self._check_track_assignment(user_id, track_position_id, salary_level_id)
        except Exception:
            self._logger.exception(
                "Track assignment validation failed",
                extra={"user_id": user_id, "track_position_id": track_position_id},
            )
            return ValidationResult.failure("Erro ao validar atribuição")

    def _check_track_assignment(self, user_id, track_position_id, salary_level_id) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        user = self.db.get(User, user_id)
        position = self.db.get(TrackPosition, track_position_id)
        level = self.db.get(SalaryLevel, salary_level_id)

        if user is None:
            errors.append("Usuário não encontrado")
        if position is None:
            errors.append("Posição na trilha não encontrada")
        if level is None:
            errors.append("Nível salarial não encontrado")
        if errors:
            return ValidationResult.from_messages(errors, warnings)

        if not user.is_active:
            errors.append("Usuário inativo não pode ser atribuído a cargos")

        track = position.track
        if track is None or not track.is_active:
            errors.append("Trilha de carreira inativa")

        if track is not None and track.department_id and user.department_id \
                and user.department_id != track.department_id:
            warnings.append("Usuário sendo atribuído a trilha de outro departamento")

        if user.current_salary:
            new_salary = calculate_salary(position.base_salary, resolve_level_percentage(position, level))
            change = (new_salary - user.current_salary) / user.current_salary * 100
            if change > self.rules.salary_increase_warning_pct:
                warnings.append(f"Aumento salarial de {change:.1f}% - requer aprovação especial")
            if change < -self.rules.salary_decrease_error_pct:
                errors.append(f"Redução salarial de {abs(change):.1f}% não permitida")

        job = position.position
        if job is not None and job.is_multifunctional and not self.policy.has_multifunctional_skills(user):
            warnings.append("Cargo requer habilidades multifuncionais")

        return ValidationResult.from_messages(errors, warnings)

    # ------------------------------------------------------------------
    # Progression between positions
    # ------------------------------------------------------------------
    def validate_progression(self, user_id: int, from_position_id: Optional[int],
                             to_position_id: int, progression_type: str) -> ValidationResult:
        try:
            return self._check_progression(user_id, from_position_id, to_position_id, progression_type)
        except Exception:
            self._logger.exception(
                "Progression validation failed",
                extra={"user_id": user_id, "from": from_position_id, "to": to_position_id},
            )
            return ValidationResult.failure("Erro ao validar progressão")

    def _check_progression(self, user_id, from_position_id, to_position_id, progression_type) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        try:
            progression_type = ProgressionType(progression_type).value
        except ValueError:
            return ValidationResult.failure("Regra de progressão não encontrada")
        rule = self.find_rule(from_position_id, to_position_id, progression_type)
        if rule is None:
            return ValidationResult.failure("Regra de progressão não encontrada")

        user = self.db.get(User, user_id)
        if user is None:
            return ValidationResult.failure("Usuário não encontrado")

        if rule.min_time_months:
            months = months_between(user.position_start_date, self.clock())
            if months < rule.min_time_months:
                errors.append(f"Tempo mínimo no cargo: {rule.min_time_months} meses (atual: {months})")

        if rule.performance_requirement:
            last_score = self.last_performance_score(user_id)
            if not last_score or last_score < rule.performance_requirement:
                errors.append(
                    f"Performance mínima: {rule.performance_requirement} (atual: {last_score or 'N/A'})"
                )

        requirements = AdditionalRequirements.parse(rule.additional_requirements)
        if requirements is not None:
            extra = self.policy.check_additional_requirements(user, requirements)
            errors.extend(extra.errors)
            warnings.extend(extra.warnings)

        if progression_type == ProgressionType.VERTICAL.value:
            if not self.policy.has_vacancy(self.db, rule.to_position):
                warnings.append("Não há vagas disponíveis no cargo superior")
        elif progression_type == ProgressionType.HORIZONTAL.value:
            if not self.policy.is_same_class(rule.from_position, rule.to_position):
                errors.append("Progressão horizontal deve manter o mesmo nível hierárquico")
        elif progression_type == ProgressionType.MERIT.value:
            errors.extend(self.policy.merit_criteria_missing(user))

        return ValidationResult.from_messages(errors, warnings)

    # ------------------------------------------------------------------
    # Interlevel change
    # ------------------------------------------------------------------
    def validate_level_change(self, user_id: int, current_level_id: Optional[int],
                              new_level_id: int) -> ValidationResult:
        try:
            errors: List[str] = []
            warnings: List[str] = []

            current = self.db.get(SalaryLevel, current_level_id) if current_level_id else None
            new = self.db.get(SalaryLevel, new_level_id)
            if current is None or new is None:
                return ValidationResult.failure("Níveis salariais inválidos")

            step = new.order_index - current.order_index
            if step > 1:
                errors.append("Progressão de nível deve ser sequencial")
            if step < 0:
                warnings.append("Regressão de nível detectada - requer justificativa")

            last_change = self.last_progression_date(user_id)
            if last_change is not None:
                months = months_between(last_change, self.clock())
                if months < self.rules.level_change_cooldown_months:
                    warnings.append(f"Última mudança de nível há {months} meses")

            return ValidationResult.from_messages(errors, warnings)
        except Exception:
            self._logger.exception("Level change validation failed", extra={"user_id": user_id})
            return ValidationResult.failure("Erro ao validar mudança de nível")

    # ------------------------------------------------------------------
    # Structure checks
    # ------------------------------------------------------------------
    def validate_career_track(self, name: str, department_id: Optional[int],
                              positions: Optional[Sequence[Any]] = None) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []

        if department_id:
            existing = (
                self.db.query(CareerTrack.id)
                .filter(CareerTrack.department_id == department_id, CareerTrack.name == name)
                .first()
            )
            if existing:
                errors.append("Já existe uma trilha com este nome no departamento")

        if not positions:
            warnings.append("Trilha criada sem posições - adicione cargos")

        return ValidationResult.from_messages(errors, warnings)

    def validate_salary_structure(self, positions: Sequence[Dict[str, Any]]) -> ValidationResult:
        """
        positions: ``[{"class_id": ..., "base_salary": ...}]``. Entries are
        ranked by their salary class order; base salaries must strictly
        increase along that ranking and should differ by a minimum gap.
        """
        errors: List[str] = []
        warnings: List[str] = []

        class_ids = {p["class_id"] for p in positions}
        order = dict(
            self.db.query(SalaryClass.id, SalaryClass.order_index)
            .filter(SalaryClass.id.in_(class_ids))
            .all()
        ) if class_ids else {}
        ranked = sorted(positions, key=lambda p: order.get(p["class_id"], 0))

        for previous, current in zip(ranked, ranked[1:]):
            if current["base_salary"] <= previous["base_salary"]:
                errors.append("Salários devem ser progressivos entre classes")
                break

        for previous, current in zip(ranked, ranked[1:]):
            if not previous["base_salary"]:
                continue
            gap = (current["base_salary"] - previous["base_salary"]) / previous["base_salary"] * 100
            if gap < self.rules.structure_min_gap_pct:
                warnings.append(f"Diferença de apenas {gap:.1f}% entre classes")

        return ValidationResult.from_messages(errors, warnings)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def find_rule(self, from_position_id, to_position_id, progression_type: str) -> Optional[ProgressionRule]:
        return (
            self.db.query(ProgressionRule)
            .filter(
                ProgressionRule.from_position_id == from_position_id,
                ProgressionRule.to_position_id == to_position_id,
                ProgressionRule.progression_type == progression_type,
            )
            .first()
        )

    def last_performance_score(self, user_id: int) -> Optional[float]:
        """Final score of the most recent completed evaluation."""
        row = (
            self.db.query(Evaluation.final_score)
            .filter(
                Evaluation.employee_id == user_id,
                Evaluation.status == EvaluationStatus.COMPLETED.value,
            )
            .order_by(Evaluation.evaluation_date.desc(), Evaluation.id.desc())
            .first()
        )
        return row[0] if row else None

    def last_progression_date(self, user_id: int) -> Optional[date]:
        row = (
            self.db.query(ProgressionHistory.progression_date)
            .filter(ProgressionHistory.user_id == user_id)
            .order_by(ProgressionHistory.progression_date.desc())
            .first()
        )
        return row[0] if row else None
