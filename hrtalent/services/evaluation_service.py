from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from hrtalent.core.exceptions import AppException, NotFoundError
from hrtalent.models.evaluation import (
    Evaluation, EvaluationCompetency, EvaluationCycle, EvaluationStatus, EvaluationType,
)
from hrtalent.models.user import User
from hrtalent.services.base import BaseService
from hrtalent.services.scoring import derive_scores

CURRENT_CYCLE_STATUSES = ("active", "open")


class EvaluationService(BaseService):
    """Evaluation cycles plus self- and leader-evaluations with derived scores."""

    # --- Cycles ---------------------------------------------------------
    def list_cycles(self) -> List[EvaluationCycle]:
        return self.db.query(EvaluationCycle).order_by(EvaluationCycle.start_date.desc()).all()

    def current_cycle(self, today: Optional[date] = None) -> Optional[EvaluationCycle]:
        today = today or date.today()
        return (
            self.db.query(EvaluationCycle)
            .filter(
                EvaluationCycle.start_date <= today,
                EvaluationCycle.end_date >= today,
                EvaluationCycle.status.in_(CURRENT_CYCLE_STATUSES),
            )
            .order_by(EvaluationCycle.id.desc())
            .first()
        )

    def create_cycle(self, data: Dict[str, Any]) -> EvaluationCycle:
        if data["end_date"] < data["start_date"]:
            raise AppException("A data final deve ser posterior à data inicial", status_code=400)
        cycle = EvaluationCycle(**data, created_by=self.actor_id)
        self.db.add(cycle)
        self.commit()
        self.db.refresh(cycle)
        self.log_info("Evaluation cycle created", cycle_id=cycle.id)
        return cycle

    def set_cycle_status(self, cycle_id: int, status: str) -> EvaluationCycle:
        cycle = self.db.get(EvaluationCycle, cycle_id)
        if cycle is None:
            raise NotFoundError("Evaluation cycle", cycle_id)
        cycle.status = status
        self.commit()
        self.db.refresh(cycle)
        return cycle

    # --- Evaluations ----------------------------------------------------
    def find_existing(self, cycle_id: Optional[int], employee_id: int,
                      evaluation_type: str) -> Optional[Evaluation]:
        return (
            self.db.query(Evaluation)
            .filter(
                Evaluation.cycle_id == cycle_id,
                Evaluation.employee_id == employee_id,
                Evaluation.evaluation_type == EvaluationType(evaluation_type).value,
            )
            .first()
        )

    def create_evaluation(
        self,
        evaluation_type: str,
        employee_id: int,
        evaluator_id: int,
        competencies: List[Dict[str, Any]],
        cycle_id: Optional[int] = None,
        status: str = EvaluationStatus.COMPLETED.value,
        evaluation_date: Optional[date] = None,
        potential_score: Optional[float] = None,
        feedback: Optional[str] = None,
    ) -> Evaluation:
        """
        Persist an evaluation and its competencies. Category and final scores
        are always derived from the competencies, never taken from the client.
        """
        evaluation_type = EvaluationType(evaluation_type).value
        if self.db.get(User, employee_id) is None:
            raise NotFoundError("Employee", employee_id)
        if cycle_id is not None:
            if self.db.get(EvaluationCycle, cycle_id) is None:
                raise NotFoundError("Evaluation cycle", cycle_id)
            if self.find_existing(cycle_id, employee_id, evaluation_type) is not None:
                raise AppException(
                    "Já existe uma avaliação deste tipo para o colaborador neste ciclo",
                    status_code=400,
                    error_code="DUPLICATE_EVALUATION",
                )

        rows = [EvaluationCompetency(**c) for c in competencies]
        scores = derive_scores(rows)

        evaluation = Evaluation(
            cycle_id=cycle_id,
            employee_id=employee_id,
            evaluator_id=evaluator_id,
            evaluation_type=evaluation_type,
            status=status,
            evaluation_date=evaluation_date or date.today(),
            potential_score=potential_score if evaluation_type == EvaluationType.LEADER.value else None,
            feedback=feedback,
            competencies=rows,
            **scores.model_dump(),
        )
        self.db.add(evaluation)
        self.commit()
        self.db.refresh(evaluation)
        self.log_info("Evaluation created", evaluation_id=evaluation.id,
                      evaluation_type=evaluation_type, final_score=evaluation.final_score)
        return evaluation

    def list_for_employee(self, employee_id: int) -> List[Evaluation]:
        return (
            self.db.query(Evaluation)
            .options(selectinload(Evaluation.competencies))
            .filter(Evaluation.employee_id == employee_id)
            .order_by(Evaluation.evaluation_date.desc(), Evaluation.id.desc())
            .all()
        )

    def get(self, evaluation_id: int) -> Evaluation:
        evaluation = self.db.get(Evaluation, evaluation_id)
        if evaluation is None:
            raise NotFoundError("Evaluation", evaluation_id)
        return evaluation
