from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from hrtalent.core.exceptions import AppException, NotFoundError
from hrtalent.models.consensus import ConsensusMeeting, ConsensusStatus
from hrtalent.models.evaluation import EvaluationType
from hrtalent.models.user import User
from hrtalent.services.audit import AuditService
from hrtalent.services.base import BaseService
from hrtalent.services.evaluation_service import EvaluationService
from hrtalent.services.nine_box import classify, position_number
from hrtalent.services.notification import NotificationService


class ConsensusService(BaseService):
    def get_meeting(self, meeting_id: int) -> ConsensusMeeting:
        meeting = self.db.get(ConsensusMeeting, meeting_id)
        if meeting is None:
            raise NotFoundError("Consensus meeting", meeting_id)
        return meeting

    def create_meeting(self, employee_id: int, cycle_id: Optional[int] = None,
                       meeting_date: Optional[datetime] = None, notes: Optional[str] = None) -> ConsensusMeeting:
        """Schedule a meeting, linking the cycle's self and leader evaluations when they exist."""
        if self.db.get(User, employee_id) is None:
            raise NotFoundError("Employee", employee_id)

        evaluations = EvaluationService(self.db)
        self_eval = evaluations.find_existing(cycle_id, employee_id, EvaluationType.SELF.value) if cycle_id else None
        leader_eval = evaluations.find_existing(cycle_id, employee_id, EvaluationType.LEADER.value) if cycle_id else None

        meeting = ConsensusMeeting(
            cycle_id=cycle_id,
            employee_id=employee_id,
            self_evaluation_id=self_eval.id if self_eval else None,
            leader_evaluation_id=leader_eval.id if leader_eval else None,
            meeting_date=meeting_date,
            notes=notes,
            status=ConsensusStatus.SCHEDULED.value,
            created_by=self.actor_id,
        )
        self.db.add(meeting)
        self.commit()
        self.db.refresh(meeting)
        self.log_info("Consensus meeting scheduled", meeting_id=meeting.id, employee_id=employee_id)
        return meeting

    def complete_meeting(self, meeting_id: int, performance_score: float, potential_score: float,
                         notes: Optional[str] = None, actor_role: Optional[str] = None) -> ConsensusMeeting:
        """Record the agreed scores and persist the derived nine-box label."""
        meeting = self.get_meeting(meeting_id)
        if meeting.status == ConsensusStatus.COMPLETED.value:
            raise AppException("Reunião de consenso já concluída", status_code=400,
                               error_code="CONSENSUS_ALREADY_COMPLETED")

        label = classify(performance_score, potential_score)
        try:
            meeting.consensus_performance_score = performance_score
            meeting.consensus_potential_score = potential_score
            meeting.nine_box_position = label
            if notes is not None:
                meeting.notes = notes
            meeting.status = ConsensusStatus.COMPLETED.value
            meeting.completed_at = datetime.now()
            self.db.flush()

            AuditService(self.db, self.actor_id).log_action(
                action="complete_consensus",
                entity_type="consensus_meeting",
                entity_id=meeting.id,
                user_id=self.actor_id,
                user_role=actor_role,
                details={
                    "performance": performance_score,
                    "potential": potential_score,
                    "nine_box_position": label,
                },
            )
            NotificationService.notify_consensus(self.db, meeting.employee_id, label)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(meeting)
        self.log_info("Consensus completed", meeting_id=meeting.id, nine_box_position=label)
        return meeting

    def nine_box_data(self, cycle_id: int) -> List[Dict[str, Any]]:
        meetings = (
            self.db.query(ConsensusMeeting)
            .options(joinedload(ConsensusMeeting.employee))
            .filter(
                ConsensusMeeting.cycle_id == cycle_id,
                ConsensusMeeting.status == ConsensusStatus.COMPLETED.value,
            )
            .order_by(ConsensusMeeting.id)
            .all()
        )
        return [
            {
                "meetingId": m.id,
                "employeeId": m.employee_id,
                "employeeName": m.employee.full_name if m.employee else None,
                "performanceScore": m.consensus_performance_score,
                "potentialScore": m.consensus_potential_score,
                "nineBoxPosition": m.nine_box_position,
                "gridPosition": position_number(m.consensus_performance_score, m.consensus_potential_score),
            }
            for m in meetings
        ]
