from typing import Optional

from sqlalchemy.orm import Session

from hrtalent.models.notification import Notification


class NotificationService:
    @staticmethod
    def create_notification(
        db: Session,
        user_id: int,
        title: str,
        message: str,
        category: str = "general",
        link: Optional[str] = None,
    ) -> Notification:
        """
        Stage an in-app notification. The caller owns the commit so the
        notification is only visible once the triggering action persists.
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            category=category,
            link=link,
        )
        db.add(notification)
        return notification

    @staticmethod
    def notify_progression(db: Session, user_id: int, progression_type: str, new_salary: float):
        return NotificationService.create_notification(
            db,
            user_id,
            title="Progressão de carreira registrada",
            message=f"Sua progressão ({progression_type}) foi registrada. Novo salário: {new_salary:.2f}",
            category="progression",
            link="/salary/history",
        )

    @staticmethod
    def notify_consensus(db: Session, user_id: int, nine_box_position: str):
        return NotificationService.create_notification(
            db,
            user_id,
            title="Consenso concluído",
            message=f"Sua avaliação de consenso foi concluída. Posição nine-box: {nine_box_position}",
            category="consensus",
        )

    @staticmethod
    def notify_pdi(db: Session, user_id: int):
        return NotificationService.create_notification(
            db,
            user_id,
            title="Novo PDI disponível",
            message="Seu plano de desenvolvimento individual foi atualizado.",
            category="pdi",
            link="/pdi",
        )
