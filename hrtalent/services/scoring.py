"""
Competency scoring shared by self- and leader-evaluations.

Category scores average only the competencies of that category, while the
final score averages every competency regardless of category. A mixed
evaluation therefore does not have a final score equal to the mean of its
category scores; callers rely on this exact behaviour.
"""
from typing import Iterable, Sequence, Union

from pydantic import BaseModel

from hrtalent.models.evaluation import CompetencyCategory


class EvaluationScores(BaseModel):
    technical_score: float
    behavioral_score: float
    deliveries_score: float
    final_score: float


def _mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def category_score(competencies: Iterable, category: Union[str, CompetencyCategory]) -> float:
    """Average score of the competencies in `category`, 0 when there are none."""
    wanted = CompetencyCategory(category).value
    return _mean([c.score or 0 for c in competencies if c.category == wanted])


def final_score(competencies: Iterable) -> float:
    """Average score of all competencies, 0 when the list is empty."""
    return _mean([c.score or 0 for c in competencies])


def derive_scores(competencies: Iterable) -> EvaluationScores:
    competencies = list(competencies)
    return EvaluationScores(
        technical_score=category_score(competencies, CompetencyCategory.TECHNICAL),
        behavioral_score=category_score(competencies, CompetencyCategory.BEHAVIORAL),
        deliveries_score=category_score(competencies, CompetencyCategory.DELIVERIES),
        final_score=final_score(competencies),
    )
