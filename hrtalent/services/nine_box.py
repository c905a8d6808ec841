"""
Nine-box talent grid.

Each axis is bucketed as low (<= 2), medium (<= 3) or high (> 3) and the
(performance, potential) pair is looked up in a fixed table of labels.
"""
from typing import Dict, Tuple

UNCLASSIFIED = "Não classificado"

LOW = "low"
MEDIUM = "medium"
HIGH = "high"

NINE_BOX_LABELS: Dict[Tuple[str, str], str] = {
    (LOW, LOW): "Questionável",
    (LOW, MEDIUM): "Novo/Desenvolvimento",
    (LOW, HIGH): "Enigma",
    (MEDIUM, LOW): "Eficaz",
    (MEDIUM, MEDIUM): "Mantenedor",
    (MEDIUM, HIGH): "Forte Performance",
    (HIGH, LOW): "Especialista",
    (HIGH, MEDIUM): "Alto Performance",
    (HIGH, HIGH): "Estrela",
}

_BUCKET_INDEX = {LOW: 0, MEDIUM: 1, HIGH: 2}


def bucket(score: float) -> str:
    if score <= 2:
        return LOW
    if score <= 3:
        return MEDIUM
    return HIGH


def classify(performance: float, potential: float) -> str:
    """Nine-box label for a consensus (performance, potential) pair."""
    return NINE_BOX_LABELS.get((bucket(performance), bucket(potential)), UNCLASSIFIED)


def position_number(performance: float, potential: float) -> int:
    """
    Grid cell 1-9, potential as rows and performance as columns:

        7 8 9
        4 5 6
        1 2 3
    """
    row = _BUCKET_INDEX[bucket(potential)]
    col = _BUCKET_INDEX[bucket(performance)]
    return row * 3 + col + 1
