import pytest
from hrtalent.services.nine_box import (
    NINE_BOX_LABELS, UNCLASSIFIED, bucket, classify, position_number,
)

GRID = [x / 4 for x in range(0, 21)]  # 0.0 .. 5.0 in quarter steps

def test_classifier_is_total_over_score_range():
    labels = set(NINE_BOX_LABELS.values())
    for performance in GRID:
        for potential in GRID:
            label = classify(performance, potential)
            assert label in labels
            assert label != UNCLASSIFIED

def test_every_label_is_reachable():
    seen = {classify(p, q) for p in GRID for q in GRID}
    assert seen == set(NINE_BOX_LABELS.values())

@pytest.mark.parametrize("score,expected", [(0, "low"), (2, "low"), (2.01, "medium"), (3, "medium"), (3.01, "high"), (5, "high")])
def test_bucket_boundaries(score, expected):
    assert bucket(score) == expected

@pytest.mark.parametrize("performance,potential,label", [
    (5, 5, "Estrela"),
    (1, 1, "Questionável"),
    (3, 3, "Mantenedor"),
    (1, 5, "Enigma"),
    (5, 1, "Especialista"),
    (4, 2.5, "Alto Performance"),
])
def test_known_placements(performance, potential, label):
    assert classify(performance, potential) == label

def test_unmapped_combination_falls_back(monkeypatch):
    monkeypatch.setattr("hrtalent.services.nine_box.NINE_BOX_LABELS", {})
    assert classify(5, 5) == UNCLASSIFIED

@pytest.mark.parametrize("performance,potential,cell", [(1, 1, 1), (5, 1, 3), (1, 5, 7), (5, 5, 9), (3, 3, 5)])
def test_grid_position_numbers(performance, potential, cell):
    assert position_number(performance, potential) == cell
