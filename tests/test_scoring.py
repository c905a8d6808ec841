import pytest
from hrtalent.models.evaluation import EvaluationCompetency
from hrtalent.services.scoring import category_score, derive_scores, final_score

def _comp(category, score, name="c"):
    return EvaluationCompetency(name=name, category=category, score=score)

@pytest.mark.parametrize("category", ["technical", "behavioral", "deliveries"])
def test_empty_category_scores_zero(category):
    assert category_score([], category) == 0

def test_empty_final_score_is_zero():
    assert final_score([]) == 0

@pytest.mark.parametrize("score", [1.0, 2.5, 3.75, 5.0])
def test_identical_scores_average_to_themselves(score):
    comps = [_comp("technical", score), _comp("behavioral", score), _comp("deliveries", score)]
    assert final_score(comps) == score

def test_category_only_averages_its_own_entries():
    comps = [_comp("technical", 5), _comp("technical", 3), _comp("behavioral", 1)]
    assert category_score(comps, "technical") == 4.0
    assert category_score(comps, "behavioral") == 1.0
    assert category_score(comps, "deliveries") == 0

def test_final_score_averages_all_entries_not_categories():
    comps = [_comp("technical", 5), _comp("technical", 3), _comp("behavioral", 1)]
    scores = derive_scores(comps)
    # (5 + 3 + 1) / 3, not (4 + 1) / 2
    assert scores.final_score == 3.0
    assert scores.technical_score == 4.0
    assert scores.behavioral_score == 1.0
    assert scores.deliveries_score == 0.0

def test_scores_round_to_two_decimals():
    comps = [_comp("deliveries", 4), _comp("deliveries", 4), _comp("deliveries", 5)]
    assert category_score(comps, "deliveries") == 4.33
    assert final_score(comps) == 4.33

def test_unknown_category_is_rejected():
    with pytest.raises(ValueError):
        category_score([], "leadership")
