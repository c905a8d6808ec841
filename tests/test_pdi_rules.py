import pytest
from hrtalent.services import pdi_rules

def _item(**overrides):
    item = {
        "competencia": "Comunicação",
        "resultadosEsperados": "Apresentar resultados ao time",
        "comoDesenvolver": "Curso de oratória",
        "calendarizacao": "1º semestre",
        "status": "1",
        "observacao": "",
        "prazo": "curto",
    }
    item.update(overrides)
    return item

def test_rejects_empty_list():
    assert pdi_rules.validate_items([]) is False
    assert pdi_rules.validate_items(None) is False

def test_accepts_single_short_term_item():
    assert pdi_rules.validate_items([_item()]) is True

def test_rejects_unknown_status():
    assert pdi_rules.validate_items([_item(status="6")]) is False

def test_rejects_unknown_term():
    assert pdi_rules.validate_items([_item(prazo="anual")]) is False

@pytest.mark.parametrize("field", pdi_rules.REQUIRED_TEXT_FIELDS)
def test_rejects_blank_required_text(field):
    assert pdi_rules.validate_items([_item(**{field: ""})]) is False

def test_one_bad_item_rejects_the_list():
    assert pdi_rules.validate_items([_item(), _item(prazo="longo", status="9")]) is False

def test_normalize_grouped_payload_fills_term_and_defaults():
    raw = {
        "curtosPrazos": [{"competencia": "SQL", "comoDesenvolver": "Curso",
                          "resultadosEsperados": "Consultas", "calendarizacao": "Q1"}],
        "longosPrazos": [{"competencia": "Liderança", "status": "3"}],
    }
    items = pdi_rules.normalize_payload(raw)
    assert [i["prazo"] for i in items] == ["curto", "longo"]
    assert items[0]["status"] == "1"
    assert items[1]["status"] == "3"
    assert items[1]["comoDesenvolver"] == ""
    assert all(i["id"] for i in items)

def test_normalize_prefers_flat_items():
    items = pdi_rules.normalize_payload({"items": [_item()], "mediosPrazos": [_item()]})
    assert len(items) == 1

def test_organize_and_stats():
    items = [_item(status="5"), _item(prazo="medio", status="5"), _item(prazo="longo", status="2"), _item(status="3")]
    grouped = pdi_rules.organize_by_term(items)
    assert len(grouped["curtosPrazos"]) == 2
    assert len(grouped["mediosPrazos"]) == 1
    assert len(grouped["longosPrazos"]) == 1

    stats = pdi_rules.calculate_stats(items)
    assert stats["total"] == 4
    assert stats["concluidos"] == 2
    assert stats["iniciados"] == 1
    assert stats["emAndamento"] == 1
    assert stats["naoIniciados"] == 0
    assert stats["percentualConclusao"] == 50

def test_stats_for_empty_plan():
    assert pdi_rules.calculate_stats([])["percentualConclusao"] == 0
