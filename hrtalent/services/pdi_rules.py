"""
PDI (individual development plan) item rules and helpers.

Items are plain mappings as they arrive from the client and as they are
stored in the plan's JSON column:

    {"competencia", "resultadosEsperados", "comoDesenvolver", "calendarizacao",
     "status": "1".."5", "observacao", "prazo": "curto"|"medio"|"longo"}
"""
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

VALID_STATUSES = ("1", "2", "3", "4", "5")
VALID_TERMS = ("curto", "medio", "longo")
REQUIRED_TEXT_FIELDS = ("competencia", "resultadosEsperados", "comoDesenvolver", "calendarizacao")

# Grouped payload keys sent by the PDI form, mapped to the term they imply
GROUPED_KEYS = {
    "curtosPrazos": "curto",
    "mediosPrazos": "medio",
    "longosPrazos": "longo",
}

STATUS_LABELS = {
    "1": "naoIniciados",
    "2": "iniciados",
    "3": "emAndamento",
    "4": "quaseConcluidos",
    "5": "concluidos",
}


def validate_item(item: Mapping[str, Any]) -> bool:
    """True when every required text is filled and status/term are recognised."""
    is_valid = (
        all(item.get(field) for field in REQUIRED_TEXT_FIELDS)
        and item.get("status") in VALID_STATUSES
        and item.get("prazo") in VALID_TERMS
    )
    if not is_valid:
        logger.debug(
            "Invalid PDI item",
            extra={
                "missing": [f for f in REQUIRED_TEXT_FIELDS if not item.get(f)],
                "status": item.get("status"),
                "prazo": item.get("prazo"),
            },
        )
    return is_valid


def has_recognised_term(items: Sequence[Mapping[str, Any]]) -> bool:
    return any(item.get("prazo") in VALID_TERMS for item in items)


def validate_items(items: Optional[Sequence[Mapping[str, Any]]]) -> bool:
    """
    A plan is valid when it has items, every item is valid and at least one
    item falls in a recognised term. The last guard is kept as its own check.
    """
    if not items:
        return False
    if not all(validate_item(item) for item in items):
        return False
    if not has_recognised_term(items):
        return False
    return True


def normalize_payload(raw: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """
    Accepts either {"items": [...]} or the grouped {"curtosPrazos": [...], ...}
    form and returns a flat item list. Grouped items get their term from the
    group and defaults for missing fields; items from `items` pass through.
    """
    if isinstance(raw.get("items"), list) and raw["items"]:
        return [dict(item) for item in raw["items"]]

    items: List[Dict[str, Any]] = []
    for key, term in GROUPED_KEYS.items():
        for entry in raw.get(key) or []:
            items.append({
                "id": entry.get("id") or f"{term}_{uuid.uuid4().hex[:12]}",
                "competencia": entry.get("competencia") or "",
                "comoDesenvolver": entry.get("comoDesenvolver") or "",
                "resultadosEsperados": entry.get("resultadosEsperados") or "",
                "calendarizacao": entry.get("calendarizacao") or "",
                "status": entry.get("status") or "1",
                "observacao": entry.get("observacao") or "",
                "prazo": term,
            })
    return items


def organize_by_term(items: Sequence[Mapping[str, Any]]) -> Dict[str, List[Mapping[str, Any]]]:
    return {
        key: [item for item in items if item.get("prazo") == term]
        for key, term in GROUPED_KEYS.items()
    }


def calculate_stats(items: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
    total = len(items)
    stats = {"total": total}
    for status, label in STATUS_LABELS.items():
        stats[label] = sum(1 for item in items if item.get("status") == status)
    stats["percentualConclusao"] = round(stats["concluidos"] / total * 100) if total else 0
    return stats
