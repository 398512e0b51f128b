from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from bank import QuestionStore
from errors import NotFound

logger = logging.getLogger("estuda-api.answers")


def _label(value: Any) -> str:
    return str(value).strip().upper()


def verify_answer(
    store: QuestionStore,
    question_id: str,
    answer: str,
    subject: Optional[str] = None,
    level: Optional[str] = None,
) -> Dict[str, Any]:
    q = store.find(question_id, subject=subject, level=level)
    if q is None:
        raise NotFound("Pergunta não encontrada", code="pergunta_desconhecida")

    correct = _label(q["respostaCorreta"])
    is_correct = _label(answer) == correct
    logger.debug("Question %s answered %r (correct=%s)", q["id"], answer, is_correct)
    return {
        "estaCorreta": is_correct,
        "respostaCorreta": correct,
        "explicacao": q.get("explicacao"),
    }
