from __future__ import annotations

import random
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

from config import QuizPolicy
from errors import ValidationFailed

# stripped from listings when answers are verified server side
_ANSWER_FIELDS = ("respostaCorreta", "explicacao")


class Selection(NamedTuple):
    data: List[Dict[str, Any]]
    available: int


def _key(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip().lower()
    return s or None


def filter_questions(
    questions: Iterable[Dict[str, Any]],
    policy: QuizPolicy,
    subject: Optional[str] = None,
    level: Optional[str] = None,
) -> List[Dict[str, Any]]:
    want_subject = _key(subject)
    want_level = policy.normalize_level(level)

    out = []
    for q in questions:
        if want_subject is not None and _key(q.get("materia")) != want_subject:
            continue
        if want_level is not None and policy.normalize_level(q.get("nivel")) != want_level:
            continue
        out.append(q)
    return out


def effective_limit(limit: Optional[int], policy: QuizPolicy) -> int:
    n = policy.default_limit if limit is None else limit
    if n < 1:
        raise ValidationFailed("limit deve ser maior ou igual a 1")
    if policy.max_limit > 0:
        n = min(n, policy.max_limit)
    return n


def present(q: Dict[str, Any], policy: QuizPolicy) -> Dict[str, Any]:
    if policy.expose_answers:
        return dict(q)
    return {k: v for k, v in q.items() if k not in _ANSWER_FIELDS}


def select(
    questions: Iterable[Dict[str, Any]],
    policy: QuizPolicy,
    subject: Optional[str] = None,
    level: Optional[str] = None,
    limit: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Selection:
    """Filter, shuffle and truncate a question collection.

    The shuffle is uniform and unseeded unless ``rng`` is supplied, so two
    calls over the same data normally return different orderings.
    """
    pool = filter_questions(questions, policy, subject=subject, level=level)
    n = effective_limit(limit, policy)
    (rng or random.Random()).shuffle(pool)
    return Selection([present(q, policy) for q in pool[:n]], len(pool))
