from __future__ import annotations

import random
from typing import Optional

from fastapi import APIRouter, Depends, Query

from answers import verify_answer
from bank import QuestionStore
from deps.stores import SettingsDep, get_question_store, get_rng
from errors import NotFound
from schemas.quiz import NamesResponse, QuestionCreate, VerifyRequest, VerifyResponse
from selection import select

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None or not v.strip():
        return None
    return v


@router.get("/perguntas")
def list_questions(
    settings: SettingsDep,
    materia: Optional[str] = None,
    nivel: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    store: QuestionStore = Depends(get_question_store),
    rng: random.Random = Depends(get_rng),
):
    materia, nivel = _blank_to_none(materia), _blank_to_none(nivel)
    if materia:
        qs = store.questions(materia, nivel)
    else:
        qs = store.all_questions(nivel)

    # the store already scoped qs to the subject
    sel = select(qs, settings.quiz, level=nivel, limit=limit, rng=rng)
    if materia and not sel.available:
        raise NotFound(f"Nenhuma pergunta encontrada para {materia}", code="sem_perguntas")
    return {"success": True, "data": sel.data, "total": len(sel.data), "disponiveis": sel.available}


@router.post("/perguntas", status_code=201)
def create_question(req: QuestionCreate, store: QuestionStore = Depends(get_question_store)):
    created = store.append(req.model_dump(exclude_none=True))
    return {"success": True, "data": created}


@router.post("/verificar-resposta", response_model=VerifyResponse)
def check_answer(req: VerifyRequest, store: QuestionStore = Depends(get_question_store)):
    result = verify_answer(
        store,
        req.perguntaId,
        req.resposta,
        subject=_blank_to_none(req.materia),
        level=_blank_to_none(req.nivel),
    )
    return {"success": True, "data": result}


@router.get("/materias", response_model=NamesResponse)
def list_subjects(nivel: Optional[str] = None, store: QuestionStore = Depends(get_question_store)):
    return {"success": True, "data": store.subjects(_blank_to_none(nivel))}


@router.get("/niveis", response_model=NamesResponse)
def list_levels(settings: SettingsDep):
    return {"success": True, "data": list(settings.quiz.levels)}


@router.get("/estatisticas")
def statistics(nivel: Optional[str] = None, store: QuestionStore = Depends(get_question_store)):
    return {"success": True, "data": store.statistics(_blank_to_none(nivel))}
