# schemas/quiz.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, field_validator, model_validator

REQUIRED_LABELS = ("A", "B", "C", "D")


def _as_text(v):
    # older documents stored ids and choice texts as numbers
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


def _choices_as_text(v):
    if isinstance(v, dict):
        return {k: _as_text(t) for k, t in v.items()}
    return v


class Question(BaseModel):
    id: str
    pergunta: str
    opcoes: Dict[str, str]
    respostaCorreta: str
    materia: str
    nivel: Optional[str] = None
    explicacao: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _as_text(v)

    @field_validator("opcoes", mode="before")
    @classmethod
    def choices_as_text(cls, v):
        return _choices_as_text(v)

    @field_validator("materia")
    @classmethod
    def materia_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def answer_is_a_choice(self) -> "Question":
        if self.respostaCorreta not in self.opcoes:
            raise ValueError(
                f"respostaCorreta {self.respostaCorreta!r} is not one of {sorted(self.opcoes)}"
            )
        return self


class QuestionCreate(BaseModel):
    id: Optional[str] = None
    pergunta: str
    opcoes: Dict[str, str]
    respostaCorreta: str
    materia: str
    nivel: Optional[str] = None
    explicacao: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _as_text(v)

    @field_validator("opcoes", mode="before")
    @classmethod
    def choices_as_text(cls, v):
        return _choices_as_text(v)

    @field_validator("pergunta", "materia")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("respostaCorreta")
    @classmethod
    def upper_label(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("nivel", "explicacao")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("opcoes")
    @classmethod
    def four_choices(cls, v: Dict[str, str]) -> Dict[str, str]:
        opts = {str(k).strip().upper(): str(t).strip() for k, t in v.items()}
        missing = [k for k in REQUIRED_LABELS if not opts.get(k)]
        if missing:
            raise ValueError(f"opcoes must contain non-empty choices {list(REQUIRED_LABELS)}; missing {missing}")
        return opts

    @model_validator(mode="after")
    def answer_is_a_choice(self) -> "QuestionCreate":
        if self.respostaCorreta not in REQUIRED_LABELS:
            raise ValueError(f"respostaCorreta must be one of {list(REQUIRED_LABELS)}")
        return self


class VerifyRequest(BaseModel):
    perguntaId: str
    resposta: str
    materia: Optional[str] = None
    nivel: Optional[str] = None

    @field_validator("perguntaId", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return _as_text(v)

    @field_validator("resposta")
    @classmethod
    def answer_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("resposta required")
        return v


class VerifyResult(BaseModel):
    estaCorreta: bool
    respostaCorreta: str
    explicacao: Optional[str] = None


class VerifyResponse(BaseModel):
    success: bool = True
    data: VerifyResult


class NamesResponse(BaseModel):
    success: bool = True
    data: List[str]
