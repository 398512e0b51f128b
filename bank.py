# bank.py

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from pydantic import ValidationError

from config import QuizPolicy
from errors import NotFound, ValidationFailed
from schemas.quiz import Question, QuestionCreate
from selection import filter_questions
from storage import load_for_write, read_items, write_document

logger = logging.getLogger("estuda-api.bank")

DOC_KEY = "perguntas"
_NAME_RE = re.compile(r"^\w[\w -]*$")
_NO_LEVEL = "sem_nivel"


def path_safe(name: str) -> bool:
    return _NAME_RE.fullmatch(name) is not None


def check_name(value: str, what: str) -> str:
    """Lower-case a subject/level name and make sure it is safe inside a path."""
    s = str(value).strip().lower()
    if not path_safe(s):
        raise ValidationFailed(f"{what} inválido: {value!r}")
    return s


def _valid_questions(
    items: Iterable[Dict[str, Any]], origin: Path, defaults: Mapping[str, Any]
) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for raw in items:
        try:
            q = Question(**{**defaults, **raw}).model_dump()
        except ValidationError as e:
            # Skip invalid records instead of failing the whole document
            logger.warning("Skipping invalid question %r in %s: %s", raw.get("id"), origin, e)
            continue
        out.append(q)
    return out


def _stems(directory: Path) -> Set[str]:
    if not directory.is_dir():
        return set()
    return {p.stem.lower() for p in directory.glob("*.json") if p.is_file()}


class QuestionSource:
    """One on-disk layout of question collections."""

    name = "base"

    def __init__(self, data_dir: Path, policy: QuizPolicy):
        self.data_dir = data_dir
        self.quiz_dir = data_dir / "quiz"
        self.policy = policy

    def present(self) -> bool:
        raise NotImplementedError

    def has_subject(self, subject: str, level: Optional[str] = None) -> bool:
        raise NotImplementedError

    def load(self, subject: Optional[str], level: Optional[str] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def subjects(self, level: Optional[str] = None) -> Set[str]:
        raise NotImplementedError


class PerSubjectFileSource(QuestionSource):
    """``data/quiz/<subject>.json``"""

    name = "per_subject"

    def path(self, subject: str) -> Path:
        return self.quiz_dir / f"{subject}.json"

    def present(self) -> bool:
        return bool(_stems(self.quiz_dir))

    def has_subject(self, subject, level=None):
        return self.path(subject).is_file()

    def load(self, subject, level=None):
        stems = [subject] if subject else sorted(_stems(self.quiz_dir))
        out: List[Dict[str, Any]] = []
        for s in stems:
            p = self.path(s)
            out.extend(_valid_questions(read_items(p, DOC_KEY), p, {"materia": s}))
        return out

    def subjects(self, level=None):
        stems = _stems(self.quiz_dir)
        if level is None:
            return stems
        return {s for s in stems if filter_questions(self.load(s), self.policy, level=level)}


class PerLevelPerSubjectFileSource(QuestionSource):
    """``data/quiz/<level>/<subject>.json``"""

    name = "per_level"

    def path(self, level: str, subject: str) -> Path:
        return self.quiz_dir / level / f"{subject}.json"

    def _levels(self, level: Optional[str]) -> Tuple[str, ...]:
        return (level,) if level else self.policy.levels

    def present(self) -> bool:
        return any((self.quiz_dir / lv).is_dir() for lv in self.policy.levels)

    def has_subject(self, subject, level=None):
        return any(self.path(lv, subject).is_file() for lv in self._levels(level))

    def load(self, subject, level=None):
        out: List[Dict[str, Any]] = []
        for lv in self._levels(level):
            stems = [subject] if subject else sorted(_stems(self.quiz_dir / lv))
            for s in stems:
                p = self.path(lv, s)
                defaults = {"materia": s, "nivel": lv}
                out.extend(_valid_questions(read_items(p, DOC_KEY), p, defaults))
        return out

    def subjects(self, level=None):
        found: Set[str] = set()
        for lv in self._levels(level):
            found |= _stems(self.quiz_dir / lv)
        return found


class SingleFileSource(QuestionSource):
    """``data/quiz.json`` holding every subject."""

    name = "single_file"

    @property
    def path(self) -> Path:
        return self.data_dir / "quiz.json"

    def present(self) -> bool:
        return self.path.is_file()

    def _all(self) -> List[Dict[str, Any]]:
        return _valid_questions(read_items(self.path, DOC_KEY), self.path, {})

    def has_subject(self, subject, level=None):
        return bool(filter_questions(self._all(), self.policy, subject=subject, level=level))

    def load(self, subject, level=None):
        return filter_questions(self._all(), self.policy, subject=subject, level=level)

    def subjects(self, level=None):
        qs = filter_questions(self._all(), self.policy, level=level)
        return {q["materia"].strip().lower() for q in qs}


@dataclass
class Resolution:
    questions: List[Dict[str, Any]]
    source: Optional[str]
    subject_known: bool


class QuestionStore:
    """Resolves (subject, level) queries against the supported layouts.

    Every call re-reads the documents from disk.
    """

    def __init__(self, data_dir: Path, policy: QuizPolicy):
        self.data_dir = Path(data_dir)
        self.policy = policy
        self.per_subject = PerSubjectFileSource(self.data_dir, policy)
        self.per_level = PerLevelPerSubjectFileSource(self.data_dir, policy)
        self.single_file = SingleFileSource(self.data_dir, policy)

    @property
    def sources(self) -> Tuple[QuestionSource, ...]:
        # resolution priority
        return (self.per_subject, self.per_level, self.single_file)

    def level(self, level: Optional[str]) -> Optional[str]:
        """Normalize a level name; unknown levels are a not-found condition."""
        lv = self.policy.normalize_level(level)
        if lv is None:
            return None
        if lv not in self.policy.levels:
            raise NotFound(f"Nível não encontrado: {level}", code="nivel_desconhecido")
        return lv

    def resolve(self, subject: str, level: Optional[str] = None) -> Resolution:
        s = str(subject).strip().lower()
        if not s:
            raise ValidationFailed("Matéria obrigatória")
        lv = self.level(level)
        # names that cannot be file names only live in the combined document
        in_files = path_safe(s)

        if in_files and self.per_subject.has_subject(s):
            return Resolution(self.per_subject.load(s), self.per_subject.name, True)

        if in_files and self.per_level.has_subject(s, lv):
            return Resolution(self.per_level.load(s, lv), self.per_level.name, True)

        questions = self.single_file.load(s, lv)
        if questions:
            return Resolution(questions, self.single_file.name, True)

        known = (
            s in self.policy.subjects
            or (in_files and self.per_level.has_subject(s))
            or self.single_file.has_subject(s)
        )
        return Resolution([], None, known)

    def questions(self, subject: str, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Like :meth:`resolve` but raises :class:`NotFound` when nothing matches."""
        res = self.resolve(subject, level)
        if not res.questions:
            if not res.subject_known:
                raise NotFound(f"Matéria não encontrada: {subject}", code="materia_desconhecida")
            raise NotFound(
                f"Nenhuma pergunta encontrada para {subject}", code="sem_perguntas"
            )
        return res.questions

    def subjects(self, level: Optional[str] = None) -> List[str]:
        lv = self.level(level)
        found: Set[str] = set()
        for src in self.sources:
            if src.present():
                found |= src.subjects(lv)
        return sorted(found)

    def all_questions(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for s in self.subjects(level):
            out.extend(self.resolve(s, level).questions)
        return out

    def find(
        self,
        question_id: str,
        subject: Optional[str] = None,
        level: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        # identifiers are only unique per document; first match wins
        if subject:
            pool = self.resolve(subject, level).questions
        else:
            pool = self.all_questions(level)
        qid = str(question_id).strip()
        return next((q for q in pool if q["id"] == qid), None)

    def statistics(self, level: Optional[str] = None) -> Dict[str, Any]:
        lv = self.level(level)
        by_subject: Dict[str, int] = {}
        by_level: Dict[str, int] = {}
        total = 0
        for s in self.subjects(lv):
            qs = filter_questions(self.resolve(s, lv).questions, self.policy, level=lv)
            by_subject[s] = len(qs)
            for q in qs:
                key = self.policy.normalize_level(q.get("nivel")) or _NO_LEVEL
                by_level[key] = by_level.get(key, 0) + 1
            total += len(qs)
        return {"total": total, "porMateria": by_subject, "porNivel": by_level}

    # --- writes ---------------------------------------------------------------

    def write_target(self, subject: str, level: Optional[str]) -> Path:
        """Pick the document an append goes to, in the order reads resolve.

        A new document is only created when no layout mentions the subject,
        so an append never shadows questions stored elsewhere.
        """
        if self.per_subject.has_subject(subject):
            return self.per_subject.path(subject)
        if level is not None and self.per_level.has_subject(subject, level):
            return self.per_level.path(level, subject)
        if level is None and self.per_level.has_subject(subject):
            raise ValidationFailed(
                f"Informe o nível: {subject} está organizada por nível", code="nivel_obrigatorio"
            )
        if self.single_file.has_subject(subject):
            return self.single_file.path

        # subject not stored anywhere yet
        if level is not None and self.per_level.present():
            return self.per_level.path(level, subject)
        if self.single_file.present():
            return self.single_file.path
        if level is not None:
            return self.per_level.path(level, subject)
        return self.per_subject.path(subject)

    def append(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            new = QuestionCreate.model_validate(dict(data))
        except ValidationError as e:
            raise ValidationFailed(_describe(e))

        s = check_name(new.materia, "Matéria")
        lv = None
        if new.nivel is not None:
            lv = self.policy.normalize_level(new.nivel)
            if lv not in self.policy.levels:
                raise ValidationFailed(f"Nível inválido: {new.nivel!r}")

        target = self.write_target(s, lv)
        doc, items = load_for_write(target, DOC_KEY)
        existing = {str(it.get("id")) for it in items if isinstance(it, dict)}

        qid = new.id or _new_id(existing)
        if qid in existing:
            raise ValidationFailed(f"Já existe uma pergunta com id {qid}")

        record = new.model_dump(exclude_none=True)
        record["id"] = qid
        if lv is not None:
            record["nivel"] = lv
        items.append(record)
        write_document(target, doc)
        logger.info("Added question %s to %s", qid, target)
        return Question(**record).model_dump()


def _new_id(existing: Set[str]) -> str:
    token = int(time.time() * 1000)
    while str(token) in existing:
        token += 1
    return str(token)


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Dados inválidos"
