from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

_BASE = Path(__file__).resolve().parent

CANONICAL_LEVELS: Tuple[str, ...] = ("primario", "secundario", "superior")

# alternate spellings accepted on input
LEVEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "primário": "primario",
        "medio": "secundario",
        "médio": "secundario",
        "secundário": "secundario",
    }
)

DEFAULT_SUBJECTS: Tuple[str, ...] = (
    "matematica",
    "portugues",
    "ingles",
    "historia",
    "geografia",
    "fisica",
    "quimica",
    "biologia",
)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}")


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(s.strip() for s in raw.split(",") if s.strip())


@dataclass(frozen=True)
class QuizPolicy:
    """Lookup tables and selection limits shared by the store and the selection engine."""

    levels: Tuple[str, ...] = CANONICAL_LEVELS
    level_aliases: Mapping[str, str] = field(default_factory=lambda: LEVEL_ALIASES, hash=False)
    subjects: Tuple[str, ...] = DEFAULT_SUBJECTS
    default_limit: int = 10
    max_limit: int = 20  # 0 disables the clamp
    expose_answers: bool = True

    def normalize_level(self, level: Optional[str]) -> Optional[str]:
        if level is None:
            return None
        key = str(level).strip().lower()
        if not key:
            return None
        return self.level_aliases.get(key, key)

    def is_level(self, level: Optional[str]) -> bool:
        return self.normalize_level(level) in self.levels


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    data_dir: Path = _BASE / "data"
    upload_dir: Path = _BASE / "uploads"
    app_env: str = "development"
    cors_origins: Tuple[str, ...] = ("*",)
    quiz: QuizPolicy = field(default_factory=QuizPolicy)

    @property
    def production(self) -> bool:
        return self.app_env.lower() == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        quiz = QuizPolicy(
            subjects=tuple(s.lower() for s in _env_list("QUIZ_SUBJECTS", DEFAULT_SUBJECTS)),
            default_limit=_env_int("QUIZ_DEFAULT_LIMIT", 10),
            max_limit=_env_int("QUIZ_MAX_LIMIT", 20),
            expose_answers=_env_bool("QUIZ_EXPOSE_ANSWERS", True),
        )
        return cls(
            port=_env_int("PORT", 3000),
            data_dir=Path(os.getenv("DATA_DIR") or _BASE / "data"),
            upload_dir=Path(os.getenv("UPLOAD_DIR") or _BASE / "uploads"),
            app_env=os.getenv("APP_ENV", "development"),
            cors_origins=_env_list("CORS_ORIGINS", ("*",)),
            quiz=quiz,
        )
