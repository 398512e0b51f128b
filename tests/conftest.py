import json
import random
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from config import QuizPolicy, Settings
from deps.stores import get_rng
from main import create_app


def write_json(path: Path, obj) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, ensure_ascii=False), encoding="utf-8")
    return path


def make_question(qid, materia, nivel=None, resposta="A", **extra):
    q = {
        "id": qid,
        "pergunta": f"Pergunta {qid}?",
        "opcoes": {"A": "um", "B": "dois", "C": "três", "D": "quatro"},
        "respostaCorreta": resposta,
        "materia": materia,
        "explicacao": f"Porque {resposta}.",
    }
    if nivel is not None:
        q["nivel"] = nivel
    q.update(extra)
    return q


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def make_client(data_dir, tmp_path):
    def _make(seed=None, raise_server_exceptions=True, app_env="development", **policy):
        settings = Settings(
            data_dir=data_dir,
            upload_dir=tmp_path / "uploads",
            app_env=app_env,
            quiz=QuizPolicy(**policy),
        )
        app = create_app(settings)
        if seed is not None:
            app.dependency_overrides[get_rng] = lambda: random.Random(seed)
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
