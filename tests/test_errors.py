from deps.stores import get_question_store
from errors import ErrorKind, NotFound, StorageFailure, ValidationFailed


def _broken_store():
    raise RuntimeError("disk on fire")


def test_error_kinds_map_to_status():
    assert ValidationFailed("x").kind.status_code == 400
    assert NotFound("x").kind.status_code == 404
    assert StorageFailure("x").kind.status_code == 500
    assert ErrorKind.INTERNAL.status_code == 500
    assert NotFound("gone", code="c").to_body() == {"success": False, "error": "gone", "code": "c"}


def test_unhandled_error_includes_detail_outside_production(make_client):
    client = make_client(raise_server_exceptions=False)
    client.app.dependency_overrides[get_question_store] = _broken_store
    r = client.get("/api/quiz/materias")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert "disk on fire" in body["detail"]


def test_unhandled_error_is_generic_in_production(make_client):
    client = make_client(raise_server_exceptions=False, app_env="production")
    client.app.dependency_overrides[get_question_store] = _broken_store
    r = client.get("/api/quiz/materias")
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Erro interno do servidor"}


def test_unknown_route_uses_envelope(client):
    r = client.get("/api/nada")
    assert r.status_code == 404
    assert r.json()["success"] is False
