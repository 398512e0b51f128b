import json

import pytest
from conftest import write_json


@pytest.fixture
def ebooks(data_dir):
    items = [
        {"id": "1", "titulo": "Álgebra", "categoria": "Matemática", "dataCriacao": "2023"},
        {"id": "2", "titulo": "Geometria", "categoria": "Matemática"},
        {"id": "3", "titulo": "Python", "categoria": "Programação"},
        {"id": "4", "titulo": "Cálculo", "categoria": "matemática"},
    ]
    write_json(data_dir / "ebooks.json", items)
    return items


def test_list_ebooks(client, ebooks):
    r = client.get("/api/ebooks")
    assert r.status_code == 200
    assert r.json() == {"success": True, "data": ebooks}


def test_list_ebooks_missing_file_is_empty(client):
    assert client.get("/api/ebooks").json() == {"success": True, "data": []}


def test_get_ebook_details(client, ebooks):
    data = client.get("/api/ebooks/1").json()["data"]
    assert data["titulo"] == "Álgebra"
    assert data["nivel"] == "Avançado"
    assert data["idioma"] == "Português"
    assert data["dataPublicacao"] == "2023"
    assert data["tags"] == ["Matemática", "educação", "aprendizado"]

    other = client.get("/api/ebooks/3").json()["data"]
    assert other["nivel"] == "Intermediário"
    assert other["dataPublicacao"] == "2024"


def test_get_ebook_404(client, ebooks):
    r = client.get("/api/ebooks/99")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Ebook não encontrado"}


def test_related_ebooks(client, ebooks):
    data = client.get("/api/ebooks/1/related").json()["data"]
    assert [e["id"] for e in data] == ["2", "4"]
    assert client.get("/api/ebooks/99/related").status_code == 404


def test_related_capped_at_five(client, data_dir):
    write_json(data_dir / "ebooks.json", [{"id": str(i), "categoria": "Ciências"} for i in range(10)])
    assert len(client.get("/api/ebooks/0/related").json()["data"]) == 5


def test_ebooks_by_category(client, ebooks):
    data = client.get("/api/ebooks/category/MATEMÁTICA").json()["data"]
    assert [e["id"] for e in data] == ["1", "2", "4"]
    assert client.get("/api/ebooks/category/Arte").json()["data"] == []


def test_create_ebook(client, data_dir, ebooks):
    r = client.post("/api/ebooks", json={"titulo": "Química Básica", "categoria": "Ciências"})
    assert r.status_code == 201
    created = r.json()["data"]
    assert created["id"] not in {e["id"] for e in ebooks}

    stored = json.loads((data_dir / "ebooks.json").read_text(encoding="utf-8"))
    assert stored[-1] == created
    assert client.get(f"/api/ebooks/{created['id']}").status_code == 200


def test_create_ebook_requires_body(client):
    assert client.post("/api/ebooks", json={}).status_code == 400


def test_banners(client, data_dir):
    banners = [{"id": "b1", "imagem": "/uploads/b1.png"}]
    write_json(data_dir / "banners.json", banners)
    assert client.get("/api/banners").json() == {"success": True, "data": banners}


def test_upload_and_serve(client, tmp_path):
    r = client.post("/api/upload", files={"file": ("capa final.png", b"PNGDATA", "image/png")})
    assert r.status_code == 200
    url = r.json()["url"]
    name = url.rsplit("/", 1)[-1]
    assert name.endswith("-capa_final.png")
    assert "/uploads/" in url
    assert (tmp_path / "uploads" / name).read_bytes() == b"PNGDATA"

    served = client.get(f"/uploads/{name}")
    assert served.status_code == 200
    assert served.content == b"PNGDATA"


def test_upload_strips_directories(client, tmp_path):
    r = client.post("/api/upload", files={"file": ("../../evil.txt", b"x", "text/plain")})
    assert r.status_code == 200
    name = r.json()["url"].rsplit("/", 1)[-1]
    assert (tmp_path / "uploads" / name).is_file()
    assert not (tmp_path / "evil.txt").exists()


def test_upload_requires_file(client):
    r = client.post("/api/upload")
    assert r.status_code == 400
