import json

from conftest import make_question, write_json

from bank import QuestionStore
from config import QuizPolicy
from tools.quiz_layout import init_subject_files, main, split_by_subject


def _read(p):
    return json.loads(p.read_text(encoding="utf-8"))


def test_split_by_subject(data_dir):
    write_json(
        data_dir / "quiz.json",
        {
            "perguntas": [
                make_question("1", "Matematica"),
                make_question("2", "historia"),
                make_question("3", "matematica"),
                {"id": "4", "pergunta": "sem matéria"},
            ]
        },
    )
    counts = split_by_subject(data_dir)

    assert counts == {"matematica": 2, "historia": 1}
    assert [q["id"] for q in _read(data_dir / "quiz" / "matematica.json")["perguntas"]] == ["1", "3"]
    assert (data_dir / "quiz.json").exists()

    res = QuestionStore(data_dir, QuizPolicy()).resolve("matematica")
    assert res.source == "per_subject"


def test_init_keeps_existing_files(data_dir):
    write_json(data_dir / "quiz" / "fisica.json", {"perguntas": [make_question("1", "fisica")]})
    created = init_subject_files(data_dir, ["fisica", "Quimica"])

    assert created == ["quimica.json"]
    assert _read(data_dir / "quiz" / "quimica.json") == {"perguntas": []}
    assert len(_read(data_dir / "quiz" / "fisica.json")["perguntas"]) == 1


def test_main_init(data_dir, monkeypatch, capsys):
    monkeypatch.setenv("QUIZ_SUBJECTS", "ingles, biologia")
    assert main(["init", "--data-dir", str(data_dir)]) == 0
    assert sorted(p.name for p in (data_dir / "quiz").iterdir()) == ["biologia.json", "ingles.json"]
    assert "Criados" in capsys.readouterr().out


def test_main_split_reports_bad_subject(data_dir):
    write_json(data_dir / "quiz.json", {"perguntas": [make_question("1", "../x")]})
    assert main(["split", "--data-dir", str(data_dir)]) == 1
