#!/usr/bin/env python
"""Maintain the on-disk quiz layouts.

    python -m tools.quiz_layout split   # data/quiz.json -> data/quiz/<materia>.json
    python -m tools.quiz_layout init    # empty data/quiz/<materia>.json files
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from bank import DOC_KEY, check_name
from config import Settings
from errors import ApiError
from storage import read_items, write_document

logger = logging.getLogger("estuda-api.tools")


def split_by_subject(data_dir: Path) -> Dict[str, int]:
    """Copy every question of the combined document into its per-subject file.

    Existing per-subject files are replaced; the combined document is left
    untouched.
    """
    source = data_dir / "quiz.json"
    groups: Dict[str, List[dict]] = {}
    for q in read_items(source, DOC_KEY):
        materia = q.get("materia")
        if not isinstance(materia, str) or not materia.strip():
            logger.warning("Skipping question %r without materia", q.get("id"))
            continue
        groups.setdefault(check_name(materia, "Matéria"), []).append(q)

    for materia, questions in sorted(groups.items()):
        write_document(data_dir / "quiz" / f"{materia}.json", {DOC_KEY: questions})
        logger.info("%s.json: %d perguntas", materia, len(questions))
    return {m: len(qs) for m, qs in groups.items()}


def init_subject_files(data_dir: Path, subjects: Iterable[str]) -> List[str]:
    """Create an empty collection per subject; existing files are kept."""
    created = []
    for materia in subjects:
        p = data_dir / "quiz" / f"{check_name(materia, 'Matéria')}.json"
        if p.exists():
            continue
        write_document(p, {DOC_KEY: []})
        created.append(p.name)
    return created


def main(argv: Optional[List[str]] = None) -> int:
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("command", choices=("split", "init"))
    parser.add_argument("--data-dir", type=Path, default=settings.data_dir)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        if args.command == "split":
            counts = split_by_subject(args.data_dir)
            print(f"Matérias encontradas: {sorted(counts)}")
        else:
            created = init_subject_files(args.data_dir, settings.quiz.subjects)
            print(f"Criados: {created}")
    except ApiError as e:
        print(f"Error: {e.message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
