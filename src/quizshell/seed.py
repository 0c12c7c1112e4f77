"""Load seed quizzes from bundled JSON resources."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

CONTENT_PACKAGE = "quizshell.content"
SEED_FILE = "seed_quizzes.json"


def _pairs_from_dict(raw: dict[str, Any]) -> list[tuple[str, str]]:
    """Build (question, answer) pairs from raw JSON content."""
    items = raw.get("quizzes")
    if not isinstance(items, list):
        raise ValueError("Seed file must contain a 'quizzes' list.")
    pairs: list[tuple[str, str]] = []
    seen: set[str] = set()
    for item in items:
        question = str(item.get("question", "")).strip()
        answer = str(item.get("answer", "")).strip()
        if not question or not answer:
            raise ValueError(f"Seed quiz {item!r} needs a question and an answer.")
        if question in seen:
            raise ValueError(f"Duplicate seed question: {question}")
        seen.add(question)
        pairs.append((question, answer))
    return pairs


def load_seed_quizzes() -> list[tuple[str, str]]:
    """Load bundled seed quizzes."""
    entry = resources.files(CONTENT_PACKAGE).joinpath(SEED_FILE)
    return _pairs_from_dict(json.loads(entry.read_text(encoding="utf-8-sig")))


def load_seed_quizzes_from_file(path: Path) -> list[tuple[str, str]]:
    """Load seed quizzes from a JSON file for tests/tools."""
    return _pairs_from_dict(json.loads(path.read_text(encoding="utf-8-sig")))
