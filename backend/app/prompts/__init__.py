"""Prompt loader for the planner passes."""

from datetime import date
from pathlib import Path

_PROMPT_DIR = Path(__file__).parent


def load_prompt(name: str) -> str:
    """Load a prompt template from the prompts directory."""
    return (_PROMPT_DIR / name).read_text(encoding="utf-8")


def render_prompt(name: str, **values: str) -> str:
    """Fill ``{{key}}`` placeholders; ``{{today}}`` is always available."""
    text = load_prompt(name)
    values.setdefault("today", date.today().isoformat())
    for key, value in values.items():
        text = text.replace("{{" + key + "}}", value)
    return text
