# intelligence/templates.py

from pathlib import Path

PROMPTS_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str) -> str:
    """
    Loads a prompt template like:
    intelligence/prompts/system_prompt.txt
    """
    path = PROMPTS_DIR / f"{name}.txt"

    if not path.exists():
        raise FileNotFoundError(f"Missing prompt template: {path}")

    return path.read_text(encoding="utf-8").strip()


def load_system_prompt() -> str:
    return load_prompt_template("system_prompt")
