import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from dentaldesk.rules.models import Rules

DEFAULT_RULES_PATH = Path(__file__).parent / "clinic_rules.yaml"


def resolve_rules_path() -> Path:
    """Rules file from DENTAL_RULES_PATH, else the packaged default."""
    override = os.environ.get("DENTAL_RULES_PATH")
    return Path(override) if override else DEFAULT_RULES_PATH


def load_rules(path: Path | None = None) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    path = path or resolve_rules_path()
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path, encoding="utf-8") as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Rules file {path} must contain a mapping at the top level")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        # Re-raise with a clear message for the caller/logs
        raise ValueError(f"Rules validation failed:\n{e}") from e
