import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "store": "noop",  # noop | sqlite | gist
    "store_path": ".sectionreview.db",
    "gist_id": None,
    "debounce_seconds": 1.0,
    "required_sections": None,  # None = every section in the registry
    "sections": None,  # None = built-in "Viviendas Prophero" sections
    "field_labels": {},
}


def load_config(config_path: str = ".sectionreview.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .sectionreview.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "field_labels": dict(DEFAULT_CONFIG["field_labels"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    try:
        config["debounce_seconds"] = float(config["debounce_seconds"])
    except (TypeError, ValueError):
        raise ValueError(f"debounce_seconds must be a number, got {config['debounce_seconds']!r}")

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")

    return config
