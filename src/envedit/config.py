"""Config file loading, validation, and persistence.

Schema on disk (~/.config/envedit/config.json):

    {
        "billing-api": {
            "filter_mode": "substring",
            "carry_edits_on_refresh": true
        }
    }

Keys prefixed with "_" are reserved (e.g. "_example") and are stripped on load.
Applications without an entry use the defaults of ``AppSettings``.
"""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ValidationError

from envedit.domain.filters import MATCHERS, KeyMatcher

CONFIG_PATH = Path("~/.config/envedit/config.json").expanduser()

_README_PATH = Path("~/.config/envedit/README.md").expanduser()

_README_CONTENT = """\
# envedit configuration

Edit `config.json` in this directory to tune the environment editor per app.

## Schema

```json
{
    "<app-name>": {
        "filter_mode": "fuzzy",
        "carry_edits_on_refresh": true
    }
}
```

- `filter_mode`: `fuzzy` (keys containing the query's characters in order)
  or `substring` (keys containing the query verbatim).  Case-insensitive.
- `carry_edits_on_refresh`: when a newer release arrives while editing,
  replay unsaved edits onto it (`true`) or discard them (`false`).

Keys prefixed with `_` (e.g. `_example`) are ignored by envedit.
"""


class AppSettings(BaseModel):
    """Editor settings for a single application."""

    filter_mode: Literal["fuzzy", "substring"] = "fuzzy"
    carry_edits_on_refresh: bool = True

    def matcher(self) -> KeyMatcher:
        return MATCHERS[self.filter_mode]


# app_name -> AppSettings
Config = dict[str, AppSettings]


class ConfigError(Exception):
    """Raised when config.json exists but cannot be parsed or validated."""


def load_config() -> Config:
    """Load and validate the config file.

    Creates the config directory, an empty config.json, and a README on first
    run.  Returns an empty dict if the file is empty or contains no real
    entries.  Raises ConfigError if the file exists but is malformed.
    """
    if not CONFIG_PATH.exists():
        _bootstrap()
        return {}

    try:
        raw: object = json.loads(CONFIG_PATH.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"config.json is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("config.json must be a JSON object at the top level")

    config: Config = {}
    for app_name, data in raw.items():
        if app_name.startswith("_"):
            continue
        if not isinstance(data, dict):
            raise ConfigError(f"App '{app_name}' must be a JSON object")
        try:
            config[app_name] = AppSettings.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config for {app_name}: {exc}") from exc

    return config


def settings_for(config: Config, app_name: str) -> AppSettings:
    """Return the settings registered for ``app_name``, or the defaults."""
    return config.get(app_name) or AppSettings()


def save_config(config: Config) -> None:
    """Persist config to disk, creating directories as needed."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    payload = {app_name: settings.model_dump() for app_name, settings in config.items()}
    CONFIG_PATH.write_text(json.dumps(payload, indent=2))


def _bootstrap() -> None:
    """Create the config directory, an empty config.json, and a README."""
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text("{}\n")
    if not _README_PATH.exists():
        _README_PATH.write_text(_README_CONTENT)
