"""
Interpreter configuration.

Settings come from three layers, later ones winning: the dataclass
defaults, an optional YAML file (passed explicitly or named by the
MSCRI_CONFIG environment variable), and individual environment variables.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from mscri.mscri_tokenizer import DEFAULT_MAX_LEXEME_LENGTH

CONFIG_ENV = "MSCRI_CONFIG"
DEBUG_ENV = "MSCRI_DEBUG"
MAX_LEXEME_ENV = "MSCRI_MAX_LEXEME"

_FALSY = ("", "0", "false", "no", "off")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class MscriConfig:
    max_lexeme_length: int = DEFAULT_MAX_LEXEME_LENGTH
    debug: bool = False
    prompt: str = "mscri> "

    def __post_init__(self):
        if isinstance(self.max_lexeme_length, bool) or not isinstance(self.max_lexeme_length, int):
            raise ConfigError(f"max_lexeme_length must be an integer, got {self.max_lexeme_length!r}")
        if self.max_lexeme_length < 1:
            raise ConfigError(f"max_lexeme_length must be positive, got {self.max_lexeme_length}")
        if not isinstance(self.debug, bool):
            raise ConfigError(f"debug must be a boolean, got {self.debug!r}")
        if not isinstance(self.prompt, str):
            raise ConfigError(f"prompt must be a string, got {self.prompt!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional['MscriConfig'] = None) -> 'MscriConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return replace(base or cls(), **dict(data))


def _read_yaml(path: Path) -> Mapping[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file '{path}': {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file '{path}': {e}") from e
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"Config file '{path}' must contain a mapping")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict:
    out: dict = {}
    if DEBUG_ENV in environ:
        out["debug"] = environ[DEBUG_ENV].strip().lower() not in _FALSY
    raw = environ.get(MAX_LEXEME_ENV)
    if raw is not None:
        try:
            out["max_lexeme_length"] = int(raw)
        except ValueError:
            raise ConfigError(f"{MAX_LEXEME_ENV} must be an integer, got {raw!r}") from None
    return out


def load_config(path: Optional[str | os.PathLike] = None,
                environ: Optional[Mapping[str, str]] = None) -> MscriConfig:
    """Builds a config from defaults, an optional YAML file, then the environment."""
    env = os.environ if environ is None else environ
    config = MscriConfig()
    if path is None:
        path = env.get(CONFIG_ENV) or None
    if path is not None:
        config = MscriConfig.from_mapping(_read_yaml(Path(path)), config)
    overrides = _env_overrides(env)
    if overrides:
        config = MscriConfig.from_mapping(overrides, config)
    return config
