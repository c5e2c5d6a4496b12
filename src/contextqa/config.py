"""contextqa configuration loader.

Settings are resolved from several layers; a later layer wins:

  - built-in defaults (the dataclasses below)
  - ~/.contextqa/config.yaml, shared by every project, model choices only
  - contextqa.yaml in the project directory
  - CONTEXTQA_* environment variables
  - command line flags such as --db, applied by the CLI after load_config()

API keys never live in YAML. The global file is scanned and rejected if it
carries anything that looks like a credential; providers read their keys
from the environment. Files are parsed with yaml.safe_load() only.
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".contextqa"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "contextqa.yaml"

# Key names that look like credentials. max_tokens and similar must not match.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"   # api_key, api-key, apikey, api_secret
    r"|^(?:token|secret)$"       # bare token / secret
    r"|_(?:token|secret)$"       # auth_token, client_secret
    r"|passw(?:ord|d)"           # password, passwd
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["embedding", "generation", "database"])

EMBEDDING_PROVIDERS: frozenset[str] = frozenset(["mock", "openai", "gemini"])

_GLOBAL_TEMPLATE = """\
# contextqa global configuration: model defaults shared by all projects.
# Do not put API keys in this file. Export them instead:
#   export OPENAI_API_KEY=sk-...
#   export GEMINI_API_KEY=...

embedding:
  provider: openai
  dimensions: 1536

generation:
  model: gemini/gemini-2.5-flash
"""


class ConfigError(ValueError):
    """A config file or CONTEXTQA_* variable holds an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass
class EmbeddingCfg:
    """The ``embedding:`` section.

    Attributes:
        provider: One of 'mock', 'openai', 'gemini'.
        model: LiteLLM model string; None selects the provider's default.
        dimensions: System-wide vector length. Shorter provider output is
            zero-padded to this length.
        timeout: Per-request timeout in seconds.
    """

    provider: str = "openai"
    model: str | None = None
    dimensions: int = 1536
    timeout: float = 30.0


@dataclass
class GenerationCfg:
    """The ``generation:`` section (answer synthesis)."""

    model: str = "gemini/gemini-2.5-flash"
    max_tokens: int = 1024
    timeout: float = 60.0


@dataclass
class DatabaseCfg:
    path: str = ".contextqa.db"


@dataclass
class ContextQAConfig:
    """Everything load_config() resolves, one attribute per YAML section."""

    embedding: EmbeddingCfg = field(default_factory=EmbeddingCfg)
    generation: GenerationCfg = field(default_factory=GenerationCfg)
    database: DatabaseCfg = field(default_factory=DatabaseCfg)


# ---------------------------------------------------------------------------
# Reading and checking YAML layers
# ---------------------------------------------------------------------------


def _read_layer(path: Path) -> dict[str, Any]:
    """Parse *path*; an empty file is an empty layer, bad YAML or a non-mapping is an error."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"'{path}' is not valid YAML: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{path}' must contain a mapping of sections, got {type(data).__name__}.")
    return data


def _reject_credentials(data: dict[str, Any], source: Path, prefix: str = "") -> None:
    """Raise ConfigError for the first credential-like key, at any depth."""
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else str(key)
        if _API_KEY_RE.search(str(key)):
            raise ConfigError(
                f"Global config '{source}' contains a forbidden key '{dotted}'.\n"
                f"  Keys belong in environment variables. Delete '{dotted}' from "
                f"{source.name} and run:\n"
                f"    export {str(key).upper().replace('-', '_')}=<value>"
            )
        if isinstance(value, dict):
            _reject_credentials(value, source, dotted)


def _warn_unknown_sections(data: dict[str, Any], source: Path) -> None:
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Ignoring unknown section '{key}' in '{source}'.",
                UserWarning,
                stacklevel=4,
            )


def _overlay(base: dict[str, Any], layer: dict[str, Any]) -> dict[str, Any]:
    """Merge *layer* over *base* section by section; neither input is mutated."""
    merged = dict(base)
    for key, value in layer.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            merged[key] = _overlay(below, value)
        else:
            merged[key] = value
    return merged


# ---------------------------------------------------------------------------
# Building the dataclasses
# ---------------------------------------------------------------------------


def _coerce(section: dict[str, Any], key: str, default: Any, convert: Callable[[Any], Any]) -> Any:
    if section.get(key) is None:
        return default
    try:
        return convert(section[key])
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for '{key}': {section[key]!r}") from None


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping.")
    return section


def _build(data: dict[str, Any]) -> ContextQAConfig:
    emb, gen, db = (_section(data, name) for name in ("embedding", "generation", "database"))
    defaults = ContextQAConfig()
    return ContextQAConfig(
        embedding=EmbeddingCfg(
            provider=_coerce(emb, "provider", defaults.embedding.provider, lambda v: str(v).lower()),
            model=_coerce(emb, "model", defaults.embedding.model, str) or None,
            dimensions=_coerce(emb, "dimensions", defaults.embedding.dimensions, int),
            timeout=_coerce(emb, "timeout", defaults.embedding.timeout, float),
        ),
        generation=GenerationCfg(
            model=_coerce(gen, "model", defaults.generation.model, str),
            max_tokens=_coerce(gen, "max_tokens", defaults.generation.max_tokens, int),
            timeout=_coerce(gen, "timeout", defaults.generation.timeout, float),
        ),
        database=DatabaseCfg(path=_coerce(db, "path", defaults.database.path, str)),
    )


def _apply_env(cfg: ContextQAConfig) -> None:
    env = os.environ
    if env.get("CONTEXTQA_EMBEDDING_PROVIDER"):
        cfg.embedding.provider = env["CONTEXTQA_EMBEDDING_PROVIDER"].lower()
    if env.get("CONTEXTQA_EMBEDDING_MODEL"):
        cfg.embedding.model = env["CONTEXTQA_EMBEDDING_MODEL"]
    if env.get("CONTEXTQA_EMBEDDING_DIMENSIONS"):
        raw = env["CONTEXTQA_EMBEDDING_DIMENSIONS"]
        try:
            cfg.embedding.dimensions = int(raw)
        except ValueError:
            raise ConfigError(
                f"CONTEXTQA_EMBEDDING_DIMENSIONS must be an integer, got '{raw}'"
            ) from None
    if env.get("CONTEXTQA_GENERATION_MODEL"):
        cfg.generation.model = env["CONTEXTQA_GENERATION_MODEL"]
    if env.get("CONTEXTQA_DB"):
        cfg.database.path = env["CONTEXTQA_DB"]


def _validate(cfg: ContextQAConfig) -> None:
    if cfg.embedding.provider not in EMBEDDING_PROVIDERS:
        raise ConfigError(
            f"Unknown embedding provider '{cfg.embedding.provider}'.\n"
            f"  Choose one of: {', '.join(sorted(EMBEDDING_PROVIDERS))}"
        )
    if cfg.embedding.dimensions < 1:
        raise ConfigError(
            f"embedding.dimensions must be >= 1, got {cfg.embedding.dimensions}"
        )
    if cfg.embedding.timeout <= 0 or cfg.generation.timeout <= 0:
        raise ConfigError("Provider timeouts must be positive (seconds).")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> ContextQAConfig:
    """Resolve the effective configuration for *project_dir* (default: CWD).

    Args:
        project_dir: Directory holding *contextqa.yaml*.
        global_config_path: Use this file instead of ~/.contextqa/config.yaml.

    Raises:
        ConfigError: On unparseable YAML, a credential-like key in the global
            file, a value of the wrong type, or a setting out of range.
    """
    global_path = global_config_path or _GLOBAL_CONFIG_PATH
    project_path = (project_dir or Path.cwd()) / _PROJECT_CONFIG_NAME

    data: dict[str, Any] = {}
    if global_path.exists():
        layer = _read_layer(global_path)
        _reject_credentials(layer, global_path)
        _warn_unknown_sections(layer, global_path)
        data = _overlay(data, layer)
    if project_path.exists():
        layer = _read_layer(project_path)
        _warn_unknown_sections(layer, project_path)
        data = _overlay(data, layer)

    cfg = _build(data)
    _apply_env(cfg)
    _validate(cfg)
    return cfg


def ensure_global_config(global_config_path: Path | None = None) -> Path:
    """Write the default global config unless one exists, and return its path.

    The directory is created 0o700 and the file 0o600. An existing file is
    never touched.
    """
    target = global_config_path or _GLOBAL_CONFIG_PATH
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    if not target.exists():
        target.write_text(_GLOBAL_TEMPLATE, encoding="utf-8")
        target.chmod(0o600)
    return target
