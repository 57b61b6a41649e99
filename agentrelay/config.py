"""
Typed configuration model with precedence-based loader.

Precedence (lowest to highest):
    defaults < config file (YAML) < env vars < CLI flags
"""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------

@dataclass
class LLMConfig:
    model: str = "gpt-4o-mini"
    api_base: str = ""
    api_key_variable: str = "OPENAI_API_KEY"
    max_output_tokens: int = 1000
    temperature: float = 0.7
    timeout_seconds: int = 120


@dataclass
class MemoryConfig:
    max_history: int = 10


@dataclass
class ImageConfig:
    model: str = "dall-e-3"
    size: str = "1024x1024"
    quality: str = "standard"
    style: str = "vivid"
    marker_prefix: str = "orca"


@dataclass
class DocumentsConfig:
    download_timeout_seconds: int = 30
    token_model: str = "gpt-4"


@dataclass
class LoggingConfig:
    level: str = "WARNING"


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------

@dataclass
class RelayConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    images: ImageConfig = field(default_factory=ImageConfig)
    documents: DocumentsConfig = field(default_factory=DocumentsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _apply_dotpath(obj: Any, dotpath: str, value: Any) -> None:
    """Walk obj via dotpath and set the final attribute."""
    parts = dotpath.split(".")
    for part in parts[:-1]:
        obj = getattr(obj, part)
    setattr(obj, parts[-1], value)


def _coerce(value: str, target_type: type) -> Any:
    """Coerce a string env value to the target type."""
    if target_type is bool:
        return value.lower() in ("1", "true", "yes", "on")
    if target_type is int:
        return int(value)
    if target_type is float:
        return float(value)
    return value


def _build_section(cls: type, raw: dict) -> Any:
    """Build a dataclass section from a raw dict, ignoring unknown keys."""
    valid_fields = {f.name for f in fields(cls)}
    filtered = {k: v for k, v in (raw or {}).items() if k in valid_fields}
    return cls(**filtered)


# ---------------------------------------------------------------------------
# ENV var mapping
# ---------------------------------------------------------------------------

_ENV_MAP: dict[str, tuple[str, type]] = {
    "AGENTRELAY_LLM_MODEL":             ("llm.model", str),
    "AGENTRELAY_LLM_API_BASE":          ("llm.api_base", str),
    "AGENTRELAY_LLM_API_KEY_VARIABLE":  ("llm.api_key_variable", str),
    "AGENTRELAY_LLM_MAX_OUTPUT":        ("llm.max_output_tokens", int),
    "AGENTRELAY_LLM_TEMPERATURE":       ("llm.temperature", float),
    "AGENTRELAY_LLM_TIMEOUT":           ("llm.timeout_seconds", int),
    "AGENTRELAY_MEMORY_MAX_HISTORY":    ("memory.max_history", int),
    "AGENTRELAY_IMAGES_MODEL":          ("images.model", str),
    "AGENTRELAY_IMAGES_SIZE":           ("images.size", str),
    "AGENTRELAY_IMAGES_QUALITY":        ("images.quality", str),
    "AGENTRELAY_IMAGES_STYLE":          ("images.style", str),
    "AGENTRELAY_IMAGES_MARKER_PREFIX":  ("images.marker_prefix", str),
    "AGENTRELAY_DOCUMENTS_TIMEOUT":     ("documents.download_timeout_seconds", int),
    "AGENTRELAY_DOCUMENTS_TOKEN_MODEL": ("documents.token_model", str),
    "AGENTRELAY_LOG_LEVEL":             ("logging.level", str),
}


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def find_config_path() -> Path | None:
    """Find a config file in the standard locations."""
    candidates = [
        Path.cwd() / "agentrelay.yaml",
        Path.cwd() / "agentrelay.yml",
        Path.home() / ".config" / "agentrelay" / "config.yaml",
    ]
    for p in candidates:
        if p.is_file():
            return p
    return None


def load_config(
    config_path: str | Path | None = None,
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> RelayConfig:
    """
    Build a RelayConfig by layering sources in precedence order:

        defaults  <  config file  <  env vars  <  CLI flags

    Parameters
    ----------
    config_path : path to YAML config file (optional)
    cli_overrides : dict of dotpath -> value CLI flag overrides
    """
    raw: dict[str, Any] = {}

    # --- 1. Config file ---
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.is_file():
            with p.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}

    cfg = RelayConfig(
        llm=_build_section(LLMConfig, raw.get("llm", {})),
        memory=_build_section(MemoryConfig, raw.get("memory", {})),
        images=_build_section(ImageConfig, raw.get("images", {})),
        documents=_build_section(DocumentsConfig, raw.get("documents", {})),
        logging=_build_section(LoggingConfig, raw.get("logging", {})),
    )

    # --- 2. Env var overrides ---
    for env_var, (dotpath, target_type) in _ENV_MAP.items():
        val = os.environ.get(env_var)
        if val is not None:
            _apply_dotpath(cfg, dotpath, _coerce(val, target_type))

    # --- 3. CLI flag overrides ---
    if cli_overrides:
        for dotpath, value in cli_overrides.items():
            if value is not None:
                _apply_dotpath(cfg, dotpath, value)

    return cfg
