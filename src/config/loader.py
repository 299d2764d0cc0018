"""Configuration loader for the leakage scoring pipeline.

Provides centralized access to all pipeline configuration parameters.
"""
from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Any, Optional
import structlog

logger = structlog.get_logger(__name__)

CONFIG_DIR = Path(__file__).parent
CONFIG_FILE = Path(os.getenv("LEAKAGE_CONFIG_PATH", str(CONFIG_DIR / "pipeline_config.yaml")))


class ConfigLoader:
    """Loads and provides access to pipeline configuration."""

    _instance: Optional[ConfigLoader] = None
    _config: Optional[dict[str, Any]] = None

    def __new__(cls) -> ConfigLoader:
        """Singleton pattern - ensure only one config instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize config loader (only runs once due to singleton)."""
        if self._config is None:
            self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if CONFIG_FILE.exists():
            with open(CONFIG_FILE, encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.info("config_loaded", path=str(CONFIG_FILE))
        else:
            logger.warning("config_file_not_found", path=str(CONFIG_FILE))
            self._config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key.

        Examples:
            config.get("llm.model")
            config.get("leakage.scoring.style_discounts.contextual")
            config.get("nonexistent.key", default=100)
        """
        if not self._config:
            return default

        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Get entire configuration section.

        Examples:
            config.get_section("leakage")
            config.get_section("judge")
        """
        return self.get(section, default={})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._config = None
        self._load_config()


# Singleton instance
_config = ConfigLoader()


def get_config() -> ConfigLoader:
    """Get the global config instance."""
    return _config


# Convenience functions for common config access
def get_llm_model() -> str:
    """Get LLM model name."""
    return _config.get("llm.model", "claude-sonnet-4-20250514")


def get_llm_max_tokens() -> int:
    """Get LLM max tokens."""
    return _config.get("llm.max_tokens", 8192)


def get_llm_temperature() -> float:
    """Get LLM temperature."""
    return _config.get("llm.temperature", 0.0)


def get_flag_threshold() -> float:
    """Score above which a question is reported as leaking."""
    return _config.get("leakage.flag_threshold", 0.3)


def get_validation_trigger_threshold() -> float:
    """Minimum rule-based score that sends a question to the semantic judge."""
    return _config.get("leakage.validation_trigger_threshold", 0.1)


def get_batch_size() -> int:
    """Number of questions per semantic judge call."""
    return _config.get("leakage.batch_size", 25)


def get_scoring_config() -> dict[str, Any]:
    """Get rule-based scoring weights and caps."""
    return _config.get("leakage.scoring", default={})


def get_reconciliation_config() -> dict[str, Any]:
    """Get reconciliation floors and ceilings."""
    return _config.get("leakage.reconciliation", default={})


def get_judge_config() -> dict[str, Any]:
    """Get semantic judge client configuration."""
    return _config.get_section("judge")


def get_lexicon_path() -> Path:
    """Resolve the lexicon YAML path (relative paths are relative to the config dir)."""
    path = Path(_config.get("lexicon.path", "lexicon.yaml"))
    if not path.is_absolute():
        path = CONFIG_DIR / path
    return path


def get_domain_match_mode() -> str:
    """Get domain vocabulary match mode: 'boundary' or 'substring'."""
    return _config.get("lexicon.domain_match", "boundary")
