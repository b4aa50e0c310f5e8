# PATH: execution/config.py
"""
execution/config.py - Controller configuration.

Defaults, overridden by config/controller.yaml, overridden by environment
variables (RUNGUARD_MAX_STEPS, RUNGUARD_MAX_TOKENS, RUNGUARD_MAX_USD,
RUNGUARD_LOG_LEVEL).
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from config import CONFIG_DIR, load_yaml
from core.constants import (
    DEFAULT_MAX_STEPS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MAX_USD,
    DEFAULT_STEP_COST_USD,
    DEFAULT_STEP_TOKENS,
    DEFAULT_WARN_AT_PERCENT,
    StepEventType,
)
from core.models import Budget, to_decimal

DEFAULT_CONFIG_FILE = "controller.yaml"

ENV_PREFIX = "RUNGUARD_"


@dataclass
class StepConfig:
    """Cost charged by the stand-in step executor."""
    tokens: int = DEFAULT_STEP_TOKENS
    cost: Decimal = DEFAULT_STEP_COST_USD
    type: StepEventType = StepEventType.LLM_CALL


@dataclass
class ControllerConfig:
    """Full controller configuration."""

    max_steps: int = DEFAULT_MAX_STEPS
    max_tokens: int = DEFAULT_MAX_TOKENS
    max_usd: Decimal = DEFAULT_MAX_USD

    # Log a warning the first time usage crosses this percentage
    warn_at_percent: int = DEFAULT_WARN_AT_PERCENT

    step: StepConfig = field(default_factory=StepConfig)

    log_level: str = "INFO"
    json_logs: bool = True

    def budget(self) -> Budget:
        return Budget(max_tokens=self.max_tokens, max_usd=self.max_usd)


def _apply_env(config: ControllerConfig, environ: Mapping[str, str]) -> None:
    if f"{ENV_PREFIX}MAX_STEPS" in environ:
        config.max_steps = int(environ[f"{ENV_PREFIX}MAX_STEPS"])
    if f"{ENV_PREFIX}MAX_TOKENS" in environ:
        config.max_tokens = int(environ[f"{ENV_PREFIX}MAX_TOKENS"])
    if f"{ENV_PREFIX}MAX_USD" in environ:
        config.max_usd = to_decimal(environ[f"{ENV_PREFIX}MAX_USD"])
    if f"{ENV_PREFIX}LOG_LEVEL" in environ:
        config.log_level = environ[f"{ENV_PREFIX}LOG_LEVEL"].upper()


def _as_bool(value: Any) -> bool:
    """Boolean flag; also accepts quoted YAML values such as 'false'."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0"):
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def config_from_dict(data: Mapping[str, Any]) -> ControllerConfig:
    """Build a ControllerConfig from parsed YAML."""
    budget_data = data.get("budget", {}) or {}
    step_data = data.get("step", {}) or {}
    logging_data = data.get("logging", {}) or {}

    step = StepConfig(
        tokens=int(step_data.get("tokens", DEFAULT_STEP_TOKENS)),
        cost=to_decimal(step_data.get("cost", DEFAULT_STEP_COST_USD)),
        type=StepEventType(step_data.get("type", StepEventType.LLM_CALL.value)),
    )

    return ControllerConfig(
        max_steps=int(data.get("max_steps", DEFAULT_MAX_STEPS)),
        max_tokens=int(budget_data.get("max_tokens", DEFAULT_MAX_TOKENS)),
        max_usd=to_decimal(budget_data.get("max_usd", DEFAULT_MAX_USD)),
        warn_at_percent=int(data.get("warn_at_percent", DEFAULT_WARN_AT_PERCENT)),
        step=step,
        log_level=str(logging_data.get("level", "INFO")).upper(),
        json_logs=_as_bool(logging_data.get("json", True)),
    )


def load_controller_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ControllerConfig:
    """
    Load controller configuration from a YAML file.

    Args:
        config_path: Path to controller.yaml (default: config/controller.yaml)
        environ: Environment mapping for overrides (default: os.environ)

    Returns:
        ControllerConfig; defaults when the file does not exist
    """
    data: dict = {}
    if config_path is None:
        if (CONFIG_DIR / DEFAULT_CONFIG_FILE).exists():
            data = load_yaml(DEFAULT_CONFIG_FILE)
    elif config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    config = config_from_dict(data)
    _apply_env(config, os.environ if environ is None else environ)
    return config
