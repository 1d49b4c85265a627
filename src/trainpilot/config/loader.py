"""Config loading and command-line overrides."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trainpilot.contracts.config import TrainPilotConfig
from trainpilot.contracts.exceptions import ConfigError


def load_config(path: str | Path) -> TrainPilotConfig:
    config_path = Path(path).expanduser().resolve()

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        return TrainPilotConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc


def apply_overrides(
    config: TrainPilotConfig,
    *,
    area_path: str | None = None,
    limit: int | None = None,
) -> TrainPilotConfig:
    """Return *config* with command-line values applied and re-validated."""
    updates: dict[str, Any] = {}
    if area_path is not None:
        updates["area_path"] = area_path
    if limit is not None:
        updates["limit"] = limit
    if not updates:
        return config
    try:
        return TrainPilotConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as exc:
        raise ConfigError(f"invalid override: {exc}") from exc
