"""Shared test fixtures for trainpilot tests."""

from __future__ import annotations

import pytest

from trainpilot.contracts.config import EngineConfig, TrainPilotConfig


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def sample_config() -> TrainPilotConfig:
    return TrainPilotConfig(
        organization="contoso",
        project="Platform",
        area_path="Platform\\Team",
        group_delay_seconds=0,
    )
