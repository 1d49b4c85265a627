"""Public contracts for TrainPilot."""

from trainpilot.contracts.config import (
    AggregateConfig,
    EngineConfig,
    EstimateConfig,
    FieldConfig,
    MarkerConfig,
    TrainPilotConfig,
)
from trainpilot.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    ItemNotFoundError,
    ProviderError,
    TrainPilotError,
)
from trainpilot.contracts.item import LINK_TYPES, CreateAggregateInput, ItemQuery, Relation, RelationType, WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import (
    EstimateOutcome,
    EstimateResult,
    Failure,
    GroupingResult,
    Operation,
    OperationKind,
    OperationLog,
)

__all__ = [
    "LINK_TYPES",
    "AggregateConfig",
    "AuthenticationError",
    "ConfigError",
    "CreateAggregateInput",
    "EngineConfig",
    "EstimateConfig",
    "EstimateOutcome",
    "EstimateResult",
    "Failure",
    "FieldConfig",
    "GroupingResult",
    "ItemNotFoundError",
    "ItemQuery",
    "MarkerConfig",
    "Operation",
    "OperationKind",
    "OperationLog",
    "Provider",
    "ProviderError",
    "Relation",
    "RelationType",
    "TrainPilotConfig",
    "TrainPilotError",
    "WorkItem",
]
