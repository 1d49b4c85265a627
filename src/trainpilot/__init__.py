"""Public API surface for TrainPilot."""

__version__ = "1.0.0"

from trainpilot.auth import create_token_resolver
from trainpilot.config import apply_overrides, load_config
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
from trainpilot.contracts.item import CreateAggregateInput, ItemQuery, Relation, RelationType, WorkItem
from trainpilot.contracts.provider import Provider
from trainpilot.contracts.results import (
    EstimateOutcome,
    EstimateResult,
    Failure,
    GroupingResult,
    Operation,
    OperationKind,
)
from trainpilot.engine.progress import RunProgress
from trainpilot.hygiene import HygieneFinding, HygieneSummary, Severity
from trainpilot.providers import DryRunProvider, create_provider
from trainpilot.sdk import RunReport, TrainPilot

__all__ = [
    "AggregateConfig",
    "AuthenticationError",
    "ConfigError",
    "CreateAggregateInput",
    "DryRunProvider",
    "EngineConfig",
    "EstimateConfig",
    "EstimateOutcome",
    "EstimateResult",
    "Failure",
    "FieldConfig",
    "GroupingResult",
    "HygieneFinding",
    "HygieneSummary",
    "ItemNotFoundError",
    "ItemQuery",
    "MarkerConfig",
    "Operation",
    "OperationKind",
    "Provider",
    "ProviderError",
    "Relation",
    "RelationType",
    "RunProgress",
    "RunReport",
    "Severity",
    "TrainPilot",
    "TrainPilotConfig",
    "TrainPilotError",
    "WorkItem",
    "__version__",
    "apply_overrides",
    "create_provider",
    "create_token_resolver",
    "load_config",
]
