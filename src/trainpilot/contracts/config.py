"""Configuration contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class MarkerConfig(BaseModel):
    decoration_chars: str = "-"
    min_run: int = Field(default=3, ge=1)
    suffix: str = "rt"
    canonical_run: int = Field(default=31, ge=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_marker_shape(self) -> MarkerConfig:
        if not self.decoration_chars:
            raise ValueError("decoration_chars must not be empty")
        if any(char.isspace() or char.isalnum() for char in self.decoration_chars):
            raise ValueError("decoration_chars must be punctuation characters")
        suffix = self.suffix.strip()
        if not suffix or suffix != self.suffix:
            raise ValueError("suffix must be a non-empty token without surrounding whitespace")
        if self.canonical_run < self.min_run:
            raise ValueError("canonical_run must be at least min_run")
        return self


class AggregateConfig(BaseModel):
    item_type: str = "Release Train"
    member_type: str = "Feature"
    system_tag: str = "auto-generated"
    area_path: str | None = None
    provenance_comment: str = "Linked by trainpilot grouping"
    relation_warning_threshold: int = Field(default=10, ge=0)

    model_config = {"frozen": True}


class EstimateConfig(BaseModel):
    label: str = "ESTIMATE"
    empty_notes_text: str = "Total effort estimate based on sum of related Features."

    model_config = {"frozen": True}


class EngineConfig(BaseModel):
    markers: MarkerConfig = Field(default_factory=MarkerConfig)
    aggregate: AggregateConfig = Field(default_factory=AggregateConfig)
    estimates: EstimateConfig = Field(default_factory=EstimateConfig)

    model_config = {"frozen": True}


class FieldConfig(BaseModel):
    notes: str = "Custom.StatusNotes"
    estimate: str = "Microsoft.VSTS.Scheduling.Effort"

    model_config = {"frozen": True}


class TrainPilotConfig(BaseModel):
    provider: str = "azure-devops"
    organization: str
    project: str
    base_url: str | None = None
    auth: str = "env"
    token: str | None = None
    area_path: str
    limit: int = Field(default=100, ge=1, le=10000)
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=3, ge=0, le=10)
    group_delay_seconds: float = Field(default=0.1, ge=0)
    fields: FieldConfig = Field(default_factory=FieldConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_auth_token(self) -> TrainPilotConfig:
        token = (self.token or "").strip()
        if self.auth == "token":
            if not token:
                raise ValueError("token auth requires a non-empty token")
            return self
        if token:
            raise ValueError("token must be unset when auth is not 'token'")
        if self.auth not in {"env", "token"}:
            raise ValueError("auth must be one of: env, token")
        return self

    @model_validator(mode="after")
    def validate_area_path(self) -> TrainPilotConfig:
        if not self.area_path.strip():
            raise ValueError("area_path must not be empty")
        return self

    @property
    def resolved_base_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"https://dev.azure.com/{self.organization}"

    @property
    def aggregate_area_path(self) -> str:
        return self.engine.aggregate.area_path or self.area_path
