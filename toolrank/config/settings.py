# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration management for tool scoring."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolrank.config.tool_scoring_defaults import ScoringDefaults, SelectorDefaults
from toolrank.core.errors import ConfigurationError, ErrorCategory

logger = logging.getLogger(__name__)


def _validate_domain_weights(v: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
    if v is None:
        return None
    for domain, weight in v.items():
        if not (0.0 <= weight <= 1.0):
            raise ValueError(f"weight for domain '{domain}' must be between 0.0 and 1.0, got {weight}")
    return v


def _first_error_key(exc: ValidationError) -> Optional[str]:
    errors = exc.errors()
    if not errors or not errors[0].get("loc"):
        return None
    return str(errors[0]["loc"][0])


class ScoringParams(BaseModel):
    """Per-call overrides supplied by the provider pipeline.

    Field names accept both snake_case and the camelCase keys used by the
    MCP provider params (domainWeights, toolRelevanceThreshold, maxTools,
    selectionStrategy).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    domain_weights: Optional[Dict[str, float]] = Field(None, alias="domainWeights")
    tool_relevance_threshold: Optional[float] = Field(
        None, ge=0.0, le=1.0, alias="toolRelevanceThreshold"
    )
    max_tools: Optional[int] = Field(None, ge=1, alias="maxTools")
    # Kept as a raw string: unknown strategies degrade to truncation, not errors
    selection_strategy: Optional[str] = Field(None, alias="selectionStrategy")

    @field_validator("domain_weights")
    @classmethod
    def validate_domain_weights(cls, v: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
        return _validate_domain_weights(v)

    @property
    def relevance_threshold(self) -> float:
        """Threshold in effect; an absent value means the 0.3 default."""
        if self.tool_relevance_threshold is None:
            return ScoringDefaults.RELEVANCE_THRESHOLD
        return self.tool_relevance_threshold

    @classmethod
    def coerce(
        cls, params: Union["ScoringParams", Mapping[str, Any], None]
    ) -> "ScoringParams":
        """Accept params as a model, a plain mapping, or None.

        Raises:
            ConfigurationError: If a mapping fails validation
        """
        if params is None:
            return cls()
        if isinstance(params, cls):
            return params
        try:
            return cls.model_validate(dict(params))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid scoring params: {e}",
                config_key=_first_error_key(e),
            ) from e


class ToolRankSettings(BaseSettings):
    """Process-wide defaults, read from TOOLRANK_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLRANK_",
        env_file=".env" if not os.getenv("TOOLRANK_SKIP_ENV_FILE") else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    relevance_threshold: float = Field(ScoringDefaults.RELEVANCE_THRESHOLD, ge=0.0, le=1.0)
    max_tools: int = Field(SelectorDefaults.MAX_TOOLS, ge=1)
    selection_strategy: str = SelectorDefaults.STRATEGY
    domain_weights: Dict[str, float] = Field(default_factory=dict)

    # Logging
    # Unset leaves the host application's levels alone
    log_level: Optional[str] = None

    @field_validator("domain_weights")
    @classmethod
    def validate_domain_weights(cls, v: Dict[str, float]) -> Dict[str, float]:
        return _validate_domain_weights(v) or {}

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ToolRankSettings":
        """Load settings from a YAML file.

        The file holds a mapping, either at the top level or under a
        "toolrank" key. Environment variables still apply to keys the
        file leaves out.

        Raises:
            ConfigurationError: If the file is missing, unparsable or invalid
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigurationError(
                f"Settings file not found: {config_path}",
                category=ErrorCategory.CONFIG_MISSING,
            )

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("toolrank"), dict):
            data = data["toolrank"]
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping in {config_path}")

        try:
            settings = cls(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid settings in {config_path}: {e}",
                config_key=_first_error_key(e),
            ) from e

        logger.debug(f"Loaded tool scoring settings from {config_path}")
        return settings

    def to_params(self) -> ScoringParams:
        """Express these defaults as per-call params."""
        return ScoringParams(
            domain_weights=dict(self.domain_weights) or None,
            tool_relevance_threshold=self.relevance_threshold,
            max_tools=self.max_tools,
            selection_strategy=self.selection_strategy,
        )
