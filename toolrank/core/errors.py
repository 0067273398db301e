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


"""Error types for toolrank.

Scoring and selection never raise for well-typed input. Errors only
surface at the edges:
- Configuration loading and validation (settings, per-call params, YAML)
- Dict adapters that turn raw MCP payloads into typed tools and intents
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """What went wrong, for callers that branch on the failure."""

    CONFIG_INVALID = "config_invalid"
    CONFIG_MISSING = "config_missing"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


class ToolRankError(Exception):
    """Base exception for all toolrank errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        details: Optional[Dict[str, Any]] = None,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.details = details or {}
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        if self.recovery_hint:
            return f"{self.message} ({self.recovery_hint})"
        return self.message


class ConfigurationError(ToolRankError):
    """Invalid, missing or unreadable scoring configuration.

    config_key names the first offending setting when validation failed.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.CONFIG_INVALID,
    ):
        if category is ErrorCategory.CONFIG_MISSING:
            hint = "Check the settings file path"
        elif config_key:
            hint = f"Fix '{config_key}': weights and thresholds lie in [0, 1], maxTools >= 1"
        else:
            hint = "Settings must be a mapping of known keys"
        super().__init__(
            message,
            category=category,
            details={"config_key": config_key},
            recovery_hint=hint,
        )
        self.config_key = config_key


class InvalidInputError(ToolRankError):
    """A raw tool or intent payload is missing a required field."""

    def __init__(self, message: str, field: str, value: Optional[Any] = None):
        super().__init__(
            message,
            category=ErrorCategory.INVALID_INPUT,
            details={"field": field, "value": None if value is None else str(value)},
            recovery_hint=f"Supply a non-empty '{field}'",
        )
        self.field = field
        self.value = value
