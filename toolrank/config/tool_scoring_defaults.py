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

"""Centralized defaults for tool scoring and selection.

This module is the single source of truth for the constants and reference
tables used by ToolScorer and ToolSelector:

- ScoringDefaults: component weights and per-component award values
- SelectorDefaults: result limits and the hybrid diversity penalty
- ScoringTables: domain priors, intent verbs and action categories

Tables are immutable and handed to the scorer/selector at construction,
so tests and callers can swap in their own without touching process state.

Usage:
    from toolrank.config.tool_scoring_defaults import ScoringTables

    tables = ScoringTables.default().with_domain_weights({"solidity": 0.4})
    scorer = ToolScorer(tables=tables)
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Final, Mapping, Optional, Tuple


# =============================================================================
# Scoring Defaults
# =============================================================================


@dataclass(frozen=True)
class ScoringDefaults:
    """Default values for relevance scoring.

    The four component weights are fixed and sum to 1.0.
    """

    KEYWORD_WEIGHT: Final[float] = 0.35
    DOMAIN_WEIGHT: Final[float] = 0.25
    TYPE_WEIGHT: Final[float] = 0.20
    ACTION_WEIGHT: Final[float] = 0.20

    # Components strictly above this value earn a reasoning clause
    REASONING_THRESHOLD: Final[float] = 0.7

    # Keyword match awards
    DIRECT_KEYWORD_AWARD: Final[float] = 1.0
    STEM_KEYWORD_AWARD: Final[float] = 0.7
    NAME_IN_PROMPT_BONUS: Final[float] = 1.0
    MIN_STEM_LENGTH: Final[int] = 4
    STEM_TRIM: Final[int] = 2

    # Domain relevance
    NEUTRAL_DOMAIN_SCORE: Final[float] = 0.5
    DEFAULT_DOMAIN_WEIGHT: Final[float] = 0.5

    # Type relevance
    TYPE_MATCH_SCORE: Final[float] = 1.0
    TYPE_BASELINE_SCORE: Final[float] = 0.3
    UNKNOWN_TYPE_SCORE: Final[float] = 0.5

    # Action match
    ACTION_PROMPT_MATCH_SCORE: Final[float] = 1.0
    ACTION_NAME_ONLY_SCORE: Final[float] = 0.6
    INTENT_ACTION_SCORE: Final[float] = 0.8

    # Tools scoring strictly below this are dropped
    RELEVANCE_THRESHOLD: Final[float] = 0.3


# =============================================================================
# Selector Defaults
# =============================================================================


@dataclass(frozen=True)
class SelectorDefaults:
    """Default values for bounded tool selection."""

    MAX_TOOLS: Final[int] = 15
    STRATEGY: Final[str] = "hybrid"

    # Hybrid diversity penalty: per prior pick from the same source/category
    SOURCE_PENALTY_STEP: Final[float] = 0.05
    SOURCE_PENALTY_CAP: Final[float] = 0.2
    CATEGORY_PENALTY_STEP: Final[float] = 0.10
    CATEGORY_PENALTY_CAP: Final[float] = 0.3

    # Adjusted score must be strictly above this to be accepted
    HYBRID_MIN_ADJUSTED_SCORE: Final[float] = 0.15

    FALLBACK_CATEGORY: Final[str] = "general"


# =============================================================================
# Reference Tables
# =============================================================================


DEFAULT_DOMAIN_WEIGHTS: Final[Mapping[str, float]] = MappingProxyType(
    {
        "solidity": 1.0,
        "javascript": 0.8,
        "react": 0.7,
        "web3": 0.9,
        "testing": 0.6,
        "deployment": 0.7,
        "security": 1.0,
        "defi": 0.8,
        "nft": 0.7,
        "compilation": 0.9,
        "debugging": 0.9,
        "file": 0.7,
        "tutorial": 0.6,
    }
)

# Verbs a tool is expected to carry for each intent type
DEFAULT_INTENT_ACTIONS: Final[Mapping[str, Tuple[str, ...]]] = MappingProxyType(
    {
        "coding": ("compile", "build", "create", "write", "generate", "scaffold"),
        "documentation": ("read", "list", "get", "fetch", "show"),
        "debugging": ("debug", "trace", "inspect", "breakpoint", "step", "watch"),
        "explanation": ("read", "get", "analyze", "scan", "explain"),
        "generation": ("create", "generate", "scaffold", "write", "build"),
        "completion": ("get", "read", "list", "fetch", "autocomplete"),
    }
)

# Action verbs by tool category; order matters for category inference
DEFAULT_ACTION_PATTERNS: Final[Mapping[str, Tuple[str, ...]]] = MappingProxyType(
    {
        "file_operations": (
            "read",
            "write",
            "create",
            "delete",
            "move",
            "copy",
            "list",
            "exists",
        ),
        "compilation": ("compile", "build", "verify", "optimize"),
        "deployment": ("deploy", "send", "call", "execute", "run"),
        "debugging": ("debug", "breakpoint", "step", "watch", "trace", "evaluate"),
        "analysis": ("scan", "analyze", "check", "inspect", "validate"),
        "configuration": ("set", "get", "config", "update"),
        "tutorial": ("tutorial", "learn", "guide", "start"),
    }
)


def _freeze(table: Mapping[str, object]) -> Mapping:
    if isinstance(table, MappingProxyType):
        return table
    frozen = {}
    for key, value in table.items():
        if isinstance(value, (list, set, frozenset)):
            value = tuple(value)
        frozen[key] = value
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class ScoringTables:
    """Immutable reference data shared by the scorer and the selector.

    Attributes:
        domain_weights: Prior relevance weight per domain name
        intent_actions: Expected action verbs per intent type
        action_patterns: Action verbs per tool category, in inference order
    """

    domain_weights: Mapping[str, float] = field(default_factory=lambda: DEFAULT_DOMAIN_WEIGHTS)
    intent_actions: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: DEFAULT_INTENT_ACTIONS)
    action_patterns: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: DEFAULT_ACTION_PATTERNS)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ to normalize caller-supplied dicts
        object.__setattr__(self, "domain_weights", _freeze(self.domain_weights))
        object.__setattr__(self, "intent_actions", _freeze(self.intent_actions))
        object.__setattr__(self, "action_patterns", _freeze(self.action_patterns))

    @classmethod
    def default(cls) -> "ScoringTables":
        """Get the built-in reference tables."""
        return _DEFAULT_TABLES

    def with_domain_weights(
        self, overrides: Optional[Mapping[str, float]]
    ) -> "ScoringTables":
        """Return a copy with domain weight overrides merged over the priors.

        Explicit override entries win over built-in values.
        """
        if not overrides:
            return self
        merged = dict(self.domain_weights)
        merged.update(overrides)
        return replace(self, domain_weights=merged)

    def actions_for_intent(self, intent_type: str) -> Tuple[str, ...]:
        """Get expected verbs for an intent type (empty when unrecognized)."""
        return tuple(self.intent_actions.get(intent_type, ()))


_DEFAULT_TABLES = ScoringTables()
