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

"""Typed dataclasses for scoring inputs and outputs.

Design Principles:
    - All fields are explicitly typed
    - Optional fields use Optional[T] with None defaults
    - Immutable (frozen=True); scoring wraps tools, it never mutates them
    - Raw MCP payloads enter through from_dict()/from_mcp_tool() adapters

Usage:
    candidate = ToolCandidate.from_mcp_tool(
        {"name": "compile_contract", "inputSchema": {...}, "_mcpServer": "remix"}
    )
    intent = UserIntent.from_dict({"type": "coding", "keywords": ["compile"]})
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from toolrank.core.errors import InvalidInputError


# =============================================================================
# Intent
# =============================================================================


class IntentType(str, Enum):
    """Closed set of user intent types produced by the intent classifier."""

    CODING = "coding"
    DOCUMENTATION = "documentation"
    DEBUGGING = "debugging"
    EXPLANATION = "explanation"
    GENERATION = "generation"
    COMPLETION = "completion"

    @classmethod
    def parse(cls, value: Union[str, "IntentType", None]) -> Optional["IntentType"]:
        """Parse a raw value, returning None for unknown types.

        Matching is exact, so "Coding" is an unrecognized type.
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


def _as_tuple(values: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class UserIntent:
    """Classified user intent.

    Attributes:
        type: Intent type; unknown raw strings are kept and score as unrecognized
        keywords: Free-text keywords extracted from the prompt
        domains: Free-text domain names (e.g. "solidity", "react")
    """

    type: Union[IntentType, str]
    keywords: Tuple[str, ...] = ()
    domains: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        parsed = IntentType.parse(self.type)
        object.__setattr__(self, "type", parsed if parsed is not None else self.type)
        object.__setattr__(self, "keywords", _as_tuple(self.keywords))
        object.__setattr__(self, "domains", _as_tuple(self.domains))

    @property
    def type_name(self) -> str:
        """Plain string form of the intent type."""
        if isinstance(self.type, IntentType):
            return self.type.value
        return str(self.type)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UserIntent:
        """Build an intent from a classifier payload.

        Raises:
            InvalidInputError: If the payload has no "type"
        """
        if "type" not in data:
            raise InvalidInputError("Intent payload has no 'type'", field="type")
        return cls(
            type=data["type"],
            keywords=_as_tuple(data.get("keywords")),
            domains=_as_tuple(data.get("domains")),
        )


# =============================================================================
# Tools
# =============================================================================


def _json_numbers(value: Any) -> Any:
    """Normalize floats so schema text reads like JSON.stringify output.

    Integral floats render without a fraction (1.0 -> 1) and non-finite
    floats render as null.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, Mapping):
        return {key: _json_numbers(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_numbers(item) for item in value]
    return value


@dataclass(frozen=True)
class Tool:
    """Catalog entry for an external tool.

    Attributes:
        name: Tool name, unique within its source
        description: Optional free-text description
        input_schema: Structured input schema (JSON-serializable)
    """

    name: str
    description: Optional[str] = None
    input_schema: Any = field(default=None, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Tool:
        """Build a tool from an MCP tool payload.

        Accepts both "inputSchema" (MCP wire name) and "input_schema".

        Raises:
            InvalidInputError: If the payload has no "name"
        """
        name = data.get("name")
        if not name:
            raise InvalidInputError("Tool payload has no 'name'", field="name", value=name)
        schema = data.get("inputSchema", data.get("input_schema"))
        return cls(name=str(name), description=data.get("description"), input_schema=schema)

    def schema_text(self) -> str:
        """Compact JSON serialization of the input schema ("" when absent)."""
        if self.input_schema is None:
            return ""
        return json.dumps(
            _json_numbers(self.input_schema),
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )

    def search_text(self) -> str:
        """Lowercase text used for keyword matching: name, description, schema."""
        return " ".join([self.name, self.description or "", self.schema_text()]).lower()

    def label_text(self) -> str:
        """Lowercase name and description, used for domain and type matching."""
        return " ".join([self.name, self.description or ""]).lower()


@dataclass(frozen=True)
class ToolCandidate:
    """A tool paired with the identifier of the server that provides it."""

    tool: Tool
    server_name: str

    @classmethod
    def from_mcp_tool(
        cls, data: Mapping[str, Any], server_name: Optional[str] = None
    ) -> ToolCandidate:
        """Build a candidate from an MCP tool payload.

        The server name falls back to the payload's "_mcpServer" key.
        """
        source = server_name if server_name is not None else data.get("_mcpServer", "")
        return cls(tool=Tool.from_dict(data), server_name=str(source))


# =============================================================================
# Scores
# =============================================================================


@dataclass(frozen=True)
class ScoreComponents:
    """The four relevance sub-scores, each nominally in [0, 1]."""

    keyword_match: float = 0.0
    domain_relevance: float = 0.0
    type_relevance: float = 0.0
    action_match: float = 0.0

    def semantic_score(self) -> float:
        """Mean of keyword, domain and action components (type excluded)."""
        return (self.keyword_match + self.domain_relevance + self.action_match) / 3

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary using the MCP provider's field names."""
        return {
            "keywordMatch": self.keyword_match,
            "domainRelevance": self.domain_relevance,
            "typeRelevance": self.type_relevance,
            "actionMatch": self.action_match,
        }


@dataclass(frozen=True)
class ToolScore:
    """Aggregate score for one tool, before it is paired with its source."""

    score: float
    components: ScoreComponents
    reasoning: str


@dataclass(frozen=True)
class ScoredTool:
    """A tool annotated with its relevance score and explanation."""

    tool: Tool
    server_name: str
    score: float
    components: ScoreComponents
    reasoning: str

    @property
    def name(self) -> str:
        return self.tool.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool": {
                "name": self.tool.name,
                "description": self.tool.description,
                "inputSchema": self.tool.input_schema,
            },
            "serverName": self.server_name,
            "score": self.score,
            "components": self.components.to_dict(),
            "reasoning": self.reasoning,
        }

    def __repr__(self) -> str:
        return (
            f"ScoredTool(name={self.tool.name}, server={self.server_name}, "
            f"score={self.score:.3f})"
        )
