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

"""
toolrank - relevance scoring and selection of MCP tools.

Ranks a catalog of external tools against a classified user intent and the
raw prompt, then picks a bounded, diverse subset for the model to see.

Usage:
    from toolrank import ToolCandidate, ToolRelevanceService, UserIntent

    service = ToolRelevanceService()
    intent = UserIntent(type="coding", keywords=("compile",), domains=("solidity",))
    tools = await service.rank_tools(candidates, intent, "please compile my contract")
"""

__version__ = "0.1.0"
__license__ = "Apache-2.0"

from toolrank.agent.tool_relevance import ToolRelevanceService
from toolrank.agent.tool_scoring import ToolScorer
from toolrank.agent.tool_selection import SelectionStrategy, ToolSelectionStats, ToolSelector
from toolrank.config.settings import ScoringParams, ToolRankSettings
from toolrank.config.tool_scoring_defaults import ScoringTables
from toolrank.core.errors import ConfigurationError, InvalidInputError, ToolRankError
from toolrank.core.types import (
    IntentType,
    ScoreComponents,
    ScoredTool,
    Tool,
    ToolCandidate,
    ToolScore,
    UserIntent,
)

__all__ = [
    "ConfigurationError",
    "IntentType",
    "InvalidInputError",
    "ScoreComponents",
    "ScoredTool",
    "ScoringParams",
    "ScoringTables",
    "SelectionStrategy",
    "Tool",
    "ToolCandidate",
    "ToolRankError",
    "ToolRankSettings",
    "ToolRelevanceService",
    "ToolScore",
    "ToolScorer",
    "ToolSelectionStats",
    "ToolSelector",
    "UserIntent",
]
