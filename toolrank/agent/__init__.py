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

"""Agent module - tool scoring, selection and the relevance service."""

from toolrank.agent.tool_relevance import ToolRelevanceService
from toolrank.agent.tool_scoring import ToolScorer, weighted_score
from toolrank.agent.tool_selection import (
    SelectionStrategy,
    ToolSelectionStats,
    ToolSelector,
    diversity_penalty,
)

__all__ = [
    "SelectionStrategy",
    "ToolRelevanceService",
    "ToolScorer",
    "ToolSelectionStats",
    "ToolSelector",
    "diversity_penalty",
    "weighted_score",
]
