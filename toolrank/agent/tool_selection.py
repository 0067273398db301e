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

"""Bounded selection of scored tools.

Three strategies reduce a scored list to at most max_tools entries:
- priority: highest aggregate score first
- semantic: highest mean of keyword/domain/action components first
- hybrid: single greedy pass that discounts tools sharing a server or
  action category with tools already picked

An unrecognized strategy falls back to plain truncation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union

from toolrank.config.tool_scoring_defaults import ScoringTables, SelectorDefaults
from toolrank.core.types import ScoredTool, Tool

logger = logging.getLogger(__name__)


class SelectionStrategy(str, Enum):
    """Tool selection strategy."""

    PRIORITY = "priority"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: Union[str, "SelectionStrategy", None]) -> Optional["SelectionStrategy"]:
        """Parse a raw tag, returning None for unknown strategies.

        Tags match exactly; "Priority" is as unknown as "random".
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass
class ToolSelectionStats:
    """Statistics for tool selection tracking."""

    priority_selections: int = 0
    semantic_selections: int = 0
    hybrid_selections: int = 0
    fallback_selections: int = 0
    total_tools_selected: int = 0
    hybrid_rejections: int = 0

    def record_selection(self, method: str, num_tools: int) -> None:
        """Record a selection event.

        Args:
            method: Strategy used ('priority', 'semantic', 'hybrid', 'fallback')
            num_tools: Number of tools selected
        """
        if method == "priority":
            self.priority_selections += 1
        elif method == "semantic":
            self.semantic_selections += 1
        elif method == "hybrid":
            self.hybrid_selections += 1
        elif method == "fallback":
            self.fallback_selections += 1

        self.total_tools_selected += num_tools

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {
            "priority_selections": self.priority_selections,
            "semantic_selections": self.semantic_selections,
            "hybrid_selections": self.hybrid_selections,
            "fallback_selections": self.fallback_selections,
            "total_tools_selected": self.total_tools_selected,
            "hybrid_rejections": self.hybrid_rejections,
        }


def diversity_penalty(source_count: int, category_count: int) -> float:
    """Hybrid discount for prior picks sharing a server or category.

    Args:
        source_count: Tools already selected from the same server
        category_count: Tools already selected in the same inferred category

    Returns:
        Penalty in [0, 0.5]
    """
    source_penalty = min(
        source_count * SelectorDefaults.SOURCE_PENALTY_STEP,
        SelectorDefaults.SOURCE_PENALTY_CAP,
    )
    category_penalty = min(
        category_count * SelectorDefaults.CATEGORY_PENALTY_STEP,
        SelectorDefaults.CATEGORY_PENALTY_CAP,
    )
    return source_penalty + category_penalty


class ToolSelector:
    """Reduces a scored tool list to a bounded, diverse subset.

    Example:
        selector = ToolSelector()
        chosen = selector.select(scored, max_tools=10, strategy="hybrid")
    """

    def __init__(self, tables: Optional[ScoringTables] = None):
        """Initialize the selector.

        The selector holds only the read-only tables, so one instance can
        serve concurrent requests. Callers that want counters pass their
        own ToolSelectionStats to select().

        Args:
            tables: Reference tables; only action_patterns is used, for
                category inference. Defaults to the built-in tables.
        """
        self.tables = tables or ScoringTables.default()

    def select(
        self,
        scored_tools: Sequence[ScoredTool],
        max_tools: int = SelectorDefaults.MAX_TOOLS,
        strategy: Union[SelectionStrategy, str, None] = SelectorDefaults.STRATEGY,
        stats: Optional[ToolSelectionStats] = None,
    ) -> List[ScoredTool]:
        """Select at most max_tools entries.

        Args:
            scored_tools: Scored tools, usually already sorted by score_tools()
            max_tools: Upper bound on the result length
            strategy: priority, semantic or hybrid; anything else truncates
            stats: Optional caller-owned counters to record this selection in

        Returns:
            Selected tools. Never raises for an unknown strategy.
        """
        parsed = SelectionStrategy.parse(strategy)

        if parsed is SelectionStrategy.PRIORITY:
            selected = self.select_by_score(scored_tools, max_tools)
        elif parsed is SelectionStrategy.SEMANTIC:
            selected = self.select_by_semantic(scored_tools, max_tools)
        elif parsed is SelectionStrategy.HYBRID:
            selected = self.select_by_hybrid(scored_tools, max_tools, stats)
        else:
            logger.warning(
                f"Unknown selection strategy {strategy!r}; "
                f"keeping the first {max_tools} tools as given"
            )
            selected = list(scored_tools[: max(max_tools, 0)])

        method = parsed.value if parsed is not None else "fallback"
        if stats is not None:
            stats.record_selection(method, len(selected))
        logger.info(
            f"Selected {len(selected)} of {len(scored_tools)} tools ({method}): "
            f"{', '.join(t.name for t in selected)}"
        )
        return selected

    def select_by_score(
        self, scored_tools: Sequence[ScoredTool], max_tools: int
    ) -> List[ScoredTool]:
        """Highest aggregate score first; ties keep input order."""
        ranked = sorted(scored_tools, key=lambda t: t.score, reverse=True)
        return ranked[: max(max_tools, 0)]

    def select_by_semantic(
        self, scored_tools: Sequence[ScoredTool], max_tools: int
    ) -> List[ScoredTool]:
        """Highest keyword/domain/action mean first; type relevance is ignored."""
        ranked = sorted(
            scored_tools, key=lambda t: t.components.semantic_score(), reverse=True
        )
        return ranked[: max(max_tools, 0)]

    def select_by_hybrid(
        self,
        scored_tools: Sequence[ScoredTool],
        max_tools: int,
        stats: Optional[ToolSelectionStats] = None,
    ) -> List[ScoredTool]:
        """Greedy pass preferring diversity across servers and categories.

        Accepted tools keep their input order. A rejected tool is never
        reconsidered later in the pass.
        """
        selected: List[ScoredTool] = []
        server_counts: Dict[str, int] = {}
        category_counts: Dict[str, int] = {}

        for scored in scored_tools:
            if len(selected) >= max_tools:
                break

            server_count = server_counts.get(scored.server_name, 0)
            category = self.infer_tool_category(scored.tool)
            category_count = category_counts.get(category, 0)

            penalty = diversity_penalty(server_count, category_count)
            adjusted_score = scored.score * (1 - penalty)

            if adjusted_score > SelectorDefaults.HYBRID_MIN_ADJUSTED_SCORE:
                selected.append(scored)
                server_counts[scored.server_name] = server_count + 1
                category_counts[category] = category_count + 1
            else:
                if stats is not None:
                    stats.hybrid_rejections += 1
                logger.debug(
                    f"Hybrid skipped {scored.name} ({scored.server_name}/{category}): "
                    f"adjusted={adjusted_score:.3f}, penalty={penalty:.2f}"
                )

        return selected

    def infer_tool_category(self, tool: Tool) -> str:
        """First action category whose verb appears in the tool name."""
        name = tool.name.lower()
        for category, actions in self.tables.action_patterns.items():
            if any(action in name for action in actions):
                return category
        return SelectorDefaults.FALLBACK_CATEGORY
