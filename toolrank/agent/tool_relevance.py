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

"""Tool relevance service: score, filter and select MCP tools in one call."""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Union

from toolrank.agent.tool_scoring import CandidateLike, ToolScorer
from toolrank.agent.tool_selection import SelectionStrategy, ToolSelectionStats, ToolSelector
from toolrank.config.logging_config import configure_logging_levels
from toolrank.config.settings import ScoringParams, ToolRankSettings
from toolrank.config.tool_scoring_defaults import ScoringTables
from toolrank.core.types import ScoredTool, UserIntent

logger = logging.getLogger(__name__)


class ToolRelevanceService:
    """Scorer and selector sharing one set of reference tables.

    Per-call params win over the service settings, which win over the
    built-in defaults.

    Example:
        service = ToolRelevanceService()
        tools = await service.rank_tools(
            candidates, intent, prompt, {"maxTools": 8, "selectionStrategy": "priority"}
        )
    """

    def __init__(
        self,
        tables: Optional[ScoringTables] = None,
        settings: Optional[ToolRankSettings] = None,
    ):
        self.tables = tables or ScoringTables.default()
        self.settings = settings or ToolRankSettings()
        self.scorer = ToolScorer(self.tables)
        self.selector = ToolSelector(self.tables)

        # Unset leaves the host application's logging levels alone
        if self.settings.log_level:
            configure_logging_levels(self.settings.log_level)

    def _resolve(self, params: Union[ScoringParams, Mapping, None]) -> ScoringParams:
        params = ScoringParams.coerce(params)
        defaults = self.settings.to_params()

        domain_weights = dict(defaults.domain_weights or {})
        domain_weights.update(params.domain_weights or {})

        return ScoringParams(
            domain_weights=domain_weights or None,
            tool_relevance_threshold=(
                params.tool_relevance_threshold
                if params.tool_relevance_threshold is not None
                else defaults.tool_relevance_threshold
            ),
            max_tools=params.max_tools if params.max_tools is not None else defaults.max_tools,
            selection_strategy=params.selection_strategy or defaults.selection_strategy,
        )

    async def score_tools(
        self,
        candidates: Iterable[CandidateLike],
        intent: UserIntent,
        prompt: str,
        params: Union[ScoringParams, Mapping, None] = None,
    ) -> List[ScoredTool]:
        """Score and threshold-filter candidates, highest score first."""
        return await self.scorer.score_tools(candidates, intent, prompt, self._resolve(params))

    def select_tools(
        self,
        scored_tools: List[ScoredTool],
        max_tools: Optional[int] = None,
        strategy: Union[SelectionStrategy, str, None] = None,
        stats: Optional[ToolSelectionStats] = None,
    ) -> List[ScoredTool]:
        """Select from already-scored tools, defaulting to the service settings."""
        return self.selector.select(
            scored_tools,
            max_tools if max_tools is not None else self.settings.max_tools,
            strategy if strategy is not None else self.settings.selection_strategy,
            stats,
        )

    async def rank_tools(
        self,
        candidates: Iterable[CandidateLike],
        intent: UserIntent,
        prompt: str,
        params: Union[ScoringParams, Mapping, None] = None,
        stats: Optional[ToolSelectionStats] = None,
    ) -> List[ScoredTool]:
        """Score, filter and select in one pass.

        Args:
            candidates: ToolCandidate items or (tool, server_name) pairs
            intent: Classified user intent
            prompt: Raw user prompt
            params: Optional overrides; maxTools and selectionStrategy drive
                the selection step
            stats: Optional caller-owned selection counters

        Returns:
            The selected tools
        """
        resolved = self._resolve(params)
        scored = await self.scorer.score_tools(candidates, intent, prompt, resolved)
        selected = self.selector.select(
            scored, resolved.max_tools, resolved.selection_strategy, stats
        )
        logger.debug(
            f"Ranked tools for {intent.type_name}: {len(scored)} scored, "
            f"{len(selected)} selected"
        )
        return selected
