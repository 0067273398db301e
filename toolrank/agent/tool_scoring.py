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

"""Relevance scoring of MCP tools against a classified user intent.

Each tool gets four sub-scores combined with fixed weights:

    keyword_match    x 0.35   keywords found in name/description/schema
    domain_relevance x 0.25   intent domains mentioned by the tool
    type_relevance   x 0.20   tool carries a verb expected for the intent type
    action_match     x 0.20   tool name carries a known action verb

All matching is lowercase substring matching; there is no stemming beyond
truncating a keyword to form a fuzzy prefix.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from toolrank.config.logging_config import TRACE
from toolrank.config.settings import ScoringParams
from toolrank.config.tool_scoring_defaults import ScoringDefaults, ScoringTables
from toolrank.core.types import (
    ScoreComponents,
    ScoredTool,
    Tool,
    ToolCandidate,
    ToolScore,
    UserIntent,
)

logger = logging.getLogger(__name__)

CandidateLike = Union[ToolCandidate, Tuple[Tool, str]]


def weighted_score(components: ScoreComponents) -> float:
    """Combine the four components with the fixed weights."""
    return (
        ScoringDefaults.KEYWORD_WEIGHT * components.keyword_match
        + ScoringDefaults.DOMAIN_WEIGHT * components.domain_relevance
        + ScoringDefaults.TYPE_WEIGHT * components.type_relevance
        + ScoringDefaults.ACTION_WEIGHT * components.action_match
    )


def _as_candidate(item: CandidateLike) -> ToolCandidate:
    if isinstance(item, ToolCandidate):
        return item
    tool, server_name = item
    return ToolCandidate(tool=tool, server_name=server_name)


class ToolScorer:
    """Scores tools against a user intent and raw prompt.

    Holds only the immutable reference tables it was built with; every
    call is independent.

    Example:
        scorer = ToolScorer()
        scored = await scorer.score_tools(candidates, intent, prompt)
    """

    def __init__(self, tables: Optional[ScoringTables] = None):
        """Initialize the scorer.

        Args:
            tables: Reference tables (domain priors, intent verbs, action
                categories). Defaults to the built-in tables.
        """
        self.tables = tables or ScoringTables.default()

    # -------------------------------------------------------------------------
    # Batch entry points
    # -------------------------------------------------------------------------

    async def score_tools(
        self,
        candidates: Iterable[CandidateLike],
        intent: UserIntent,
        prompt: str,
        params: Union[ScoringParams, Mapping, None] = None,
    ) -> List[ScoredTool]:
        """Score candidates, drop those under the threshold, sort descending.

        Async only to match the provider pipeline; it never awaits anything.

        Args:
            candidates: ToolCandidate items or (tool, server_name) pairs
            intent: Classified user intent
            prompt: Raw user prompt
            params: Optional overrides (domain weights, relevance threshold)

        Returns:
            ScoredTool list sorted by score, highest first. Equal scores keep
            their input order.
        """
        return self.score_all(candidates, intent, prompt, params)

    def score_all(
        self,
        candidates: Iterable[CandidateLike],
        intent: UserIntent,
        prompt: str,
        params: Union[ScoringParams, Mapping, None] = None,
    ) -> List[ScoredTool]:
        """Synchronous form of score_tools()."""
        params = ScoringParams.coerce(params)
        tables = self.tables.with_domain_weights(params.domain_weights)
        threshold = params.relevance_threshold

        scored: List[ScoredTool] = []
        total = 0
        for item in candidates:
            candidate = _as_candidate(item)
            total += 1
            result = self._score_with_tables(candidate.tool, intent, prompt, tables)
            if result.score < threshold:
                logger.debug(
                    f"Dropped {candidate.tool.name} ({candidate.server_name}): "
                    f"score={result.score:.3f} < threshold={threshold:.2f}"
                )
                continue
            scored.append(
                ScoredTool(
                    tool=candidate.tool,
                    server_name=candidate.server_name,
                    score=result.score,
                    components=result.components,
                    reasoning=result.reasoning,
                )
            )

        # sorted() is stable, so ties keep input order even with reverse=True
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)
        logger.info(
            f"Scored {total} tools for {intent.type_name} intent: "
            f"{len(ranked)} at or above threshold {threshold:.2f}"
        )
        return ranked

    # -------------------------------------------------------------------------
    # Single tool
    # -------------------------------------------------------------------------

    def score(
        self,
        tool: Tool,
        intent: UserIntent,
        prompt: str,
        domain_weights: Optional[Mapping[str, float]] = None,
    ) -> ToolScore:
        """Score one tool.

        Args:
            tool: Tool to score
            intent: Classified user intent
            prompt: Raw user prompt
            domain_weights: Optional overrides merged over the domain priors

        Returns:
            ToolScore with aggregate, components and reasoning
        """
        tables = self.tables.with_domain_weights(domain_weights)
        return self._score_with_tables(tool, intent, prompt, tables)

    def _score_with_tables(
        self, tool: Tool, intent: UserIntent, prompt: str, tables: ScoringTables
    ) -> ToolScore:
        components = ScoreComponents(
            keyword_match=self.keyword_match(tool, intent.keywords, prompt),
            domain_relevance=self.domain_relevance(
                tool, intent.domains, tables.domain_weights
            ),
            type_relevance=self.type_relevance(tool, intent.type_name),
            action_match=self.action_match(tool, intent.type_name, prompt),
        )
        score = weighted_score(components)
        reasoning = self.generate_reasoning(components, intent)

        logger.debug(
            f"{tool.name}: score={score:.3f} "
            f"(keyword={components.keyword_match:.2f}, "
            f"domain={components.domain_relevance:.2f}, "
            f"type={components.type_relevance:.2f}, "
            f"action={components.action_match:.2f})"
        )
        return ToolScore(score=score, components=components, reasoning=reasoning)

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    def keyword_match(self, tool: Tool, keywords: Sequence[str], prompt: str) -> float:
        """Fraction of intent keywords found in the tool's text.

        A keyword found verbatim earns 1.0; otherwise its prefix of
        max(4, len - 2) characters earns 0.7. A tool named in the prompt
        adds a flat 1.0 to the total before it is averaged and capped at 1.0.
        """
        if not keywords:
            return 0.0

        tool_text = tool.search_text()
        match_score = 0.0

        for keyword in keywords:
            keyword_lower = keyword.lower()
            if keyword_lower in tool_text:
                match_score += ScoringDefaults.DIRECT_KEYWORD_AWARD
                logger.log(TRACE, f"{tool.name}: keyword '{keyword_lower}' matched")
                continue

            stem_length = max(
                ScoringDefaults.MIN_STEM_LENGTH,
                len(keyword_lower) - ScoringDefaults.STEM_TRIM,
            )
            stem = keyword_lower[:stem_length]
            if stem in tool_text:
                match_score += ScoringDefaults.STEM_KEYWORD_AWARD
                logger.log(TRACE, f"{tool.name}: keyword stem '{stem}' matched")

        if tool.name.lower() in prompt.lower():
            match_score += ScoringDefaults.NAME_IN_PROMPT_BONUS

        return min(match_score / len(keywords), 1.0)

    def domain_relevance(
        self,
        tool: Tool,
        domains: Sequence[str],
        domain_weights: Optional[Mapping[str, float]] = None,
    ) -> float:
        """Mean weight of the intent domains the tool mentions.

        No domains at all is neutral (0.5); domains that all miss score 0.
        """
        if not domains:
            return ScoringDefaults.NEUTRAL_DOMAIN_SCORE

        weights = self.tables.domain_weights if domain_weights is None else domain_weights
        tool_text = tool.label_text()

        total_relevance = 0.0
        match_count = 0
        for domain in domains:
            weight = weights.get(domain, ScoringDefaults.DEFAULT_DOMAIN_WEIGHT)
            if domain.lower() in tool_text:
                total_relevance += weight
                match_count += 1

        return total_relevance / match_count if match_count > 0 else 0.0

    def type_relevance(self, tool: Tool, intent_type: str) -> float:
        """1.0 if the tool carries a verb expected for the intent type, else 0.3."""
        expected_actions = self.tables.actions_for_intent(intent_type)
        if not expected_actions:
            return ScoringDefaults.UNKNOWN_TYPE_SCORE

        tool_name = tool.name.lower()
        tool_desc = (tool.description or "").lower()
        for action in expected_actions:
            if action in tool_name or action in tool_desc:
                return ScoringDefaults.TYPE_MATCH_SCORE

        return ScoringDefaults.TYPE_BASELINE_SCORE

    def action_match(self, tool: Tool, intent_type: str, prompt: str) -> float:
        """Best action-verb evidence found in the tool name.

        Both passes raise one shared running maximum; neither resets it.
        """
        tool_name = tool.name.lower()
        prompt_lower = prompt.lower()
        match_score = 0.0

        # Pass 1: known action verbs, stronger when the prompt uses them too
        for actions in self.tables.action_patterns.values():
            for action in actions:
                if action not in tool_name:
                    continue
                if action in prompt_lower:
                    match_score = max(match_score, ScoringDefaults.ACTION_PROMPT_MATCH_SCORE)
                else:
                    match_score = max(match_score, ScoringDefaults.ACTION_NAME_ONLY_SCORE)

        # Pass 2: verbs expected for this intent type
        for action in self.tables.actions_for_intent(intent_type):
            if action in tool_name:
                match_score = max(match_score, ScoringDefaults.INTENT_ACTION_SCORE)

        return match_score

    # -------------------------------------------------------------------------
    # Reasoning
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_reasoning(components: ScoreComponents, intent: UserIntent) -> str:
        """Explain a score with one clause per component above 0.7."""
        threshold = ScoringDefaults.REASONING_THRESHOLD
        reasons: List[str] = []

        if components.keyword_match > threshold:
            percent = math.floor(components.keyword_match * 100 + 0.5)
            reasons.append(f"Strong keyword match ({percent}%)")

        if components.domain_relevance > threshold:
            reasons.append(f"Highly relevant to {', '.join(intent.domains)} domains")

        if components.type_relevance > threshold:
            reasons.append(f"Well-suited for {intent.type_name} tasks")

        if components.action_match > threshold:
            reasons.append("Action matches user intent")

        if not reasons:
            reasons.append("General utility tool")

        return "; ".join(reasons)
