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

"""Tests for ToolSelector strategies and category inference."""

import logging

import pytest

from toolrank.agent.tool_selection import (
    SelectionStrategy,
    ToolSelectionStats,
    ToolSelector,
    diversity_penalty,
)
from toolrank.config.tool_scoring_defaults import ScoringTables
from toolrank.core.types import ScoreComponents, Tool


@pytest.fixture
def selector():
    return ToolSelector()


class TestSelectionStrategy:
    """Tests for strategy tag parsing."""

    def test_parse_known_tags(self):
        assert SelectionStrategy.parse("priority") is SelectionStrategy.PRIORITY
        assert SelectionStrategy.parse("semantic") is SelectionStrategy.SEMANTIC
        assert SelectionStrategy.parse(SelectionStrategy.HYBRID) is SelectionStrategy.HYBRID

    def test_parse_unknown_tags(self):
        assert SelectionStrategy.parse("random") is None
        assert SelectionStrategy.parse(None) is None

    @pytest.mark.parametrize("tag", ["PRIORITY", "Semantic", "Hybrid", " hybrid"])
    def test_parse_is_case_sensitive(self, tag):
        assert SelectionStrategy.parse(tag) is None


class TestCategoryInference:
    """Tests for infer_tool_category."""

    @pytest.mark.parametrize(
        "name,category",
        [
            ("read_file", "file_operations"),
            ("compile_contract", "compilation"),
            ("deploy_contract", "deployment"),
            ("set_breakpoint", "debugging"),
            ("scan_vulnerabilities", "analysis"),
            ("update_settings", "configuration"),
            ("start_tutorial", "tutorial"),
            ("foo", "general"),
        ],
    )
    def test_categories(self, selector, name, category):
        assert selector.infer_tool_category(Tool(name=name)) == category

    def test_first_category_in_table_order_wins(self, selector):
        # "create" (file_operations) precedes "breakpoint" (debugging)
        assert selector.infer_tool_category(Tool(name="create_breakpoint")) == "file_operations"
        # "debug" (debugging) precedes "get" (configuration)
        assert selector.infer_tool_category(Tool(name="get_debug_trace")) == "debugging"

    def test_case_insensitive(self, selector):
        assert selector.infer_tool_category(Tool(name="DeployContract")) == "deployment"

    def test_description_is_ignored(self, selector):
        tool = Tool(name="foo", description="deploy contracts")
        assert selector.infer_tool_category(tool) == "general"

    def test_custom_action_table(self):
        selector = ToolSelector(ScoringTables(action_patterns={"custom": ["foo"]}))
        assert selector.infer_tool_category(Tool(name="foo_bar")) == "custom"
        assert selector.infer_tool_category(Tool(name="read_file")) == "general"


class TestDiversityPenalty:
    """Tests for the hybrid penalty formula."""

    def test_no_prior_picks(self):
        assert diversity_penalty(0, 0) == 0.0

    def test_one_prior_pick(self):
        assert diversity_penalty(1, 1) == pytest.approx(0.15)

    def test_two_prior_picks(self):
        assert diversity_penalty(2, 2) == pytest.approx(0.30)

    def test_caps(self):
        assert diversity_penalty(4, 0) == pytest.approx(0.2)
        assert diversity_penalty(100, 0) == pytest.approx(0.2)
        assert diversity_penalty(0, 3) == pytest.approx(0.3)
        assert diversity_penalty(100, 100) == pytest.approx(0.5)


class TestPrioritySelection:
    """Tests for the priority strategy."""

    def test_sorts_and_truncates(self, selector, scored_factory):
        tools = [
            scored_factory("a", 0.4),
            scored_factory("b", 0.9),
            scored_factory("c", 0.6),
        ]

        result = selector.select(tools, 2, "priority")

        assert [t.name for t in result] == ["b", "c"]

    def test_ties_keep_input_order(self, selector, scored_factory):
        tools = [scored_factory("a", 0.5), scored_factory("b", 0.7), scored_factory("c", 0.5)]

        result = selector.select(tools, 3, SelectionStrategy.PRIORITY)

        assert [t.name for t in result] == ["b", "a", "c"]

    def test_does_not_mutate_input(self, selector, scored_factory):
        tools = [scored_factory("a", 0.1), scored_factory("b", 0.9)]
        selector.select(tools, 2, "priority")
        assert [t.name for t in tools] == ["a", "b"]

    def test_max_tools_larger_than_input(self, selector, scored_factory):
        tools = [scored_factory("a", 0.1)]
        assert len(selector.select(tools, 10, "priority")) == 1


class TestSemanticSelection:
    """Tests for the semantic strategy."""

    def test_orders_by_semantic_score_ignoring_type(self, selector, scored_factory):
        type_heavy = scored_factory(
            "type_heavy",
            0.9,
            components=ScoreComponents(
                keyword_match=0.2, domain_relevance=0.2, type_relevance=1.0, action_match=0.2
            ),
        )
        keyword_heavy = scored_factory(
            "keyword_heavy",
            0.5,
            components=ScoreComponents(
                keyword_match=0.9, domain_relevance=0.5, type_relevance=0.0, action_match=0.6
            ),
        )

        result = selector.select([type_heavy, keyword_heavy], 2, "semantic")

        assert [t.name for t in result] == ["keyword_heavy", "type_heavy"]

    def test_truncates(self, selector, scored_factory):
        tools = [
            scored_factory(str(i), 0.5, components=ScoreComponents(keyword_match=i / 10))
            for i in range(5)
        ]

        result = selector.select(tools, 2, "semantic")

        assert [t.name for t in result] == ["4", "3"]


class TestHybridSelection:
    """Tests for the diversity-aware hybrid strategy."""

    def test_same_source_and_category_all_accepted(self, selector, scored_factory):
        tools = [
            scored_factory("read_a", 0.9),
            scored_factory("read_b", 0.85),
            scored_factory("read_c", 0.8),
        ]

        result = selector.select(tools, 3, "hybrid")

        assert [t.name for t in result] == ["read_a", "read_b", "read_c"]

    def test_rejects_when_adjusted_score_too_low(self, selector, scored_factory):
        tools = [
            scored_factory("read_a", 0.9),
            # penalty 0.15 -> 0.2 * 0.85 = 0.17, accepted
            scored_factory("read_b", 0.2),
            # penalty 0.30 -> 0.18 * 0.70 = 0.126, rejected
            scored_factory("read_c", 0.18),
            # new server, general category: no penalty -> 0.16, accepted
            scored_factory("misc", 0.16, server="other"),
        ]

        stats = ToolSelectionStats()

        result = selector.select(tools, 10, "hybrid", stats)

        assert [t.name for t in result] == ["read_a", "read_b", "misc"]
        assert stats.hybrid_rejections == 1

    def test_threshold_is_strict(self, selector, scored_factory):
        assert selector.select([scored_factory("foo", 0.15)], 5, "hybrid") == []

    def test_stops_at_max_tools(self, selector, scored_factory):
        tools = [scored_factory(f"tool_{i}", 0.9, server=f"s{i}") for i in range(6)]

        result = selector.select(tools, 4, "hybrid")

        assert [t.name for t in result] == ["tool_0", "tool_1", "tool_2", "tool_3"]

    def test_never_reorders(self, selector, scored_factory):
        tools = [
            scored_factory("low", 0.3, server="a"),
            scored_factory("high", 0.95, server="b"),
        ]

        result = selector.select(tools, 2, "hybrid")

        assert [t.name for t in result] == ["low", "high"]

    def test_rejected_counts_do_not_accrue(self, selector, scored_factory):
        tools = [
            # 0.15 is not strictly above the floor: rejected
            scored_factory("read_a", 0.15),
            scored_factory("read_b", 0.9, server="other"),
            # one prior file_operations pick: 0.18 * 0.9 = 0.162, accepted.
            # Counting the rejected read_a would give 0.18 * 0.8 = 0.144.
            scored_factory("read_c", 0.18, server="third"),
        ]

        result = selector.select(tools, 5, "hybrid")

        assert [t.name for t in result] == ["read_b", "read_c"]

    def test_is_default_strategy(self, selector, scored_factory):
        tools = [scored_factory("a", 0.1), scored_factory("b", 0.9)]
        assert [t.name for t in selector.select(tools)] == ["b"]


class TestFallbackSelection:
    """Tests for unknown strategy tags."""

    def test_truncates_without_sorting(self, selector, scored_factory):
        tools = [scored_factory("a", 0.1), scored_factory("b", 0.9), scored_factory("c", 0.5)]

        result = selector.select(tools, 2, "random")

        assert [t.name for t in result] == ["a", "b"]

    @pytest.mark.parametrize("tag", ["PRIORITY", "Semantic", "Hybrid"])
    def test_other_casings_are_unknown(self, selector, scored_factory, tag):
        tools = [scored_factory("a", 0.1), scored_factory("b", 0.9), scored_factory("c", 0.5)]
        stats = ToolSelectionStats()

        result = selector.select(tools, 2, tag, stats)

        assert [t.name for t in result] == ["a", "b"]
        assert stats.fallback_selections == 1

    def test_logs_warning(self, selector, scored_factory, caplog):
        with caplog.at_level(logging.WARNING, logger="toolrank"):
            selector.select([scored_factory("a", 0.1)], 1, "random")

        assert "Unknown selection strategy 'random'" in caplog.text

    def test_zero_max_tools(self, selector, scored_factory):
        assert selector.select([scored_factory("a", 0.9)], 0, "nope") == []


class TestSelectionStats:
    """Tests for selection statistics."""

    def test_records_each_strategy(self, selector, scored_factory):
        tools = [scored_factory("a", 0.9), scored_factory("b", 0.8)]
        stats = ToolSelectionStats()

        selector.select(tools, 1, "priority", stats)
        selector.select(tools, 2, "semantic", stats)
        selector.select(tools, 2, "hybrid", stats)
        selector.select(tools, 2, "bogus", stats)

        assert stats.to_dict() == {
            "priority_selections": 1,
            "semantic_selections": 1,
            "hybrid_selections": 1,
            "fallback_selections": 1,
            "total_tools_selected": 7,
            "hybrid_rejections": 0,
        }

    def test_selector_keeps_no_counters(self, selector, scored_factory):
        tools = [scored_factory("read_a", 0.9), scored_factory("read_b", 0.1)]
        before = dict(vars(selector))

        selector.select(tools, 2, "hybrid")
        selector.select(tools, 2, "bogus")

        assert vars(selector) == before
        assert not hasattr(selector, "stats")

    def test_separate_stats_do_not_share_counts(self, selector, scored_factory):
        tools = [scored_factory("a", 0.9)]
        first, second = ToolSelectionStats(), ToolSelectionStats()

        selector.select(tools, 1, "priority", first)
        selector.select(tools, 1, "semantic", second)

        assert first.priority_selections == 1
        assert first.semantic_selections == 0
        assert second.semantic_selections == 1
        assert second.priority_selections == 0

    def test_record_unknown_method_only_counts_tools(self):
        stats = ToolSelectionStats()
        stats.record_selection("other", 3)
        assert stats.total_tools_selected == 3
        assert stats.fallback_selections == 0
