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

"""Shared pytest fixtures and configuration."""

from typing import Optional

import pytest

from toolrank.core.types import ScoreComponents, ScoredTool, Tool


@pytest.fixture(autouse=True)
def isolate_environment_variables(monkeypatch):
    """Isolate tests from TOOLRANK_* environment variables and .env files."""
    monkeypatch.setenv("TOOLRANK_SKIP_ENV_FILE", "1")
    for var in (
        "TOOLRANK_RELEVANCE_THRESHOLD",
        "TOOLRANK_MAX_TOOLS",
        "TOOLRANK_SELECTION_STRATEGY",
        "TOOLRANK_DOMAIN_WEIGHTS",
        "TOOLRANK_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


def _make_scored(
    name: str,
    score: float,
    server: str = "remix",
    components: Optional[ScoreComponents] = None,
    description: Optional[str] = None,
) -> ScoredTool:
    """Build a ScoredTool directly, bypassing the scorer."""
    return ScoredTool(
        tool=Tool(name=name, description=description),
        server_name=server,
        score=score,
        components=components or ScoreComponents(),
        reasoning="General utility tool",
    )


@pytest.fixture
def scored_factory():
    """Factory for ScoredTool instances with explicit scores."""
    return _make_scored
