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

"""Logging levels for toolrank.

Logging Levels (toolrank convention):
- TRACE (5): Per-keyword and per-verb match decisions
- DEBUG (10): Per-tool score breakdowns, hybrid rejections
- INFO (20): Batch summaries (candidates scored, tools selected)
- WARNING (30): Degraded behavior (unknown selection strategy)
"""

import logging
from typing import Any

# Custom TRACE level for very verbose logging (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    """Log at TRACE level (5) - for very verbose per-operation logs."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)


# Add trace method to Logger class
logging.Logger.trace = trace  # type: ignore[attr-defined]

ROOT_LOGGER = "toolrank"


def resolve_level(log_level: str) -> int:
    """Map a level name (including TRACE) to its numeric value, INFO if unknown."""
    level_upper = log_level.upper()
    if level_upper == "TRACE":
        return TRACE
    level = logging.getLevelName(level_upper)
    return level if isinstance(level, int) else logging.INFO


def configure_logging_levels(log_level: str = "INFO") -> int:
    """Set the level of every toolrank logger.

    Handlers are left to the host application.

    Args:
        log_level: TRACE, DEBUG, INFO, WARNING, ERROR or CRITICAL

    Returns:
        The numeric level applied
    """
    level = resolve_level(log_level)
    logging.getLogger(ROOT_LOGGER).setLevel(level)
    return level
