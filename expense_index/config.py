"""Runtime settings for the expense store and its front ends."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "EXPENSE_TRACKER_"
TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(environ: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None:
        return default
    return raw.strip().lower() in TRUTHY


@dataclass(frozen=True)
class StoreSettings:
    """Behaviour switches for :class:`~expense_index.store.ExpenseStore`.

    ``sort_log_on_date_filter`` restores the in-place sort performed by the
    date filter, so positions used by ``delete`` follow date order afterwards.
    ``fill_top_n`` keeps popping past tombstoned records until ``n`` live ones
    are found instead of stopping after ``n`` pops.
    """

    sort_log_on_date_filter: bool = False
    fill_top_n: bool = False
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StoreSettings":
        environ = os.environ if environ is None else environ
        return cls(
            sort_log_on_date_filter=_env_flag(environ, "SORT_ON_DATE_FILTER"),
            fill_top_n=_env_flag(environ, "FILL_TOP_N"),
            log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", "WARNING").strip().upper() or "WARNING",
        )

    def with_overrides(self, **changes: object) -> "StoreSettings":
        cleaned = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **cleaned)

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level)
        return level if isinstance(level, int) else logging.WARNING
