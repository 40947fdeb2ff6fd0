"""Runtime settings for tile fetching.

Settings are plain dataclasses. ``FetchConfig.from_env`` reads overrides from
environment variables:

    MAPPLOT_TILE_CONCURRENCY   maximum number of tile requests in flight (8)
    MAPPLOT_TILE_TIMEOUT       per request timeout in seconds (10)
    MAPPLOT_TILE_TOLERANT      "1"/"true" to skip failing tiles instead of aborting
    MAPPLOT_USER_AGENT         User-Agent header sent to tile servers
"""

from typing import Mapping, Optional
from dataclasses import dataclass
import os

DEFAULT_USER_AGENT = "mapplot/0.3"
DEFAULT_CONCURRENCY = 8
DEFAULT_TIMEOUT = 10.0

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class FetchConfig:
    """How tiles are fetched for an image export.

    Attributes:
        concurrency: Maximum number of tile requests in flight.
        tolerant: If True, tiles that fail to load are skipped (leaving a gap)
                  instead of aborting the export.
        timeout: Per request timeout in seconds.
        user_agent: User-Agent header for tile requests.
    """
    concurrency: int = DEFAULT_CONCURRENCY
    tolerant: bool = False
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {self.concurrency}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be > 0, got {self.timeout}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FetchConfig":
        """Build a config from MAPPLOT_* environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            concurrency=int(env.get("MAPPLOT_TILE_CONCURRENCY", DEFAULT_CONCURRENCY)),
            tolerant=env.get("MAPPLOT_TILE_TOLERANT", "0").strip().lower() in _TRUE_VALUES,
            timeout=float(env.get("MAPPLOT_TILE_TIMEOUT", DEFAULT_TIMEOUT)),
            user_agent=env.get("MAPPLOT_USER_AGENT", DEFAULT_USER_AGENT),
        )
