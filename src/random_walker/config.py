"""Runtime configuration model."""

from __future__ import annotations

from dataclasses import dataclass

from .validation import validate_runtime_constraints

DEFAULT_START_URL = "https://en.wikipedia.org/wiki/Special:Random"
DEFAULT_USER_AGENT = "RandomWalkerBot/1.0 (+https://example.com)"
DEFAULT_CONNECT_TIMEOUT = 5.0
DEFAULT_READ_TIMEOUT = 5.0
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_STEPS = 1
DEFAULT_MAX_FAILURE_STREAK = 5
START_URL_ENV = "RANDOM_WALKER_START_URL"


@dataclass(frozen=True)
class WalkerConfig:
    """Validated configuration used to build pickers and walk sessions."""

    start_url: str = DEFAULT_START_URL
    user_agent: str = DEFAULT_USER_AGENT
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    steps: int = DEFAULT_STEPS
    seed: int | None = None
    max_failure_streak: int = DEFAULT_MAX_FAILURE_STREAK
    visited: tuple[str, ...] = ()
    output: str | None = None
    show_progress: bool = True

    def __post_init__(self) -> None:
        validate_runtime_constraints(
            connect_timeout=self.connect_timeout,
            read_timeout=self.read_timeout,
            max_redirects=self.max_redirects,
            steps=self.steps,
            max_failure_streak=self.max_failure_streak,
        )
