"""Multi-step walks with history, step-back on dead ends and halting on unsafe links."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tqdm import tqdm

from .config import DEFAULT_MAX_FAILURE_STREAK
from .errors import NoNavigableLinksError, UnsafeURLError, WalkerError
from .models import PickerFactory, ResolvedLink
from .validation import canonicalize_url, validate_url

NO_LINKS_STEPPED_BACK = "No links here. Returned to a previous page."
NO_LINKS_AT_START = "No links found on the current page."
SKIPPED_AFTER_FAILURES = "Skipping page after repeated failures."


@dataclass
class HistoryEntry:
    url: str
    label: str | None = None
    error: str = ""


@dataclass(frozen=True)
class StepOutcome:
    """Result of one step; ``halted`` means automatic walking should stop."""

    url: str
    link: ResolvedLink | None = None
    error: WalkerError | None = None
    message: str = ""
    halted: bool = False

    @property
    def ok(self) -> bool:
        return self.link is not None


class WalkSession:
    """Caller-side walk state built on top of a link picker.

    The session owns the visited set and grows it with every page it lands
    on; pickers only ever see a frozen snapshot of it.
    """

    def __init__(
        self,
        start_url: str,
        *,
        picker_factory: PickerFactory,
        logger: logging.Logger,
        max_failure_streak: int = DEFAULT_MAX_FAILURE_STREAK,
    ) -> None:
        start = validate_url(start_url)
        self._picker_factory = picker_factory
        self._logger = logger
        self._max_failure_streak = max_failure_streak
        self._failure_streak = 0
        self.history: list[HistoryEntry] = [HistoryEntry(url=str(start))]
        self.position = 0
        self._visited: set[str] = {start.canonical}

    @property
    def current(self) -> HistoryEntry:
        return self.history[self.position]

    @property
    def visited(self) -> frozenset[str]:
        return frozenset(self._visited)

    def back(self) -> bool:
        if self.position <= 0:
            return False
        self.position -= 1
        return True

    def _annotate(self, index: int, message: str) -> None:
        if 0 <= index < len(self.history):
            self.history[index].error = message

    def _push(self, entry: HistoryEntry) -> None:
        insert_at = self.position + 1
        if insert_at < len(self.history):
            tail = self.history[insert_at:]
            del self.history[insert_at:]
            # Entries that recorded a failure stay visible after branching.
            self.history.extend(item for item in tail if item.error)
        self.history.append(entry)
        self.position = len(self.history) - 1

    def step(self) -> StepOutcome:
        """Try to move one random link forward from the current entry."""
        source = self.current.url
        picker = self._picker_factory(source, self.visited)
        try:
            link = picker.next_link()
        except UnsafeURLError as exc:
            message = (
                f"Safety filter blocked navigation: {'; '.join(exc.reasons)}"
                if exc.reasons
                else str(exc)
            )
            self._annotate(self.position, message)
            self._logger.warning("%s (%s)", message, exc.candidate)
            return StepOutcome(url=source, error=exc, message=message, halted=True)
        except NoNavigableLinksError as exc:
            return self._step_back_from_dead_end(exc)
        except WalkerError as exc:
            self._failure_streak += 1
            self._annotate(self.position, str(exc))
            self._logger.warning("Step from %s failed: %s", source, exc)
            return StepOutcome(url=source, error=exc, message=str(exc))

        self._failure_streak = 0
        self._push(HistoryEntry(url=str(link.url), label=link.label))
        self._visited.add(canonicalize_url(link.url))
        self._logger.info("Walked to %s", link.url)
        return StepOutcome(url=str(link.url), link=link, message="Found a new page!")

    def _step_back_from_dead_end(self, exc: NoNavigableLinksError) -> StepOutcome:
        dead_end = self.position
        moved_back = self.back()
        message = NO_LINKS_STEPPED_BACK if moved_back else NO_LINKS_AT_START
        self._failure_streak += 1
        self._annotate(dead_end, message)

        if self._failure_streak >= self._max_failure_streak and self.back():
            self._annotate(self.position + 1, SKIPPED_AFTER_FAILURES)
            self._failure_streak = 0

        self._logger.info("%s (%s)", message, self.history[dead_end].url)
        return StepOutcome(url=self.current.url, error=exc, message=message, halted=not moved_back)

    def run(self, steps: int, *, show_progress: bool = False) -> list[StepOutcome]:
        """Take up to ``steps`` steps, stopping early when a step halts the walk."""
        outcomes: list[StepOutcome] = []
        for _ in tqdm(range(steps), desc="walking", disable=not show_progress):
            outcome = self.step()
            outcomes.append(outcome)
            if outcome.halted:
                break
        return outcomes
