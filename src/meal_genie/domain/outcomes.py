"""Explicit outcome values for operations that can be pending or fail."""

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")

FAILED_WITH_ERROR = "error"


@dataclass(frozen=True)
class Idle:
    """Nothing has been requested yet."""


@dataclass(frozen=True)
class Loading:
    """A request is in flight."""


@dataclass(frozen=True)
class Ready(Generic[T]):
    """A request completed with a value."""

    value: T


@dataclass(frozen=True)
class Failed:
    """A request completed without a value."""

    reason: str
    detail: str | None = None


Outcome = Union[Idle, Loading, Ready[T], Failed]


@dataclass
class OutcomeTracker(Generic[T]):
    """Holds the latest outcome of a repeatable operation.

    Every run replaces the previous outcome; nothing is merged.
    """

    state: "Outcome[T]" = field(default_factory=Idle)

    async def run(self, operation: Awaitable[Ready[T] | Failed]) -> Ready[T] | Failed:
        """Await an operation, exposing Loading while it runs.

        An exception ends the run as Failed and is re-raised; cancellation
        returns the tracker to Idle.
        """
        self.state = Loading()
        try:
            outcome = await operation
        except Exception as exc:
            self.state = Failed(reason=FAILED_WITH_ERROR, detail=str(exc))
            raise
        except BaseException:
            self.state = Idle()
            raise
        self.state = outcome
        return outcome
