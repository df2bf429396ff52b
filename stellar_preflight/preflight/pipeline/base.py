"""Abstract pre-flight check interface."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from preflight.pipeline.models import PreFlightCheckResult, PreFlightContext


class PreFlightCheck(ABC):
    """A single, self-contained stage of the pre-flight pipeline.

    Implementations must never raise: unexpected errors are caught and
    reported as a ``failed`` result carrying the error text.
    """

    id: str = ""
    label: str = ""

    @abstractmethod
    async def execute(self, ctx: PreFlightContext) -> PreFlightCheckResult:
        """Run the check against the shared, read-only context."""
        ...


def elapsed_ms(start: float) -> int:
    """Milliseconds since a ``time.monotonic()`` reading."""
    return int((time.monotonic() - start) * 1000)
