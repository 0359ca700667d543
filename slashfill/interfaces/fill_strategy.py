"""Abstract base class for fill strategies.

Batch triggers can be resolved with one round trip returning a JSON array
of answers, or with one round trip per blank. Both sit behind this
interface so the orchestrator can switch between them by configuration.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slashfill.engine.models import FillResult
    from slashfill.engine.session import FillSession


class BaseFillStrategy(ABC):
    """Abstract base class for fill strategies.

    Example:
        ```python
        class NoopStrategy(BaseFillStrategy):
            name = "noop"

            async def fill(self, session, prefix, suffix, *, include_trigger=True):
                session.write(prefix + suffix)
                return FillResult(prefix + suffix, FillMode.BATCH, FillStatus.DONE)
        ```
    """

    name: str

    @abstractmethod
    async def fill(
        self,
        session: "FillSession",
        prefix: str,
        suffix: str,
        *,
        include_trigger: bool = True,
    ) -> "FillResult":
        """Resolve the blanks around a trigger and write them to the document.

        Args:
            session: The active fill session.
            prefix: Text before the trigger.
            suffix: Text after the trigger.
            include_trigger: Whether the trigger position is itself a blank.

        Returns:
            The outcome of the fill. Failures are reported in the result,
            never raised.
        """
        ...
