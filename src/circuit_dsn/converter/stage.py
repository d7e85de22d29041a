"""Base class for resumable, iteration-bounded conversion stages."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..config import DEFAULT_MAX_ITERATIONS
from ..dsn.model import DsnDocument
from ..errors import OrderingError, RunawayIterationError
from .context import ConverterContext

MAX_ITERATIONS = DEFAULT_MAX_ITERATIONS


class ConverterStage(ABC):
    """One unit of conversion work driven by repeated :meth:`step` calls.

    Subclasses implement :meth:`_step` and set ``self.finished = True`` once
    their section of the document is written. Every stage in this package
    finishes on its first step; the iteration ceiling guards against a
    subclass that never does.

    Attributes:
        ctx: Shared conversion context.
        max_iterations: Iteration ceiling; defaults to the context config.
        finished: Whether the stage has completed its work.
    """

    def __init__(self, ctx: ConverterContext, *, max_iterations: int | None = None) -> None:
        self.ctx = ctx
        self.max_iterations = max_iterations if max_iterations is not None else ctx.config.max_iterations
        self.finished = False
        self._iteration = 0

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def iteration(self) -> int:
        return self._iteration

    def step(self) -> None:
        """Advance the stage by one unit of work.

        Raises:
            RunawayIterationError: If the iteration ceiling is exceeded.
        """
        self._iteration += 1
        if self._iteration > self.max_iterations:
            raise RunawayIterationError(self.name, self.max_iterations)
        self._step()

    @abstractmethod
    def _step(self) -> None:
        """Perform one unit of work."""

    def run_until_finished(self) -> None:
        while not self.finished:
            self.step()

    def get_output(self) -> DsnDocument:
        """Return the shared document as this stage left it."""
        if self.ctx.document is None:
            raise OrderingError(f"{self.name} has no document to return")
        return self.ctx.document
