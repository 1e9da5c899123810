"""
Compensating actions for multi-step operations.

Steps that touch separate systems cannot share one transaction. Each
completed step registers its undo; when a later step fails the undos run
once, newest first, and the original error is re-raised.
"""
import logging
from typing import Awaitable, Callable, List, Tuple

from app.utils.logging import log_compensation_failed
from app.utils.metrics import compensations_total

logger = logging.getLogger(__name__)

UndoAction = Callable[[], Awaitable[None]]


class CompensationStack:
    """
    Records undo actions for completed steps.

    Usage:
        steps = CompensationStack("signup")
        user = await create_user(...)
        steps.push("delete_user", lambda: delete_user(user.id))
        try:
            await create_root_folder(user.id)
        except Exception:
            await steps.unwind()
            raise
    """

    def __init__(self, operation: str):
        self.operation = operation
        self._undo: List[Tuple[str, UndoAction]] = []

    def push(self, step: str, undo: UndoAction) -> None:
        self._undo.append((step, undo))

    def clear(self) -> None:
        """Forget all undos once the operation has fully succeeded."""
        self._undo.clear()

    @property
    def completed_steps(self) -> List[str]:
        return [step for step, _ in self._undo]

    async def unwind(self) -> List[str]:
        """
        Run every registered undo, newest first.

        A failing undo is logged and counted, then the rest still run.
        Never raises.

        Returns:
            Names of the steps whose undo failed
        """
        failed = []
        while self._undo:
            step, undo = self._undo.pop()
            try:
                await undo()
                compensations_total.labels(outcome="succeeded").inc()
                logger.info(
                    f"Compensated {self.operation}.{step}",
                    extra={"event": "compensation_succeeded", "operation": self.operation, "step": step}
                )
            except Exception as e:
                compensations_total.labels(outcome="failed").inc()
                log_compensation_failed(logger, operation=self.operation, step=step, error=str(e))
                failed.append(step)
        return failed
