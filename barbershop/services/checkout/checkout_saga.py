# ============================================================================
# barbershop/services/checkout/checkout_saga.py
# ============================================================================
"""
Ordered steps with compensations.

Each step commits its own writes. When step k fails, the compensations of
steps 1..k-1 run in reverse order and the failure is re-raised as a
CheckoutError carrying the original message.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from barbershop.core.exceptions import BarbershopError, CheckoutError

logger = logging.getLogger(__name__)


@dataclass
class SagaStep:
    name: str
    action: Callable[[], Any]
    compensate: Optional[Callable[[Any], None]] = None


class CheckoutSaga:
    """Runs checkout steps and undoes the completed ones on failure"""

    def __init__(self, name: str, db: Optional[Session] = None):
        self.name = name
        self.db = db
        self.steps: List[SagaStep] = []
        self.compensated: List[str] = []

    def add_step(self, name: str, action: Callable[[], Any], compensate: Optional[Callable[[Any], None]] = None):
        self.steps.append(SagaStep(name=name, action=action, compensate=compensate))
        return self

    def run(self) -> Dict[str, Any]:
        completed: List[Tuple[SagaStep, Any]] = []
        results: Dict[str, Any] = {}

        for step in self.steps:
            try:
                result = step.action()
            except Exception as e:
                message = e.message if isinstance(e, BarbershopError) else str(e)
                logger.error(f"Saga {self.name} failed at step '{step.name}': {message}")
                if self.db is not None:
                    self.db.rollback()
                self._compensate(completed)
                raise CheckoutError(message, failed_step=step.name) from e

            completed.append((step, result))
            results[step.name] = result

        logger.info(f"Saga {self.name} completed {len(completed)} steps")
        return results

    def _compensate(self, completed: List[Tuple[SagaStep, Any]]):
        for step, result in reversed(completed):
            if step.compensate is None:
                continue
            try:
                step.compensate(result)
                self.compensated.append(step.name)
                logger.info(f"Saga {self.name} compensated step '{step.name}'")
            except Exception as e:
                # Keep undoing the remaining steps; this one needs manual repair
                logger.error(f"Saga {self.name} could not compensate '{step.name}': {e}")
                if self.db is not None:
                    self.db.rollback()
