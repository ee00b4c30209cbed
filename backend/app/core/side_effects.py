"""Non-fatal side effects.

Secondary writes (blob deletion, invoice key updates after a render) must not
abort the primary response. They run through ``run_side_effect``, which logs
failures and hands back a ``SideEffectResult`` instead of raising.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class SideEffectResult:
    label: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_side_effect(label: str, func: Callable[..., Any], *args, log_failures: bool = True, **kwargs) -> SideEffectResult:
    """Call ``func`` and capture any exception on the result.

    Callers that log the failure themselves with more context pass
    ``log_failures=False``.
    """
    try:
        func(*args, **kwargs)
    except Exception as exc:
        if log_failures:
            logger.warning("%s failed: %s", label, exc)
        return SideEffectResult(label=label, error=exc)
    return SideEffectResult(label=label)
