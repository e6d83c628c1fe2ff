"""Best-effort side effects dispatched after a state transition has committed."""

import typing as t

import structlog

from common.exceptions import DependencyError

logger = structlog.get_logger(__name__)


def dispatch(name: str, func: t.Callable[..., t.Any], *args: t.Any, **kwargs: t.Any) -> DependencyError | None:
    """Run a side effect and report its failure instead of raising it.

    The caller has already committed its primary transition, so a failure here is returned
    as a ``DependencyError`` for the response's ``warnings`` list.
    """
    try:
        func(*args, **kwargs)
    except Exception as exc:
        logger.warning("side_effect_failed", side_effect=name, error=str(exc), exc_info=True)
        return DependencyError(f"{name} failed: {exc}")
    return None


def dispatch_all(effects: t.Iterable[tuple[str, t.Callable[..., t.Any], dict[str, t.Any]]]) -> list[str]:
    """Dispatch several side effects and collect the failure messages."""
    warnings: list[str] = []
    for name, func, kwargs in effects:
        error = dispatch(name, func, **kwargs)
        if error is not None:
            warnings.append(error.message)
    return warnings
