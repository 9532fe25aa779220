"""Interceptor chain executing stages across the three scopes.

Ordering is fixed: request stages run global → instance → per-call and
response stages run per-call → instance → global. The chain is a pure
transformer; it performs no I/O and holds no per-request state, so one
instance is shared by every request a dispatcher issues. The per-call scope
is supplied on each run.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from ..logging import LogContext, get_logger, log_event
from .stage import InterceptorScope, InterceptorStage, ScopeInterceptors

_logger = get_logger(__name__)


@dataclass(frozen=True)
class Outcome:
    """Settled result flowing through the response side of the chain.

    Exactly one of ``value`` / ``error`` is meaningful; ``error`` being
    ``None`` marks a success.
    """

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the carried failure."""
        if self.error is not None:
            raise self.error
        return self.value


@dataclass(frozen=True)
class InterceptorChain:
    """Composable chain of global and instance scopes.

    Attributes:
        global_scope: Stages installed for every dispatcher (outermost).
        instance_scope: Stages installed for one dispatcher instance.
    """

    global_scope: Optional[ScopeInterceptors] = None
    instance_scope: Optional[ScopeInterceptors] = None

    def _scopes(self, per_call: Optional[ScopeInterceptors]) -> List[Tuple[InterceptorScope, Optional[ScopeInterceptors]]]:
        return [
            (InterceptorScope.GLOBAL, self.global_scope),
            (InterceptorScope.INSTANCE, self.instance_scope),
            (InterceptorScope.PER_CALL, per_call),
        ]

    def run_request(self, descriptor: Any, per_call: Optional[ScopeInterceptors] = None, ctx: LogContext | None = None) -> Any:
        """Run request stages in order, returning the final descriptor.

        The first stage that raises stops the chain. When that stage carries
        an ``on_error`` handler, the handler may substitute the exception (by
        returning or raising another one); the resulting failure is raised.
        """
        current = descriptor
        for scope, interceptors in self._scopes(per_call):
            stage = interceptors.request if interceptors is not None else None
            if stage is None or stage.on_success is None:
                continue
            try:
                current = stage.on_success(current)
            except Exception as exc:  # noqa: BLE001 - any stage failure short-circuits
                failure = _translate_request_failure(stage, exc)
                log_event(
                    _logger,
                    "dispatch.interceptor.rejected",
                    ctx,
                    scope=scope.value,
                    error=type(failure).__name__,
                )
                if failure is exc:
                    raise
                raise failure from exc
        return current

    def run_response(self, outcome: Outcome, per_call: Optional[ScopeInterceptors] = None) -> Outcome:
        """Run response stages in reverse scope order over a settled outcome.

        A success goes through ``on_success``; a failure goes through
        ``on_error`` which either raises (the failure continues, possibly
        replaced) or returns a value (the outcome becomes a success). Any
        exception raised by a handler becomes the new failure.
        """
        current = outcome
        for _scope, interceptors in reversed(self._scopes(per_call)):
            stage = interceptors.response if interceptors is not None else None
            if stage is not None:
                current = _apply_response_stage(stage, current)
        return current


def _translate_request_failure(stage: InterceptorStage, exc: Exception) -> BaseException:
    if stage.on_error is None:
        return exc
    try:
        translated = stage.on_error(exc)
    except Exception as raised:  # noqa: BLE001 - handler chose a replacement by raising
        return raised
    return translated if isinstance(translated, BaseException) else exc


def _apply_response_stage(stage: InterceptorStage, outcome: Outcome) -> Outcome:
    if outcome.ok:
        handler = stage.on_success
        if handler is None:
            return outcome
        arg: Any = outcome.value
    else:
        handler = stage.on_error
        if handler is None:
            return outcome
        arg = outcome.error
    try:
        return Outcome(value=handler(arg))
    except Exception as exc:  # noqa: BLE001 - failures continue down the chain
        return Outcome(error=exc)


__all__ = ["InterceptorChain", "Outcome"]
