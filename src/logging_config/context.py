"""Route Context.

Binds a route id, the asset pair and any extra fields to every log
entry emitted while one routing call is in flight. Uses contextvars,
so concurrent calls on the same event loop keep separate contexts.
"""

import uuid
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

_route_id_var: ContextVar[str] = ContextVar("route_id", default="")
_pair_var: ContextVar[str] = ContextVar("pair", default="")
_extra_context_var: ContextVar[Optional[dict]] = ContextVar("extra_context", default=None)


def generate_route_id() -> str:
    """Short random id for one routing call."""
    return uuid.uuid4().hex[:12]


def get_route_id() -> str:
    return _route_id_var.get()


def get_pair() -> str:
    return _pair_var.get()


def get_context_dict() -> dict[str, Any]:
    """Current context as a flat dict for log binding."""
    ctx: dict[str, Any] = {}
    route_id = _route_id_var.get()
    if route_id:
        ctx["route_id"] = route_id
    pair = _pair_var.get()
    if pair:
        ctx["pair"] = pair
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


@dataclass
class RouteContext:
    """Context manager scoping log fields to one routing call.

    Example:
        with RouteContext(pair="ckBTC/ckUSDC") as ctx:
            logger.info("fanning out")  # includes route_id, pair
            ctx.bind(venues=3)
    """

    route_id: str = ""
    pair: str = ""
    extra: dict[str, Any] = field(default_factory=dict)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    _tokens: list[Token] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if not self.route_id:
            self.route_id = generate_route_id()

    def __enter__(self) -> "RouteContext":
        self._tokens = [
            _route_id_var.set(self.route_id),
            _pair_var.set(self.pair),
            _extra_context_var.set(dict(self.extra)),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        route_tok, pair_tok, extra_tok = self._tokens
        # Reset restores an enclosing context, if any
        _extra_context_var.reset(extra_tok)
        _pair_var.reset(pair_tok)
        _route_id_var.reset(route_tok)
        self._tokens = []

    @property
    def elapsed_ms(self) -> float:
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the active context."""
        current = _extra_context_var.get() or {}
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)
