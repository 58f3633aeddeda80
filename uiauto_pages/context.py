# uiauto_pages/context.py
"""
@file context.py
@brief Per-thread stack of running node actions.

Actions decorated with @tracked_action push an ActionContext while they
run. A PagesError that escapes an action carries the formatted stack in
its action_trace attribute:

    Action trace (innermost first):
      X set_value InputElement '//input[@name="user"]' [0.31s]
      -> fill_login LoginForm [0.31s]
"""

from __future__ import annotations

import functools
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generator, Iterator, List, Optional
from uuid import uuid4

from .exceptions import PagesError


@dataclass
class ActionContext:
    action: str
    node_type: Optional[str] = None
    selector: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    parent: Optional[ActionContext] = None
    action_id: str = field(default_factory=lambda: uuid4().hex[:8])
    started: float = field(default_factory=time.monotonic)

    @property
    def description(self) -> str:
        parts = [self.action]
        if self.node_type:
            parts.append(self.node_type)
        if self.selector:
            parts.append(f"'{self.selector}'")
        return " ".join(parts)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def chain(self) -> Iterator[ActionContext]:
        """Yield this context and its parents, innermost first."""
        context: Optional[ActionContext] = self
        while context is not None:
            yield context
            context = context.parent

    def format_trace(self) -> str:
        lines = ["Action trace (innermost first):"]
        for depth, context in enumerate(self.chain()):
            marker = "  X " if depth == 0 else "  -> "
            lines.append(f"{marker}{context.description} [{context.elapsed:.2f}s]")
        return "\n".join(lines)


class ActionContextManager:

    _local = threading.local()

    @classmethod
    def _stack(cls) -> List[ActionContext]:
        stack = getattr(cls._local, "stack", None)
        if stack is None:
            stack = cls._local.stack = []
        return stack

    @classmethod
    def current(cls) -> Optional[ActionContext]:
        stack = cls._stack()
        return stack[-1] if stack else None

    @classmethod
    @contextmanager
    def action(
        cls,
        action: str,
        node_type: Optional[str] = None,
        selector: Optional[str] = None,
        **metadata: Any,
    ) -> Generator[ActionContext, None, None]:
        stack = cls._stack()
        context = ActionContext(
            action=action,
            node_type=node_type,
            selector=selector,
            metadata=metadata,
            parent=stack[-1] if stack else None,
        )
        stack.append(context)
        try:
            yield context
        finally:
            stack.pop()

    @classmethod
    def clear(cls) -> None:
        cls._local.stack = []


def tracked_action(action_name: Optional[str] = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorate a node method so that it runs inside an ActionContext and
    reports an action_finish event to the action logger.
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        name = action_name or func.__name__

        @functools.wraps(func)
        def wrapper(node: Any, *args: Any, **kwargs: Any) -> Any:
            from .actionlogger import ACTION_LOGGER

            node_type = type(node).__name__
            selector = getattr(node, "selector", None)
            metadata = dict(kwargs)
            if args:
                if name == "set_value":
                    metadata["value"] = args[0]
                else:
                    metadata["args"] = args

            with ActionContextManager.action(name, node_type, selector) as context:
                report = functools.partial(
                    ACTION_LOGGER.log,
                    name,
                    node=node_type,
                    selector=selector,
                    metadata=metadata,
                    action_id=context.action_id,
                    event="action_finish",
                )
                try:
                    result = func(node, *args, **kwargs)
                except Exception as exc:
                    if isinstance(exc, PagesError) and exc.action_trace is None:
                        exc.action_trace = context.format_trace()
                    report(status="error", duration_ms=int(context.elapsed * 1000), exception=exc)
                    raise
                report(status="ok", duration_ms=int(context.elapsed * 1000))
                return result

        return wrapper

    return decorator
