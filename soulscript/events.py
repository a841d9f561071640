"""SoulScript event bus

``subscribe(event, handler)`` records a handler *method name* under an event.
``broadcast(event, payload)`` walks those names in subscription order and, for
each one, calls the method of that name on every active component that
defines it, whether or not that component ever subscribed. Any subscription
to an event is what switches delivery on; matching is by method name alone.

That breadth is the observed behaviour of the language and scripts rely on it
(for example a spawner reacting to ``entityDestroyed`` because some other
component subscribed). Subscriptions live for the whole session, duplicates
are kept and produce duplicate calls, and there is no unsubscribe.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List

from .registry import RuntimeComponent


logger = logging.getLogger(__name__)

HandlerInvoker = Callable[[RuntimeComponent, str, Any], None]


class EventBus:
    """Publish/subscribe by event name, dispatching to component methods"""

    def __init__(self):
        self.handlers: Dict[str, List[str]] = {}
        self.broadcast_count = 0

    def subscribe(self, event: str, handler: str):
        self.handlers.setdefault(event, []).append(handler)
        logger.debug("Subscribed %s -> %s", event, handler)

    def handlers_for(self, event: str) -> List[str]:
        return list(self.handlers.get(event, []))

    def events(self) -> List[str]:
        return list(self.handlers.keys())

    def broadcast(self, event: str, payload: Any,
                  components: Iterable[RuntimeComponent],
                  invoke: HandlerInvoker) -> int:
        """Dispatch ``payload`` to matching component methods

        ``components`` is snapshotted before dispatch, so handlers that create
        or destroy components do not disturb this broadcast. Returns the number
        of handler invocations.
        """
        self.broadcast_count += 1
        handler_names = self.handlers_for(event)
        if not handler_names:
            return 0

        targets = list(components)
        invoked = 0
        for handler in handler_names:
            for component in targets:
                if component.is_active and component.has_method(handler):
                    invoke(component, handler, payload)
                    invoked += 1
        return invoked

    def clear(self):
        self.handlers.clear()
        self.broadcast_count = 0
