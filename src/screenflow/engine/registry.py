"""Service registry for ``serviceCall`` actions."""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from screenflow.core.errors import ServiceNotFoundError

logger = logging.getLogger(__name__)

# Type alias for service handlers
ServiceHandler = Callable[..., Any]


class ServiceRegistry:
    """Registry of host-provided service handlers.

    Handlers are keyed by ``"<serviceName>.<functionName>"``; a handler
    registered under the bare service name catches every function of that
    service. Each host owns its registry and passes it to its sessions,
    so independent sessions never share handlers by accident.

    Usage:
        services = ServiceRegistry()

        @services.register("profile.fetch")
        def fetch_profile(params):
            return {"name": "Ana"}

        result = services.call("profile", "fetch", {"userId": "u1"})
    """

    def __init__(self) -> None:
        self._handlers: dict[str, ServiceHandler] = {}

    def register_handler(self, name: str, handler: ServiceHandler) -> None:
        """Register a handler under ``service.function`` or ``service``."""
        self._handlers[name] = handler

    def register(self, name: str) -> Callable[[ServiceHandler], ServiceHandler]:
        """Decorator form of register_handler."""

        def decorator(handler: ServiceHandler) -> ServiceHandler:
            self.register_handler(name, handler)
            return handler

        return decorator

    def unregister(self, name: str) -> None:
        self._handlers.pop(name, None)

    def get(self, service_name: str, function_name: str) -> ServiceHandler | None:
        """Find the handler for a service function, most specific first."""
        return self._handlers.get(f"{service_name}.{function_name}") or self._handlers.get(
            service_name
        )

    def call(self, service_name: str, function_name: str, parameters: dict[str, Any]) -> Any:
        """Execute a service handler with the call parameters.

        The handler signature decides how parameters are passed:
        no arguments, a single ``params`` mapping, or matched keyword
        arguments. Handlers registered for a whole service also receive
        ``function`` when they accept it.

        Raises:
            ServiceNotFoundError: If no handler is wired.
        """
        handler = self.get(service_name, function_name)
        if handler is None:
            raise ServiceNotFoundError(
                "No handler wired for service call",
                service=service_name,
                function=function_name,
            )

        if inspect.iscoroutinefunction(handler):
            raise TypeError(f"Service handler for '{service_name}' must be synchronous")

        try:
            sig = inspect.signature(handler)
        except ValueError:
            # Cannot inspect (e.g. built-in), pass parameters directly
            return handler(parameters)

        params = sig.parameters
        if not params:
            return handler()

        first_name = next(iter(params))
        first = params[first_name]
        if len(params) == 1 and (first_name == "params" or first.annotation is dict):
            return handler(parameters)

        accepts_any = any(p.kind is inspect.Parameter.VAR_KEYWORD for p in params.values())
        kwargs = {k: v for k, v in parameters.items() if accepts_any or k in params}
        if "function" in params or accepts_any:
            kwargs["function"] = function_name
        return handler(**kwargs)

    def __contains__(self, name: str) -> bool:
        """Check if a handler is registered under a name."""
        return name in self._handlers
