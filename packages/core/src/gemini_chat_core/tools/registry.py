"""
Startup-time registry of local function handlers.

Function names on the wire are namespaced as `<group>_<function>`: the name
is split on its first underscore, the left side selects a handler group and
the right side a function inside it. `lookup_weather` resolves to function
`weather` of group `lookup`; `arm_move_to` resolves to `move_to` of `arm`.
"""

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from gemini_chat_core.utils.errors import HandlerNotFoundError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]

GROUP_SEPARATOR = "_"


def split_function_name(name: str) -> tuple[str, str] | None:
    """Splits `group_function` on the first underscore."""
    group, sep, function = name.partition(GROUP_SEPARATOR)
    if not sep or not group or not function:
        return None
    return group, function


def collect_public_methods(obj: Any) -> dict[str, Handler]:
    """
    Collects the public methods of a handler object once, at registration.

    Properties and plain attributes are skipped.
    """
    handlers: dict[str, Handler] = {}
    for attr_name in dir(type(obj)):
        if attr_name.startswith("_"):
            continue
        static_attr = inspect.getattr_static(obj, attr_name)
        if isinstance(static_attr, (staticmethod, classmethod)) or (
            inspect.isfunction(static_attr)
        ):
            handlers[attr_name] = getattr(obj, attr_name)
    return handlers


class HandlerGroup:
    """A named set of handlers sharing a wire-name prefix."""

    def __init__(self, name: str, handlers: Mapping[str, Handler]):
        self.name = name
        self._handlers: dict[str, Handler] = {}
        for function_name, handler in handlers.items():
            if not callable(handler):
                raise TypeError(
                    f"Handler '{name}_{function_name}' is not callable"
                )
            self._handlers[function_name] = handler

    @classmethod
    def from_object(cls, name: str, obj: Any) -> "HandlerGroup":
        return cls(name, collect_public_methods(obj))

    def get(self, function_name: str) -> Handler | None:
        return self._handlers.get(function_name)

    def function_names(self) -> list[str]:
        return list(self._handlers)

    def __contains__(self, function_name: str) -> bool:
        return function_name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)


class FunctionRegistry:
    """Maps wire function names to handlers. Read-only during dispatch."""

    def __init__(self):
        self._groups: dict[str, HandlerGroup] = {}

    def register_group(
        self, name: str, handlers: Mapping[str, Handler] | Any
    ) -> HandlerGroup:
        """
        Registers a handler group.

        Args:
            name: group prefix; must not contain an underscore
            handlers: a mapping of function name to callable, or an object
                whose public methods become the group's functions

        """
        if not name or GROUP_SEPARATOR in name:
            raise ValueError(
                f"Group name '{name}' must be non-empty and contain no "
                f"'{GROUP_SEPARATOR}'"
            )
        if isinstance(handlers, Mapping):
            group = HandlerGroup(name, handlers)
        else:
            group = HandlerGroup.from_object(name, handlers)

        if name in self._groups:
            logger.warning(
                f"Handler group '{name}' is already registered. Overwriting."
            )
        self._groups[name] = group
        logger.debug(
            f"Registered handler group '{name}': {group.function_names()}"
        )
        return group

    def resolve(self, name: str) -> Handler:
        """
        Finds the handler for a wire function name.

        Raises:
            HandlerNotFoundError: malformed name, unknown group or function

        """
        if not self._groups:
            raise HandlerNotFoundError(name, "No function handlers available")

        split = split_function_name(name)
        if split is None:
            raise HandlerNotFoundError(
                name,
                f"Function {name} not found: expected "
                f"'<group>{GROUP_SEPARATOR}<function>'",
            )
        group_name, function_name = split

        group = self._groups.get(group_name)
        if group is None:
            raise HandlerNotFoundError(
                name, f"Function {name} not found: no group '{group_name}'"
            )

        handler = group.get(function_name)
        if handler is None:
            raise HandlerNotFoundError(name)
        return handler

    def wire_names(self) -> list[str]:
        return [
            f"{group.name}{GROUP_SEPARATOR}{function_name}"
            for group in self._groups.values()
            for function_name in group.function_names()
        ]

    def __contains__(self, name: str) -> bool:
        try:
            self.resolve(name)
        except HandlerNotFoundError:
            return False
        return True

    def __iter__(self) -> Iterator[HandlerGroup]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)
