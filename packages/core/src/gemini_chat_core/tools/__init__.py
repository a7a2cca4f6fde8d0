"""
The tools sub-package routes model function calls to caller-supplied handlers.

- `HandlerGroup`: a named set of handlers, usually built from an object's public methods.
- `FunctionRegistry`: maps namespaced wire names (`<group>_<function>`) to handlers.
- `FunctionDispatcher`: invokes the resolved handler and wraps its result as a function Content.
"""

from .dispatcher import FunctionDispatcher
from .registry import FunctionRegistry, HandlerGroup

__all__ = [
    "FunctionDispatcher",
    "FunctionRegistry",
    "HandlerGroup",
]
