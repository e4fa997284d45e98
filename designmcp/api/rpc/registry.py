"""Method registry: name -> (params schema, handler)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

Handler = Callable[[Any], Any | Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class MethodSpec:
    name: str
    handler: Handler
    params_schema: type[BaseModel] | None = None
    description: str = ""


class MethodRegistry:
    """Registered RPC methods. Built before startup; read-only once frozen."""

    def __init__(self) -> None:
        self._methods: dict[str, MethodSpec] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        handler: Handler,
        *,
        params: type[BaseModel] | None = None,
        description: str = "",
    ) -> MethodSpec:
        if self._frozen:
            raise RuntimeError(f"registry is frozen; cannot register {name!r}")
        if not name or not name.strip():
            raise ValueError("method name is required")
        if name in self._methods:
            raise ValueError(f"method already registered: {name}")
        spec = MethodSpec(name=name, handler=handler, params_schema=params, description=description)
        self._methods[name] = spec
        return spec

    def method(
        self,
        name: str,
        *,
        params: type[BaseModel] | None = None,
        description: str = "",
    ) -> Callable[[Handler], Handler]:
        """Decorator form of register()."""

        def decorator(func: Handler) -> Handler:
            self.register(name, func, params=params, description=description)
            return func

        return decorator

    def freeze(self) -> "MethodRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> MethodSpec | None:
        return self._methods.get(name)

    def names(self) -> list[str]:
        return sorted(self._methods)

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __len__(self) -> int:
        return len(self._methods)
