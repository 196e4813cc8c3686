"""Factory helpers for component creation with logging."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from feeding_kernel.utils.logging import get_logger

T = TypeVar("T")

log = get_logger(__name__, component="factory")


class FactoryBase(Generic[T]):
    def __init__(self, name: str, builder: Callable[[], T]) -> None:
        self.name = name
        self.builder = builder

    def create(self) -> T:
        component = self.builder()
        log.debug(
            "Component loaded",
            extra={"type": component.__class__.__name__, "component_name": self.name},
        )
        return component
