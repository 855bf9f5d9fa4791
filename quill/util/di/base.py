"""Base classes for dependency injection providers.

A provider with no subclasses is concrete and always used as-is. A provider
with subclasses is a swappable *component*: it names itself through
``__mock_component__`` and has one production and one mock implementation,
told apart by ``__is_mock__``.
"""

from typing import ClassVar, Literal, Type

from dishka import Provider

from quill.util.error import DependencyInjectionError

Component = Literal["persistence"]


class ProviderBase(Provider):
    """Base for all DI providers with unified metadata.

    Attributes:
        __mock_component__: Component name (None for concrete providers)
        __is_mock__: Whether this is a mock implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False

    @classmethod
    def is_component(cls) -> bool:
        """Whether this provider has swappable implementations."""
        return bool(cls.__subclasses__())

    @classmethod
    def implementation(cls, use_mock: bool = False) -> Type["ProviderBase"]:
        """Pick the provider class to instantiate for this base.

        Raises:
            DependencyInjectionError: If a component lacks the requested
                implementation (e.g. the mock module was never imported)
        """
        if not cls.is_component():
            return cls
        for impl in cls.__subclasses__():
            if getattr(impl, "__is_mock__", False) == use_mock:
                return impl
        kind = "mock" if use_mock else "production"
        raise DependencyInjectionError(
            f"No {kind} implementation for {cls.__mock_component__ or cls.__name__}"
        )
