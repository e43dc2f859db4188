"""의존성 주입 컨테이너(Composition Root) 모듈.

구현체를 추상 인터페이스에 연결하고 인스턴스의 생명주기를 관리합니다.

- ``SINGLETON``: 컨테이너 당 하나의 인스턴스. :meth:`Container.close` 에서 반환됩니다.
- ``SCOPED``: :class:`Scope` 당 하나의 인스턴스. 스코프가 끝날 때 반환됩니다.
- ``TRANSIENT``: 요청할 때마다 새 인스턴스.

하나의 :class:`Registration` 을 여러 인터페이스에 등록하면 같은 생명주기 안에서
모두 같은 인스턴스로 해석됩니다. ::

    registration = Registration(lambda r: SqlAlchemyContext(), Lifestyle.SCOPED)
    container.add_registration(AbstractUnitOfWork, registration)
    container.add_registration(AbstractContext, registration)

    with container.begin_scope() as scope:
        assert scope.get(AbstractUnitOfWork) is scope.get(AbstractContext)

주의:

    싱글톤으로 등록된 컨텍스트를 동시에 실행되는 여러 스코프가 공유하면, 저장소가
    트랜잭션을 직렬화하지 않는 한 동시 쓰기는 안전하지 않습니다. 컨테이너는 잠금을
    제공하지 않습니다.
"""
from __future__ import annotations

from contextlib import AbstractContextManager
from enum import Enum
from typing import Any, Callable, Optional, Protocol, Type, TypeVar, get_args, get_origin

from fastrepo.core import InvalidStateError, RegistrationError, get_logger

T = TypeVar("T")

logger = get_logger("fastrepo.container")


class Resolver(Protocol):
    """팩토리 함수가 의존성을 해석할 때 받는 객체 (:class:`Container` 또는 :class:`Scope`)."""

    def get(self, contract: Type[T]) -> T:
        ...


Factory = Callable[[Resolver], Any]
GenericFactory = Callable[..., Any]
"""``factory(resolver, *type_args)`` 형태의 열린 제네릭 팩토리."""


class Lifestyle(Enum):
    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"


class Registration:
    """팩토리와 생명주기의 쌍. 인스턴스 캐시의 키로 사용됩니다."""

    def __init__(self, factory: Factory, lifestyle: Lifestyle = Lifestyle.TRANSIENT):
        self.factory = factory
        self.lifestyle = lifestyle

    def __repr__(self) -> str:
        return f"Registration[{self.lifestyle.value}]"


def _close(instance: Any) -> None:
    close = getattr(instance, "close", None)
    if callable(close):
        close()


def _close_all(instances: list[Any]) -> None:
    """생성 역순으로 모두 반환하고, 실패가 있으면 첫 번째 예외를 다시 던집니다."""
    error: Optional[Exception] = None
    for instance in reversed(instances):
        try:
            _close(instance)
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("failed to close %r", instance)
            if error is None:
                error = e
    if error is not None:
        raise error


class Container:
    """인터페이스와 구현체를 연결하는 컨테이너."""

    def __init__(self) -> None:
        self.registrations: dict[Any, Registration] = {}
        self.generics: dict[Any, tuple[GenericFactory, Lifestyle]] = {}
        self.singletons: dict[Registration, Any] = {}

    def add_registration(self, contract: Any, registration: Registration) -> Registration:
        self.registrations[contract] = registration
        return registration

    def register(
        self,
        contract: Any,
        factory: Factory,
        lifestyle: Lifestyle = Lifestyle.TRANSIENT,
    ) -> Registration:
        return self.add_registration(contract, Registration(factory, lifestyle))

    def register_singleton(self, contract: Any, factory: Factory) -> Registration:
        return self.register(contract, factory, Lifestyle.SINGLETON)

    def register_scoped(self, contract: Any, factory: Factory) -> Registration:
        return self.register(contract, factory, Lifestyle.SCOPED)

    def register_generic(
        self,
        contract: Any,
        factory: GenericFactory,
        lifestyle: Lifestyle = Lifestyle.TRANSIENT,
    ) -> None:
        """열린 제네릭 인터페이스를 등록합니다.

        ``container.get(AbstractRepository[Person])`` 은 ``factory(resolver, Person)`` 으로 해석됩니다.
        """
        self.generics[contract] = (factory, lifestyle)

    def registration_for(self, contract: Any) -> Registration:
        registration = self.registrations.get(contract)
        if registration:
            return registration

        origin = get_origin(contract)
        if origin in self.generics:
            factory, lifestyle = self.generics[origin]
            args = get_args(contract)
            registration = Registration(lambda r: factory(r, *args), lifestyle)
            # 닫힌 제네릭 타입마다 하나의 등록을 재사용합니다.
            return self.add_registration(contract, registration)

        raise RegistrationError(f"no registration for {contract!r}")

    def resolve(self, contract: Any, scope: Optional[Scope] = None) -> Any:
        registration = self.registration_for(contract)

        if registration.lifestyle is Lifestyle.SINGLETON:
            if registration not in self.singletons:
                self.singletons[registration] = registration.factory(self)
                logger.debug("singleton created for %r", contract)
            return self.singletons[registration]

        if registration.lifestyle is Lifestyle.SCOPED:
            if scope is None:
                raise RegistrationError(f"{contract!r} is scoped, begin a scope first")
            return scope.instance_of(registration)

        return registration.factory(scope or self)

    def get(self, contract: Type[T]) -> T:
        """스코프 밖에서 인스턴스를 해석합니다 (싱글톤과 트랜지언트)."""
        return self.resolve(contract)

    def begin_scope(self) -> Scope:
        return Scope(self)

    def close(self) -> None:
        """싱글톤 인스턴스들을 생성 역순으로 반환합니다."""
        instances = list(self.singletons.values())
        self.singletons.clear()
        _close_all(instances)


class Scope(AbstractContextManager["Scope"]):
    """논리적 작업 단위(요청 하나, 테스트 하나 등)의 경계.

    스코프 안에서 해석된 ``SCOPED`` 인스턴스는 모두 공유되고, 스코프가 끝날 때 반환됩니다.
    """

    def __init__(self, container: Container):
        self.container = container
        self.instances: dict[Registration, Any] = {}
        self.closed = False
        logger.debug("scope started: %#x", id(self))

    def __exit__(self, *args: Any) -> None:
        self.close()

    def get(self, contract: Type[T]) -> T:
        if self.closed:
            raise InvalidStateError("scope is already closed")
        return self.container.resolve(contract, self)

    def instance_of(self, registration: Registration) -> Any:
        if registration not in self.instances:
            self.instances[registration] = registration.factory(self)
        return self.instances[registration]

    def close(self) -> None:
        """스코프 인스턴스들을 생성 역순으로 반환합니다."""
        if self.closed:
            return
        self.closed = True
        instances = list(self.instances.values())
        self.instances.clear()
        try:
            _close_all(instances)
        finally:
            logger.debug("scope closed: %#x (%d instances)", id(self), len(instances))
