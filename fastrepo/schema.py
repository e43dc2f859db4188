"""스키마 변환 기능을 담당하는 모듈입니다.

`dataclasses.dataclass` 엔티티와 같은 구조를 가진 별도의 Pydantic 모델을 만듭니다.
생성된 모델은 엔티티와 다른 타입이므로 애플리케이션 모델로 독립적으로 발전시킬 수 있습니다.
"""
from dataclasses import MISSING
from dataclasses import Field as DataClassField
from dataclasses import fields, is_dataclass
from typing import Any, Callable, Optional, Type, TypeVar, cast, get_type_hints

from pydantic import BaseModel, ConfigDict, Field, create_model  # noqa
from pydantic.fields import FieldInfo

from fastrepo.core import FastRepoError

D = TypeVar("D")
T = TypeVar("T")

SCHEMAS = dict[Type, Type[BaseModel]]()


def _default_of(field: DataClassField) -> Any:
    if field.default is not MISSING:
        return Field(field.default, **field.metadata)
    if field.default_factory is not MISSING:  # type: ignore
        return Field(default_factory=field.default_factory, **field.metadata)  # type: ignore
    return Field(..., **field.metadata)


def schema_from(
    DataClass: Type[D],
    excludes: Optional[list[str]] = None,
    orm_mode=False,
) -> Callable[[Type[T]], Type[BaseModel]]:
    """`dataclasses.dataclass` 모델을 Pydantic `BaseModel` 로 변환합니다.

    대상 클래스에 선언된 ``Field`` 는 같은 이름의 dataclass 필드 정의를 덮어씁니다. ::

        @schema_from(Person)
        class PersonModel:
            nome: str = Field(..., max_length=100)
    """
    if not is_dataclass(DataClass):
        raise FastRepoError(f"{DataClass!r} is not a dataclass")

    excludes = excludes or []

    def _wrapper(TargetClass: Type[T]) -> Type[BaseModel]:
        hints = get_type_hints(DataClass)
        members: dict[str, Any] = {}
        for field in fields(DataClass):
            if field.name in excludes or not field.init:
                continue
            members[field.name] = (hints[field.name], _default_of(field))

        # 타겟 클래스의 필드 속성을 가져옵니다.
        target_hints = get_type_hints(TargetClass)
        for name, value in vars(TargetClass).items():
            if name.startswith("_") or not isinstance(value, FieldInfo):
                continue
            annotation = target_hints.get(name, members.get(name, (Any,))[0])
            members[name] = (annotation, value)

        model = create_model(  # type: ignore[call-overload]
            TargetClass.__name__,
            __config__=ConfigDict(from_attributes=orm_mode),
            __module__=TargetClass.__module__,
            **members,
        )
        model.__qualname__ = TargetClass.__qualname__
        SCHEMAS[cast(Type, DataClass)] = model
        return model

    return _wrapper
