"""도메인 엔티티와 애플리케이션 모델 사이의 변환(매핑) 모듈.

변환 규칙은 :class:`Profile` 에 방향별로 한 번씩 선언합니다. ::

    class DomainToApplicationProfile(Profile):
        name = "DomainToApplicationProfile"

        def configure(self):
            self.create_map(Person, PersonModel)

    mapper = Mapper([DomainToApplicationProfile(), ApplicationToDomainProfile()])
    model = mapper.map(person, PersonModel)
"""
from __future__ import annotations

from dataclasses import MISSING, dataclass, fields, is_dataclass
from typing import Any, Iterable, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fastrepo.core import MappingError

T = TypeVar("T")


@dataclass(frozen=True)
class FieldSpec:
    name: str
    required: bool = True


def declared_fields(cls: type) -> tuple[FieldSpec, ...]:
    """대상 타입에 선언된 필드 목록을 리턴합니다 (dataclass 또는 pydantic 모델)."""
    if is_dataclass(cls):
        return tuple(
            FieldSpec(
                f.name,
                f.default is MISSING and f.default_factory is MISSING,  # type: ignore
            )
            for f in fields(cls)
            if f.init
        )
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return tuple(
            FieldSpec(name, info.is_required()) for name, info in cls.model_fields.items()
        )
    raise MappingError(f"cannot infer fields of {cls.__name__}, declare them explicitly")


def _construct(target: Type[T], values: dict[str, Any]) -> T:
    try:
        if issubclass(target, BaseModel):
            return target.model_validate(values)  # type: ignore
        return target(**values)
    except PydanticValidationError as e:
        raise MappingError(f"cannot build {target.__name__}: {e}") from e
    except TypeError as e:
        raise MappingError(f"cannot build {target.__name__}: {e}") from e


class TypeMap:
    """`source` 타입에서 `target` 타입으로의 단방향 변환 규칙."""

    def __init__(
        self,
        source: type,
        target: type,
        fields: Optional[Sequence[Union[str, FieldSpec]]] = None,
    ):
        self.source = source
        self.target = target
        if fields is None:
            self.fields = declared_fields(target)
        else:
            self.fields = tuple(
                it if isinstance(it, FieldSpec) else FieldSpec(it) for it in fields
            )

    def __repr__(self) -> str:
        return f"TypeMap[{self.source.__name__} -> {self.target.__name__}]"

    def __call__(self, obj: Any) -> Any:
        values: dict[str, Any] = {}
        missing = []
        for field in self.fields:
            if hasattr(obj, field.name):
                values[field.name] = getattr(obj, field.name)
            elif field.required:
                missing.append(field.name)

        if missing:
            raise MappingError(
                f"{self!r}: missing attributes {', '.join(missing)}"
            )

        return _construct(self.target, values)


class Profile:
    """이름이 붙은 변환 규칙 묶음. :meth:`configure` 에서 :meth:`create_map` 을 호출합니다."""

    name: str = ""

    def __init__(self) -> None:
        self.maps: list[TypeMap] = []
        if not self.name:
            self.name = self.__class__.__name__

    def create_map(
        self,
        source: type,
        target: type,
        fields: Optional[Sequence[Union[str, FieldSpec]]] = None,
    ) -> TypeMap:
        type_map = TypeMap(source, target, fields)
        self.maps.append(type_map)
        return type_map

    def configure(self) -> None:
        raise NotImplementedError


class Mapper:
    """(원본 타입, 대상 타입) 쌍으로 변환 규칙을 찾아 실행합니다."""

    def __init__(self, profiles: Iterable[Union[Profile, Type[Profile]]] = ()):
        self.profiles: dict[str, Profile] = {}
        self.maps: dict[tuple[type, type], TypeMap] = {}
        for profile in profiles:
            self.add_profile(profile)

    def add_profile(self, profile: Union[Profile, Type[Profile]]) -> Profile:
        if isinstance(profile, type):
            profile = profile()
        profile.configure()
        self.profiles[profile.name] = profile
        for type_map in profile.maps:
            self.maps[(type_map.source, type_map.target)] = type_map
        return profile

    def create_map(
        self,
        source: type,
        target: type,
        fields: Optional[Sequence[Union[str, FieldSpec]]] = None,
    ) -> TypeMap:
        type_map = TypeMap(source, target, fields)
        self.maps[(source, target)] = type_map
        return type_map

    def find_map(self, source: type, target: type) -> TypeMap:
        for cls in source.__mro__:
            type_map = self.maps.get((cls, target))
            if type_map:
                return type_map
        raise MappingError(
            f"no mapping registered for {source.__name__} -> {target.__name__}"
        )

    def map(self, obj: Any, target: Type[T]) -> Optional[T]:
        """객체 하나를 변환합니다. ``None`` 은 ``None`` 으로 변환됩니다."""
        if obj is None:
            return None
        return self.find_map(type(obj), target)(obj)

    def map_all(self, objs: Iterable[Any], target: Type[T]) -> list[T]:
        """여러 객체를 순서대로 변환합니다. 하나라도 실패하면 결과 없이 예외가 발생합니다."""
        return [self.find_map(type(obj), target)(obj) for obj in objs]
