"""도메인 엔티티 규칙.

엔티티 클래스는 내부 ``Meta`` 클래스로 자신의 제약 조건을 선언합니다. ::

    @dataclass
    class Person:
        nome: str
        id: Optional[int] = None

        class Meta:
            required = ["nome"]
            max_length = {"nome": 100}
"""
from typing import Any, Iterable, Mapping, TypeVar

from fastrepo.core import Entity, ValidationError

E = TypeVar("E", bound=Entity)


def _meta(entity_class: type, name: str, default: Any) -> Any:
    meta = getattr(entity_class, "Meta", None)
    return getattr(meta, name, default) if meta else default


def required_fields(entity_class: type) -> Iterable[str]:
    return tuple(_meta(entity_class, "required", ()))


def max_lengths(entity_class: type) -> Mapping[str, int]:
    return dict(_meta(entity_class, "max_length", {}))


def unique_fields(entity_class: type) -> Iterable[str]:
    return tuple(_meta(entity_class, "unique", ()))


def validate(entity: E) -> E:
    """엔티티의 ``Meta`` 규칙을 검사합니다.

    Raises:
        ValidationError: 필수 속성이 비었거나 길이 제한을 넘은 경우. 위반된 규칙을 모두 나열합니다.
    """
    entity_class = type(entity)
    problems = []

    for name in required_fields(entity_class):
        value = getattr(entity, name, None)
        if value is None or (isinstance(value, str) and not value.strip()):
            problems.append(f"{name} is required")

    for name, limit in max_lengths(entity_class).items():
        value = getattr(entity, name, None)
        if isinstance(value, str) and len(value) > limit:
            problems.append(f"{name} exceeds {limit} characters")

    if problems:
        raise ValidationError(f"{entity_class.__name__}: " + ", ".join(problems))

    return entity
