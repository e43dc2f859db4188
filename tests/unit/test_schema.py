from dataclasses import dataclass, field
from typing import Optional

import pytest
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from fastrepo.core import FastRepoError
from fastrepo.schema import SCHEMAS, Field, schema_from
from tests.app.domain.models import Person
from tests.app.schema.person import PersonModel


def test_model_mirrors_the_entity_but_is_a_distinct_type() -> None:
    assert issubclass(PersonModel, BaseModel)
    assert not issubclass(PersonModel, Person)
    assert set(PersonModel.model_fields) == {"nome", "id"}
    assert PersonModel.model_fields["nome"].is_required()
    assert SCHEMAS[Person] is PersonModel


def test_target_fields_override_entity_fields() -> None:
    with pytest.raises(PydanticValidationError):
        PersonModel(nome="X" * 101)


def test_excludes_and_defaults() -> None:
    @dataclass
    class Book:
        title: str
        tags: list[str] = field(default_factory=list)
        isbn: Optional[str] = None

    @schema_from(Book, excludes=["isbn"], orm_mode=True)
    class BookModel:
        title: str = Field(..., min_length=1)

    book = BookModel(title="Dom Casmurro")
    assert set(BookModel.model_fields) == {"title", "tags"}
    assert book.tags == []
    assert BookModel.model_validate(Book("Iracema")).title == "Iracema"


def test_only_dataclasses_are_accepted() -> None:
    with pytest.raises(FastRepoError):
        schema_from(dict)
