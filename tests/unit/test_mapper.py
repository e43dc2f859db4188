import pytest

from fastrepo.core import MappingError
from fastrepo.mapper import Mapper, Profile
from tests.app.domain.models import Person, Pet
from tests.app.mapping import make_mapper
from tests.app.schema.person import PersonModel, PetModel


@pytest.fixture
def mapper() -> Mapper:
    return make_mapper()


def test_profiles_are_registered_by_name(mapper: Mapper) -> None:
    assert set(mapper.profiles) == {
        "DomainToApplicationProfile",
        "ApplicationToDomainProfile",
    }


def test_entity_to_model(mapper: Mapper) -> None:
    person = Person("ANA", 1)
    model = mapper.map(person, PersonModel)

    assert isinstance(model, PersonModel)
    assert model.nome == "ANA"
    assert model.id == 1


@pytest.mark.parametrize("person", [Person("ANA", 1), Person("BRUNO")])
def test_round_trip_keeps_every_attribute(mapper: Mapper, person: Person) -> None:
    model = mapper.map(person, PersonModel)
    back = mapper.map(model, Person)

    assert back == person
    assert back is not person


def test_map_all_keeps_order(mapper: Mapper) -> None:
    people = [Person("ANA", 1), Person("BRUNO", 2)]
    models = mapper.map_all(people, PersonModel)

    assert [m.nome for m in models] == ["ANA", "BRUNO"]
    assert mapper.map_all([], PersonModel) == []


def test_none_maps_to_none(mapper: Mapper) -> None:
    assert mapper.map(None, PersonModel) is None


def test_invalid_value_is_a_mapping_error(mapper: Mapper) -> None:
    with pytest.raises(MappingError, match="PersonModel"):
        mapper.map(Person("X" * 101), PersonModel)
    with pytest.raises(MappingError, match="PetModel"):
        mapper.map(Pet("REX", owner_id=0), PetModel)


def test_map_all_fails_without_partial_result(mapper: Mapper) -> None:
    with pytest.raises(MappingError):
        mapper.map_all([Person("ANA"), Person(None)], PersonModel)  # type: ignore


def test_missing_attribute_is_a_mapping_error() -> None:
    class Named:
        def __init__(self, nome: str):
            self.nome = nome

    class Anonymous:
        pass

    mapper = Mapper()
    mapper.create_map(Named, Person)
    mapper.create_map(Anonymous, Person)

    assert mapper.map(Named("ANA"), Person) == Person("ANA")
    with pytest.raises(MappingError, match="missing attributes nome"):
        mapper.map(Anonymous(), Person)


def test_unregistered_pair_is_a_mapping_error(mapper: Mapper) -> None:
    with pytest.raises(MappingError, match="no mapping registered for Person -> PetModel"):
        mapper.map(Person("ANA"), PetModel)


def test_explicit_fields_and_subclass_sources() -> None:
    class Human:
        def __init__(self, nome: str, id: int):
            self.nome, self.id = nome, id

    class Student(Human):
        pass

    class NameOnly(Profile):
        def configure(self) -> None:
            self.create_map(Human, PersonModel, fields=["nome"])

    mapper = Mapper([NameOnly()])
    model = mapper.map(Student("ANA", 5), PersonModel)

    assert "NameOnly" in mapper.profiles
    assert model.nome == "ANA"
    assert model.id is None
