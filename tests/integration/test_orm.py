from sqlalchemy import text
from sqlalchemy.orm import Session

from tests.app.domain.models import Person, Pet
from tests.integration import select_names


def test_person_mapper_can_load_people(session: Session) -> None:
    session.execute(
        text('INSERT INTO "PERSON" (nome) VALUES (\'ANA\'), (\'BRUNO\'), (\'CARLA\')')
    )
    expected = [Person("ANA", 1), Person("BRUNO", 2), Person("CARLA", 3)]
    assert session.query(Person).order_by(Person.id).all() == expected


def test_person_mapper_can_save_people(session: Session) -> None:
    session.add(Person("DIEGO"))
    session.commit()

    assert select_names(session) == ["DIEGO"]


def test_pet_references_its_owner(session: Session) -> None:
    owner = Person("ELISA")
    session.add(owner)
    session.commit()

    session.add(Pet("REX", owner_id=owner.id))
    session.commit()

    rows = list(session.execute(text("SELECT nome, owner_id FROM pet")))
    assert rows == [("REX", owner.id)]
