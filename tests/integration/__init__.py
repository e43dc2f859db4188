from sqlalchemy import text
from sqlalchemy.orm import Session


def insert_person(session: Session, nome: str) -> int:
    session.execute(text('INSERT INTO "PERSON" (nome) VALUES (:nome)'), dict(nome=nome))
    [[person_id]] = session.execute(
        text('SELECT id FROM "PERSON" WHERE nome=:nome'), dict(nome=nome)
    )
    session.commit()
    return person_id


def select_names(session: Session) -> list[str]:
    return [nome for [nome] in session.execute(text('SELECT nome FROM "PERSON" ORDER BY id'))]
