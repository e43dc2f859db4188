"""애플리케이션 모델과 도메인 엔티티 사이의 매핑 프로파일."""
from fastrepo.mapper import Mapper, Profile

from .domain.models import Person, Pet
from .schema.person import PersonModel, PetModel


class ApplicationToDomainProfile(Profile):
    name = "ApplicationToDomainProfile"

    def configure(self) -> None:
        self.create_map(PersonModel, Person)
        self.create_map(PetModel, Pet)


class DomainToApplicationProfile(Profile):
    name = "DomainToApplicationProfile"

    def configure(self) -> None:
        self.create_map(Person, PersonModel)
        self.create_map(Pet, PetModel)


def make_mapper() -> Mapper:
    return Mapper([DomainToApplicationProfile, ApplicationToDomainProfile])
