from ._logging import get_logger  # noqa
from .errors import (  # noqa
    FastRepoError,
    InvalidStateError,
    MappingError,
    PersistenceError,
    RegistrationError,
    ValidationError,
)
from .models import (  # noqa
    AbstractContext,
    AbstractEntitySet,
    AbstractPredicate,
    AbstractRepository,
    AbstractUnitOfWork,
    Entity,
)
