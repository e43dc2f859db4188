class FastRepoError(Exception):
    """``FastRepo`` 와 관련된 모든 에러의 기본 클래스."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    ...


class ValidationError(FastRepoError):
    """엔티티가 필수 속성 검사를 통과하지 못했을 때 발생하는 에러."""

    ...


class PersistenceError(FastRepoError):
    """저장소가 조회나 커밋을 거부했을 때 발생하는 에러.

    커밋 실패의 경우 어떤 변경도 반영되지 않습니다.
    """

    ...


class MappingError(FastRepoError):
    """엔티티와 모델간 변환이 불가능할 때 발생하는 에러."""

    ...


class InvalidStateError(FastRepoError):
    """이미 반환(close)된 컨텍스트나 레포지터리를 사용하려 할 때 발생하는 에러."""

    ...


class RegistrationError(FastRepoError):
    """컨테이너에 등록되지 않은 의존성을 요청했을 때 발생하는 에러."""

    ...
