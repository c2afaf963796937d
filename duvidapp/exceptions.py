from typing import List, Optional


class DuvidAppError(Exception):
    """Base class for every error raised by the client layer"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(DuvidAppError):
    """No session, or the session token has expired"""

    def __init__(self, message: str = "Você não está autenticado. Faça login novamente."):
        super().__init__(message)


class HttpError(DuvidAppError):
    """The backend answered with a non-2xx status"""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status

    def __str__(self):
        return f"{self.status}: {self.message}"


class NetworkError(DuvidAppError):
    """The request could not be completed at all"""

    def __init__(self, message: str = "Não foi possível conectar ao servidor."):
        super().__init__(message)


class PermissionDenied(DuvidAppError):
    """The current user may not perform this write"""

    def __init__(self, message: str = "Você não tem permissão para realizar esta ação."):
        super().__init__(message)


class ValidationError(DuvidAppError):
    """Client-side field constraints failed; shown inline on the form, never as a toast"""

    def __init__(self, errors: List[str], field: Optional[str] = None):
        super().__init__("; ".join(errors))
        self.errors = errors
        self.field = field

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        messages = []
        for err in exc.errors():
            ctx_error = err.get("ctx", {}).get("error")
            messages.append(str(ctx_error) if ctx_error is not None else err["msg"])
        first = exc.errors()[0]["loc"] if exc.errors() else ()
        return cls(messages, field=str(first[0]) if first else None)
