"""DuvidApp: classroom question-and-answer client stores."""

from duvidapp.app import DuvidApp
from duvidapp.exceptions import (
    DuvidAppError,
    HttpError,
    NetworkError,
    PermissionDenied,
    Unauthenticated,
    ValidationError,
)

__version__ = "0.1.0"
