"""Read meeting documents and transcripts from Granola's local cache."""

from granolacache.api import MeetingLibrary
from granolacache.config import AppConfig
from granolacache.errors import ErrorKind
from granolacache.models import Document, Failure, Success, Transcript

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "Document",
    "ErrorKind",
    "Failure",
    "MeetingLibrary",
    "Success",
    "Transcript",
]
