"""Core granola-cache data models.

Raw structures mirror the upstream cache schema and keep every field optional.
Normalized structures (``Document``, ``Transcript``) always have every field
populated and are what callers receive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar, Union

from granolacache.errors import ErrorKind

T = TypeVar("T")


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


@dataclass(slots=True)
class RawPerson:
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Any) -> "RawPerson":
        if not isinstance(data, Mapping):
            return cls()
        return cls(name=_optional_str(data.get("name")), email=_optional_str(data.get("email")))


@dataclass(slots=True)
class RawDocument:
    """A document record exactly as far as the cache describes it."""

    id: Optional[str] = None
    title: Optional[str] = None
    created_at: Optional[str] = None
    deleted_at: Optional[Any] = None
    people: Optional[List[RawPerson]] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RawDocument":
        people = data.get("people")
        return cls(
            id=_optional_str(data.get("id")),
            title=_optional_str(data.get("title")),
            created_at=_optional_str(data.get("created_at")),
            deleted_at=data.get("deleted_at"),
            people=[RawPerson.from_mapping(p) for p in people] if isinstance(people, list) else None,
        )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(slots=True)
class RawSegment:
    text: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Any) -> "RawSegment":
        if not isinstance(data, Mapping):
            return cls()
        return cls(text=_optional_str(data.get("text")))


@dataclass(slots=True)
class RawState:
    """Decoded content of one successful cache read."""

    documents: Dict[str, RawDocument] = field(default_factory=dict)
    transcripts: Dict[str, List[RawSegment]] = field(default_factory=dict)

    def has_transcript(self, document_id: str) -> bool:
        return len(self.transcripts.get(document_id) or ()) > 0


@dataclass(slots=True)
class LoadedCache:
    """In-memory snapshot of the cache at one modification time."""

    state: RawState
    source_mtime_ns: int
    loaded_at_ms: int


@dataclass(slots=True)
class Document:
    """Normalized meeting document returned to callers."""

    id: str
    title: str
    created_at: int
    participants: List[str]
    has_transcript: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "createdAt": self.created_at,
            "participants": list(self.participants),
            "hasTranscript": self.has_transcript,
        }


@dataclass(slots=True)
class Transcript:
    document_id: str
    plain_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"documentId": self.document_id, "plainText": self.plain_text}


@dataclass(slots=True)
class Success(Generic[T]):
    data: T
    cache_age_ms: Optional[int] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True)
class Failure:
    kind: ErrorKind

    @property
    def ok(self) -> bool:
        return False


QueryResult = Union[Success[T], Failure]
