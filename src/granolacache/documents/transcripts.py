"""Join cached transcript segments into plain text."""

from __future__ import annotations

from granolacache.errors import ErrorKind
from granolacache.models import Failure, QueryResult, RawState, Success, Transcript


def extract_transcript(state: RawState, document_id: str) -> QueryResult[Transcript]:
    """Return the transcript for ``document_id``.

    A missing or empty segment list is reported as ``cache_not_found``: from
    the caller's side it is the same as a document that never had a
    transcript. Segments without text contribute no line.
    """
    segments = state.transcripts.get(document_id)
    if not segments:
        return Failure(ErrorKind.CACHE_NOT_FOUND)

    plain_text = "\n".join(segment.text for segment in segments if segment.text)
    return Success(Transcript(document_id=document_id, plain_text=plain_text))
