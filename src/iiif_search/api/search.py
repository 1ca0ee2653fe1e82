"""API router exposing the IIIF Search endpoint."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from iiif_search.search.models import SearchResponse
from iiif_search.search.service import SearchService, get_search_service
from iiif_search.storage import DirectoryDocumentStore, DocumentNotFoundError, get_document_store

router = APIRouter(prefix="/iiif-search", tags=["search"])


class ContentAsText(BaseModel):
    type: str = "cnt:ContentAsText"
    chars: str


class AnnotationModel(BaseModel):
    """A match, as an annotation painting the matched region of a canvas."""

    id: str
    type: str = "oa:Annotation"
    motivation: str = "sc:painting"
    resource: ContentAsText
    on: str = Field(..., description="Canvas URI with an xywh region fragment.")


class SearchHitModel(BaseModel):
    annotations: list[str]
    match: str


class AnnotationListModel(BaseModel):
    """Response payload of the search endpoint."""

    resources: list[AnnotationModel]
    hits: list[SearchHitModel]


def _serialise(response: SearchResponse) -> AnnotationListModel:
    return AnnotationListModel(
        resources=[
            AnnotationModel(id=item.id, resource=ContentAsText(chars=item.chars), on=item.on)
            for item in response.resources
        ],
        hits=[SearchHitModel(annotations=list(hit.annotations), match=hit.match) for hit in response.hits],
    )


@router.get("/{document_id}", response_model=AnnotationListModel)
def search_document(
    document_id: int,
    q: str = Query("", description="Words to search in the transcription."),
    store: DirectoryDocumentStore = Depends(get_document_store),
    service: SearchService = Depends(get_search_service),
) -> AnnotationListModel:
    """Search the OCR transcription of a document."""

    try:
        document = store.get(document_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    response = service.search(document, q)
    if response is None:
        raise HTTPException(status_code=404, detail="Search is not supported for this document")
    return _serialise(response)
