"""Pollution reports: public browsing and search, authenticated create/update/delete."""

import logging
import re
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.auth import get_current_user
from app.api.deps import DbDep, SettingsDep
from app.core.config import Settings
from app.models import Pollution, User
from app.schemas.auth import CurrentUser, MessageResponse
from app.schemas.pollution import PollutionCreate, PollutionOut, PollutionUpdate
from app.services.authorization import can_mutate_report
from app.services.photos import PhotoValidationError, photo_to_data_uri

logger = logging.getLogger(__name__)
router = APIRouter()

MAX_RESULTS = 1000
SEARCH_MAX_LEN = 200
_SEARCH_RE = re.compile(r"^[a-zA-Z0-9\s\-àâäéèêëïîôöùûüÿçÀÂÄÉÈÊËÏÎÔÖÙÛÜŸÇ',.!?]*$")

MAX_REPORT_ID = 2**31 - 1

PollutionId = Annotated[
    int, Path(ge=1, le=MAX_REPORT_ID, description="Report id (positive 32-bit integer)")
]


def _is_upload_file(obj: object) -> bool:
    """True if obj is an uploaded file (UploadFile or file-like with filename and read)."""
    if isinstance(obj, UploadFile):
        return True
    return (
        hasattr(obj, "read")
        and callable(getattr(obj, "read", None))
        and hasattr(obj, "filename")
    )


async def _read_capped(upload: UploadFile, limit: int) -> bytes:
    """Read at most limit + 1 bytes, enough to tell an oversized photo apart without buffering it."""
    return await upload.read(limit + 1)


async def _read_report_payload(
    request: Request, settings: Settings
) -> tuple[dict[str, Any], str | None]:
    """
    Read report fields from a JSON body or a multipart form.

    Returns (fields, photo_data_uri). A photo only comes from a multipart file part named
    'photo'; a client-supplied photo_url field is refused.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    photo: str | None = None
    if content_type == "application/json":
        try:
            data = await request.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError both land here.
            raise HTTPException(status_code=400, detail="Malformed JSON body.") from e
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="JSON body must be an object.")
    elif content_type in ("multipart/form-data", "application/x-www-form-urlencoded"):
        form = await request.form()
        data = {k: v for k, v in form.items() if not _is_upload_file(v)}
        upload = form.get("photo")
        if upload is not None and _is_upload_file(upload):
            content = await _read_capped(upload, settings.MAX_PHOTO_BYTES)
            if content:
                try:
                    photo = photo_to_data_uri(
                        content,
                        getattr(upload, "content_type", None),
                        settings.MAX_PHOTO_BYTES,
                    )
                except PhotoValidationError as e:
                    raise HTTPException(status_code=e.status_code, detail=e.message) from e
    else:
        raise HTTPException(
            status_code=415,
            detail="Content-Type must be application/json or multipart/form-data.",
        )
    if "photo_url" in data:
        raise HTTPException(
            status_code=400,
            detail="The photo_url field must not be sent. Upload the image in the 'photo' field.",
        )
    return data, photo


def _invalid_body(e: ValidationError) -> RequestValidationError:
    """Route body errors through the app-wide validation handler."""
    return RequestValidationError(e.errors(include_url=False, include_context=False))


def _get_report_or_404(db: Session, pollution_id: int) -> Pollution:
    report = db.get(Pollution, pollution_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Pollution not found")
    return report


@router.get("", response_model=list[PollutionOut])
def list_pollutions(
    db: DbDep,
    search: Annotated[str | None, Query(description="Case-insensitive title filter")] = None,
) -> list[PollutionOut]:
    """List reports, optionally filtered by a title substring (at most 1000 results)."""
    query = db.query(Pollution)
    term = (search or "").strip()
    if term:
        if len(term) > SEARCH_MAX_LEN:
            raise HTTPException(
                status_code=400,
                detail=f"Search term must not exceed {SEARCH_MAX_LEN} characters.",
            )
        if not _SEARCH_RE.match(term):
            raise HTTPException(
                status_code=400,
                detail="Search term contains characters that are not allowed.",
            )
        query = query.filter(Pollution.titre.ilike(f"%{term}%"))
    rows = query.order_by(Pollution.id).limit(MAX_RESULTS).all()
    return [PollutionOut.model_validate(r) for r in rows]


@router.get("/{pollution_id}", response_model=PollutionOut)
def get_pollution(pollution_id: PollutionId, db: DbDep) -> PollutionOut:
    return PollutionOut.model_validate(_get_report_or_404(db, pollution_id))


@router.post("", response_model=PollutionOut, status_code=status.HTTP_201_CREATED)
async def create_pollution(
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: DbDep,
    settings: SettingsDep,
) -> PollutionOut:
    """
    Declare a pollution. Send JSON, or multipart/form-data with an optional image in `photo`.

    The report is owned by the caller. When the reporter name is not given in full it
    defaults to the caller's nom/prenom.
    """
    data, photo = await _read_report_payload(request, settings)
    try:
        body = PollutionCreate.model_validate(data)
    except ValidationError as e:
        raise _invalid_body(e) from e

    decouvreur_nom = body.decouvreur_nom
    decouvreur_prenom = body.decouvreur_prenom
    if not decouvreur_nom or not decouvreur_prenom:
        owner = db.get(User, current_user.id)
        if owner is not None:
            decouvreur_nom = owner.nom
            decouvreur_prenom = owner.prenom

    report = Pollution(
        titre=body.titre,
        description=body.description,
        type_pollution=body.type_pollution,
        lieu=body.lieu,
        date_observation=body.date_observation,
        decouvreur_nom=decouvreur_nom,
        decouvreur_prenom=decouvreur_prenom,
        utilisateur_id=current_user.id,
        photo_url=photo,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info("Pollution created id=%s by user id=%s", report.id, current_user.id)
    return PollutionOut.model_validate(report)


@router.put("/{pollution_id}", response_model=PollutionOut)
async def update_pollution(
    pollution_id: PollutionId,
    request: Request,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: DbDep,
    settings: SettingsDep,
) -> PollutionOut:
    """
    Partially update a report. Only the owner or an admin may do so (unowned reports are
    open to any authenticated user). Unknown fields are ignored.
    """
    report = _get_report_or_404(db, pollution_id)
    if not can_mutate_report(db, report, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to modify this report",
        )

    data, photo = await _read_report_payload(request, settings)
    try:
        body = PollutionUpdate.model_validate(data)
    except ValidationError as e:
        raise _invalid_body(e) from e

    for field, value in body.changes().items():
        setattr(report, field, value)
    if photo is not None:
        report.photo_url = photo
    db.commit()
    db.refresh(report)
    logger.info("Pollution updated id=%s by user id=%s", report.id, current_user.id)
    return PollutionOut.model_validate(report)


@router.delete("/{pollution_id}", response_model=MessageResponse)
def delete_pollution(
    pollution_id: PollutionId,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: DbDep,
) -> MessageResponse:
    """Delete a report (owner or admin; unowned reports by any authenticated user)."""
    report = _get_report_or_404(db, pollution_id)
    if not can_mutate_report(db, report, current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not allowed to delete this report",
        )
    db.delete(report)
    db.commit()
    logger.info("Pollution deleted id=%s by user id=%s", pollution_id, current_user.id)
    return MessageResponse(message="Pollution deleted")
