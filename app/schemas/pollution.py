"""Pydantic schemas for pollution reports: creation, partial update, and API output."""

import re
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

PollutionType = Literal["Plastique", "Chimique", "Dépôt sauvage", "Eau", "Air", "Autre"]

MIN_OBSERVATION_DATE = date(1900, 1, 1)

# Letters (including French accents), spaces, hyphens and apostrophes.
_PERSON_NAME_RE = re.compile(r"^[a-zA-Z\s\-àâäéèêëïîôöùûüÿçÀÂÄÉÈÊËÏÎÔÖÙÛÜŸÇ']*$")

# Fields a client may change on an existing report. Anything else in the body is ignored.
UPDATABLE_FIELDS: tuple[str, ...] = (
    "titre",
    "description",
    "type_pollution",
    "lieu",
    "date_observation",
    "decouvreur_nom",
    "decouvreur_prenom",
)
NULLABLE_FIELDS: frozenset[str] = frozenset({"decouvreur_nom", "decouvreur_prenom"})


def max_observation_date(today: date | None = None) -> date:
    """Latest accepted observation date: one year from today."""
    today = today or date.today()
    try:
        return today.replace(year=today.year + 1)
    except ValueError:
        # 29 February -> 28 February of the following year
        return today.replace(year=today.year + 1, day=28)


def _date_part(value: object) -> object:
    """Accept full ISO timestamps (as sent by browsers) by keeping the calendar date."""
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def _validate_observation_date(value: date | None) -> date | None:
    if value is None:
        return None
    if value < MIN_OBSERVATION_DATE:
        raise ValueError("date_observation must not be before 1900-01-01")
    if value > max_observation_date():
        raise ValueError("date_observation must not be more than one year in the future")
    return value


def _validate_person_name(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > 100:
        raise ValueError("must be at most 100 characters")
    if not _PERSON_NAME_RE.match(value):
        raise ValueError("contains characters that are not allowed")
    return value


def _strip(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


class PollutionCreate(BaseModel):
    """Fields accepted when declaring a new pollution. photo_url comes only from an uploaded file."""

    model_config = {"extra": "ignore"}

    titre: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10, max_length=2000)
    type_pollution: PollutionType
    lieu: str = Field(..., min_length=3, max_length=300)
    date_observation: date
    decouvreur_nom: str | None = None
    decouvreur_prenom: str | None = None

    @field_validator("titre", "description", "lieu", "type_pollution", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return _strip(v)

    @field_validator("date_observation", mode="before")
    @classmethod
    def keep_date_part(cls, v: object) -> object:
        return _date_part(v)

    @field_validator("date_observation")
    @classmethod
    def check_observation_date(cls, v: date) -> date:
        return _validate_observation_date(v)

    @field_validator("decouvreur_nom", "decouvreur_prenom")
    @classmethod
    def check_person_name(cls, v: str | None) -> str | None:
        return _validate_person_name(v)


class PollutionUpdate(BaseModel):
    """Partial update: only fields present in the request are applied."""

    model_config = {"extra": "ignore"}

    titre: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = Field(default=None, min_length=10, max_length=2000)
    type_pollution: PollutionType | None = None
    lieu: str | None = Field(default=None, min_length=3, max_length=300)
    date_observation: date | None = None
    decouvreur_nom: str | None = None
    decouvreur_prenom: str | None = None

    @field_validator("titre", "description", "lieu", "type_pollution", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return _strip(v)

    @field_validator("date_observation", mode="before")
    @classmethod
    def keep_date_part(cls, v: object) -> object:
        return _date_part(v)

    @field_validator("date_observation")
    @classmethod
    def check_observation_date(cls, v: date | None) -> date | None:
        return _validate_observation_date(v)

    @field_validator("decouvreur_nom", "decouvreur_prenom")
    @classmethod
    def check_person_name(cls, v: str | None) -> str | None:
        return _validate_person_name(v)

    def changes(self) -> dict[str, object]:
        """Explicitly set, allowlisted fields only."""
        return {
            name: getattr(self, name)
            for name in UPDATABLE_FIELDS
            if name in self.model_fields_set
            and (getattr(self, name) is not None or name in NULLABLE_FIELDS)
        }


class PollutionOut(BaseModel):
    """A pollution report as returned by the API."""

    model_config = {"from_attributes": True}

    id: int
    titre: str
    description: str
    type_pollution: str
    lieu: str
    date_observation: date
    decouvreur_nom: str | None = None
    decouvreur_prenom: str | None = None
    utilisateur_id: str | None = None
    photo_url: str | None = None
