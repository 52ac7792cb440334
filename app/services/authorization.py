"""Ownership rule for pollution reports: owner or admin may mutate; unowned reports are open."""

from sqlalchemy.orm import Session

from app.models import Pollution, User
from app.models.user import ROLE_ADMIN
from app.schemas.auth import CurrentUser


def can_mutate_report(db: Session, report: Pollution, requester: CurrentUser) -> bool:
    """
    Decide whether requester may update or delete report.

    - No owner: allowed for any authenticated caller.
    - Owner is the requester: allowed.
    - Otherwise the requester's stored role decides; only 'admin' is allowed.
    """
    if report.utilisateur_id is None:
        # TODO: confirm with product whether ownerless reports should be admin-only.
        return True
    if report.utilisateur_id == requester.id:
        return True
    user = db.get(User, requester.id)
    return user is not None and user.role == ROLE_ADMIN
