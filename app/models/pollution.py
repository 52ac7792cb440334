"""ORM model for reported pollution incidents."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text

from app.models.base import Base


class Pollution(Base):
    """
    One reported pollution incident.

    utilisateur_id is the owning user; NULL for anonymous or orphaned reports.
    photo_url holds the attachment as a data URI (data:image/...;base64,...).
    """

    __tablename__ = "pollutions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    titre = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    type_pollution = Column(String(64), nullable=False, index=True)
    lieu = Column(String(300), nullable=False)
    date_observation = Column(Date, nullable=False)
    decouvreur_nom = Column(String(100), nullable=True)
    decouvreur_prenom = Column(String(100), nullable=True)
    utilisateur_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    photo_url = Column(Text, nullable=True)
