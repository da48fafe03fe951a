# app/repositories/media_repo.py
from sqlmodel import Session, select

from app.models.media import Media


class MediaRepository:
    """
    Data access layer for Media rows.

    Storage of the file bytes is not handled here, see
    app/services/media_service.py.
    """

    def list_for_product(
        self,
        session: Session,
        product_id: int,
        collection_name: str | None = None,
    ) -> list[Media]:
        stmt = select(Media).where(Media.product_id == product_id)
        if collection_name is not None:
            stmt = stmt.where(Media.collection_name == collection_name)
        stmt = stmt.order_by(Media.id)
        return list(session.exec(stmt).all())

    def create(self, session: Session, media: Media) -> Media:
        session.add(media)
        session.commit()
        session.refresh(media)
        return media

    def delete(self, session: Session, media: Media) -> None:
        session.delete(media)
        session.commit()
