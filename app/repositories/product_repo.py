# app/repositories/product_repo.py
from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models.product import Product, utcnow

MAX_ID = 2**63 - 1


def parse_id(key: str) -> int | None:
    """
    Primary key encoded in `key`, or None when `key` is not a plain ASCII
    integer that fits a signed 64-bit column.
    """
    if not (key.isascii() and key.isdigit()) or len(key) > len(str(MAX_ID)):
        return None
    value = int(key)
    if value > MAX_ID:
        return None
    return value


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_slug(self, session: Session, slug: str) -> Product | None:
        stmt = select(Product).where(Product.slug == slug)
        return session.exec(stmt).first()

    def find_by_slug_or_id(self, session: Session, key: str) -> Product | None:
        """
        Look a product up by a single path value tested against both the
        slug and the numeric id. Slug matches win over id matches.
        """
        conditions = [Product.slug == key]
        product_id = parse_id(key)
        if product_id is not None:
            conditions.append(Product.id == product_id)
        stmt = (
            select(Product)
            .where(or_(*conditions))
            .order_by((Product.slug == key).desc(), Product.id)
        )
        return session.exec(stmt).first()

    def name_exists(
        self,
        session: Session,
        name: str,
        exclude_id: int | None = None,
    ) -> bool:
        stmt = select(Product.id).where(Product.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Product.id != exclude_id)
        return session.exec(stmt).first() is not None

    def list_all(self, session: Session) -> list[Product]:
        stmt = select(Product).order_by(Product.id)
        return list(session.exec(stmt).all())

    def count_published(self, session: Session) -> int:
        stmt = select(func.count()).select_from(Product).where(Product.status == True)  # noqa: E712
        return session.exec(stmt).one()

    def list_published(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 9,
    ) -> list[Product]:
        stmt = (
            select(Product)
            .where(Product.status == True)  # noqa: E712
            .order_by(Product.id)
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = utcnow()
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        session.delete(product)
        session.commit()
