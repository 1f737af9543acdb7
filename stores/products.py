from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError

from errors import AppMessage, ConflictError, NotFoundError, ValidationError
from models.booking import Booking
from models.product import Product
from stores.common import DeleteResult, Page, clean_text, paginate


@dataclass(frozen=True)
class ProductListFilter:
    search: Optional[str] = None
    page: int = 1
    limit: int = 10


def _check_price(price) -> int:
    if isinstance(price, bool) or not isinstance(price, int) or price < 0:
        raise ValidationError(AppMessage.INVALID_PRICE)
    return price


class ProductStore:
    """Catalog read by the booking engine; only this store writes products."""

    def __init__(self, session, max_limit: int = 100):
        self.session = session
        self.max_limit = max_limit

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError(AppMessage.PRODUCT_CODE_ALREADY_EXISTS)

    def create(self, fields: dict) -> Product:
        name = clean_text(fields.get("name"), "name")
        code = clean_text(fields.get("code"), "code")
        if not name:
            raise ValidationError(AppMessage.PRODUCT_NAME_REQUIRED)
        if not code:
            raise ValidationError(AppMessage.PRODUCT_CODE_REQUIRED)
        price = _check_price(fields.get("price", 0))
        description = clean_text(fields.get("description"), "description")

        if self.session.query(Product.id).filter_by(code=code).first():
            raise ConflictError(AppMessage.PRODUCT_CODE_ALREADY_EXISTS)

        product = Product(
            name=name,
            code=code,
            description=description or None,
            price=price,
        )
        self.session.add(product)
        self._commit()
        return product

    def find_one(self, product_id: str) -> Optional[Product]:
        if not product_id:
            return None
        return self.session.get(Product, product_id)

    def list(self, product_filter: ProductListFilter) -> Page:
        q = self.session.query(Product).filter_by(is_active=True)
        if product_filter.search:
            q = q.filter(Product.name.ilike(f"%{product_filter.search.strip()}%"))
        q = q.order_by(Product.created_at.desc(), Product.id)
        return paginate(q, product_filter.page, product_filter.limit, self.max_limit)

    def update(self, product_id: str, patch: dict) -> Product:
        product = self.find_one(product_id)
        if not product:
            raise NotFoundError(AppMessage.PRODUCT_NOT_FOUND)

        try:
            self._apply_patch(product, patch)
        except ValidationError:
            self.session.rollback()
            raise

        self._commit()
        return product

    def _apply_patch(self, product: Product, patch: dict) -> None:
        if "name" in patch:
            name = clean_text(patch["name"], "name")
            if not name:
                raise ValidationError(AppMessage.PRODUCT_NAME_REQUIRED)
            product.name = name
        if "code" in patch:
            code = clean_text(patch["code"], "code")
            if not code:
                raise ValidationError(AppMessage.PRODUCT_CODE_REQUIRED)
            product.code = code
        if "description" in patch:
            product.description = clean_text(patch["description"], "description") or None
        if "price" in patch:
            product.price = _check_price(patch["price"])
        if "is_active" in patch:
            product.is_active = bool(patch["is_active"])

    def delete(self, product_id: str) -> DeleteResult:
        product = self.find_one(product_id)
        if not product:
            raise NotFoundError(AppMessage.PRODUCT_NOT_FOUND)

        # booking history keeps its product; retire it with is_active=False instead
        if self.session.query(Booking.id).filter_by(product_id=product.id).first():
            raise ConflictError(AppMessage.PRODUCT_HAS_BOOKINGS, context={"productId": product.id})

        self.session.delete(product)
        try:
            self.session.commit()
        except IntegrityError:
            # a booking landed between the check and the delete
            self.session.rollback()
            raise ConflictError(AppMessage.PRODUCT_HAS_BOOKINGS, context={"productId": product_id})
        return DeleteResult(acknowledged=True, deleted_count=1)
