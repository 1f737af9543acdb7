from flask import Blueprint, g, request

from errors import AppMessage, NotFoundError
from services import get_services
from stores.products import ProductListFilter
from utils.audit import log_event
from utils.auth_context import login_required
from utils.params import json_body, page_args
from utils.responses import app_response
from utils.serializers import serialize_page, serialize_product

products_bp = Blueprint("products", __name__, url_prefix="/products")

PRODUCT_FIELDS = ("name", "code", "description", "price", "is_active")


@products_bp.post("")
@login_required
def create_product():
    data = json_body()
    product = get_services().products.create(data)
    log_event("PRODUCT_CREATE", user_id=g.user.id, entity="product", entity_id=product.id)
    return app_response(201, message="Product created successfully", data=serialize_product(product))


@products_bp.get("")
def list_products():
    page, limit = page_args()
    search = (request.args.get("search") or "").strip() or None
    result = get_services().products.list(ProductListFilter(search=search, page=page, limit=limit))
    return app_response(200, data=serialize_page(result, serialize_product))


@products_bp.get("/<product_id>")
def get_product(product_id: str):
    product = get_services().products.find_one(product_id)
    if not product:
        raise NotFoundError(AppMessage.PRODUCT_NOT_FOUND)
    return app_response(200, data=serialize_product(product))


@products_bp.patch("/<product_id>")
@login_required
def update_product(product_id: str):
    data = json_body()
    patch = {k: data[k] for k in PRODUCT_FIELDS if k in data}
    product = get_services().products.update(product_id, patch)
    log_event("PRODUCT_UPDATE", user_id=g.user.id, entity="product", entity_id=product.id)
    return app_response(200, message="Product updated", data=serialize_product(product))


@products_bp.delete("/<product_id>")
@login_required
def delete_product(product_id: str):
    result = get_services().products.delete(product_id)
    log_event("PRODUCT_DELETE", user_id=g.user.id, entity="product", entity_id=product_id)
    return app_response(200, message="Product deleted", data=result.to_dict())
