def _iso(value):
    return value.isoformat() if value else None


def serialize_user(user) -> dict:
    # password_hash is deliberately absent
    return {
        "id": user.id,
        "name": user.name,
        "username": user.username,
        "email": user.email,
        "createdAt": _iso(user.created_at),
        "updatedAt": _iso(user.updated_at),
    }


def serialize_product(product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "code": product.code,
        "description": product.description,
        "price": product.price,
        "isActive": product.is_active,
        "createdAt": _iso(product.created_at),
    }


def serialize_booking(booking, with_product: bool = False) -> dict:
    out = {
        "id": booking.id,
        "product": booking.product_id,
        "user": booking.user_id,
        "status": booking.status,
        "startDate": _iso(booking.start_date),
        "estimatedEndDate": _iso(booking.estimated_end_date),
        "returned": booking.returned,
        "createdAt": _iso(booking.created_at),
    }
    if with_product and booking.product is not None:
        out["product"] = serialize_product(booking.product)
    return out


def serialize_page(page, serializer) -> dict:
    return {"nodes": [serializer(item) for item in page.items], "meta": page.meta()}
