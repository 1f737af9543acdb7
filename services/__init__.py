from dataclasses import dataclass

from flask import current_app

from security.tokens import TokenIssuer
from services.auth import AuthService
from services.bookings import BookingListFilter, BookingService
from stores.products import ProductStore
from stores.sessions import SessionStore
from stores.users import CredentialStore

EXTENSION_KEY = "rexy.services"


@dataclass(frozen=True)
class Services:
    users: CredentialStore
    sessions: SessionStore
    products: ProductStore
    tokens: TokenIssuer
    auth: AuthService
    bookings: BookingService


def build_services(session, config) -> Services:
    """
    Wires every component once, at startup. `session` is the SQLAlchemy
    session handle the stores share; `config` is the validated app config.
    """
    rounds = int(config["BCRYPT_ROUNDS"])
    max_limit = int(config["PAGINATION_MAX_LIMIT"])

    users = CredentialStore(session, bcrypt_rounds=rounds)
    sessions = SessionStore(session)
    products = ProductStore(session, max_limit=max_limit)
    tokens = TokenIssuer(
        config["ACCESS_TOKEN_SECRET"],
        access_ttl_seconds=int(config["ACCESS_TOKEN_TTL_SECONDS"]),
        refresh_ttl_seconds=int(config["REFRESH_TOKEN_TTL_SECONDS"]),
        secret_rounds=rounds,
    )
    return Services(
        users=users,
        sessions=sessions,
        products=products,
        tokens=tokens,
        auth=AuthService(users, sessions, tokens),
        bookings=BookingService(session, products, max_limit=max_limit),
    )


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["Services", "BookingListFilter", "build_services", "get_services", "EXTENSION_KEY"]
