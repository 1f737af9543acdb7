"""
Registration, login, logout and token refresh.

Session lifecycle: none -> active (login) -> revoked (logout). Logging in
again opens another session; earlier ones stay valid until logged out.
"""
from loguru import logger

from errors import AppMessage, AuthenticationError, ConflictError, ForbiddenError, ValidationError
from models.user import User
from security.password import verify_password
from security.tokens import TokenIssuer, TokenPair
from stores.common import DeleteResult
from stores.sessions import SessionStore
from stores.users import CredentialStore, UserFilter


class AuthService:
    def __init__(self, users: CredentialStore, sessions: SessionStore, tokens: TokenIssuer):
        self.users = users
        self.sessions = sessions
        self.tokens = tokens

    def register(self, payload: dict) -> User:
        username = payload.get("username")
        email = payload.get("email")

        # username wins when both collide
        if username and self.users.find(UserFilter(username=username)):
            raise ConflictError(AppMessage.USERNAME_ALREADY_EXISTS)
        if email and self.users.find(UserFilter(email=email)):
            raise ConflictError(AppMessage.EMAIL_ALREADY_EXISTS)

        return self.users.create(payload)

    def login(self, identifier: str, password: str) -> TokenPair:
        # type check runs before any lookup
        if not isinstance(identifier, str) or not isinstance(password, str):
            raise ValidationError(AppMessage.INVALID_PAYLOAD)

        user = self.users.find_by_login(identifier)

        # same error for unknown user and wrong password
        if not user or not verify_password(password, user.password_hash):
            logger.info("Login rejected")
            raise ForbiddenError(AppMessage.INVALID_CREDENTIALS)

        return self.claim_tokens(user.id)

    def claim_tokens(self, subscriber_id: str) -> TokenPair:
        """Opens a new session for the subscriber and signs its token pair."""
        rt_secret = self.tokens.generate_refresh_secret(subscriber_id)
        session = self.sessions.create(subscriber_id, rt_secret)
        logger.info("User {} logged in, session {}", subscriber_id, session.id)
        return self.tokens.issue(subscriber_id, session.id, rt_secret)

    def logout(self, session_id: str) -> DeleteResult:
        result = self.sessions.delete_by_id(session_id)
        logger.info("Logout for session {} removed {}", session_id, result.deleted_count)
        return result

    def logout_all(self, subscriber_id: str) -> DeleteResult:
        return self.sessions.delete_by_subscriber(subscriber_id)

    def refresh(self, refresh_token: str) -> TokenPair:
        session_id = self.tokens.read_refresh_session_id(refresh_token)
        session = self.sessions.find_by_id(session_id)
        if not session:
            raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)

        claims = self.tokens.decode_refresh_token(refresh_token, session.rt_secret)
        if claims.get("subscriber") != session.subscriber:
            raise AuthenticationError(AppMessage.INVALID_REFRESH_TOKEN)

        # same session, same secret: only the token lifetimes move forward
        return self.tokens.issue(session.subscriber, session.id, session.rt_secret)
