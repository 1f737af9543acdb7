from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from errors import AppMessage, ConflictError, NotFoundError, ValidationError
from models.user import User
from security.password import DEFAULT_ROUNDS, hash_password
from stores.common import DeleteResult, clean_text

PATCHABLE_FIELDS = ("name", "username", "email", "password")


def normalize_email(email) -> str:
    return clean_text(email, "email").lower()


@dataclass(frozen=True)
class UserFilter:
    id: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None

    def apply(self, query):
        if not (self.id or self.username or self.email):
            # an empty filter would match every user
            raise ValidationError(AppMessage.USER_FILTER_EMPTY)
        if self.id:
            query = query.filter(User.id == self.id)
        if self.username:
            query = query.filter(User.username == clean_text(self.username, "username"))
        if self.email:
            query = query.filter(User.email == normalize_email(self.email))
        return query


class CredentialStore:
    """Owns the users table. Passwords go in as plaintext and are only ever stored hashed."""

    def __init__(self, session, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.session = session
        self.bcrypt_rounds = bcrypt_rounds

    def _username_taken(self, username: str, exclude_id: Optional[str] = None) -> bool:
        q = self.session.query(User.id).filter(User.username == username)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        return q.first() is not None

    def _email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        q = self.session.query(User.id).filter(User.email == email)
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        return q.first() is not None

    def _commit_or_conflict(self, username: str, exclude_id: Optional[str] = None) -> None:
        try:
            self.session.commit()
        except IntegrityError:
            # lost a race with a concurrent insert/update
            self.session.rollback()
            if self._username_taken(username, exclude_id=exclude_id):
                raise ConflictError(AppMessage.USERNAME_ALREADY_EXISTS)
            raise ConflictError(AppMessage.EMAIL_ALREADY_EXISTS)

    def create(self, fields: dict) -> User:
        username = clean_text(fields.get("username"), "username")
        email = normalize_email(fields.get("email"))
        name = clean_text(fields.get("name"), "name")
        password = fields.get("password") or ""

        if not username:
            raise ValidationError(AppMessage.USERNAME_REQUIRED)
        if not email:
            raise ValidationError(AppMessage.EMAIL_REQUIRED)
        if not isinstance(password, str) or not password:
            raise ValidationError(AppMessage.PASSWORD_REQUIRED)

        if self._username_taken(username):
            raise ConflictError(AppMessage.USERNAME_ALREADY_EXISTS)
        if self._email_taken(email):
            raise ConflictError(AppMessage.EMAIL_ALREADY_EXISTS)

        user = User(
            name=name or None,
            username=username,
            email=email,
            password_hash=hash_password(password, rounds=self.bcrypt_rounds),
        )
        self.session.add(user)
        self._commit_or_conflict(username)
        logger.info("User {} created", user.id)
        return user

    def find(self, user_filter: UserFilter) -> Optional[User]:
        return user_filter.apply(self.session.query(User)).first()

    def find_by_login(self, identifier: str) -> Optional[User]:
        """Resolves a login identifier that may be either a username or an email."""
        if not isinstance(identifier, str):
            return None
        identifier = identifier.strip()
        if not identifier:
            return None
        return (
            self.session.query(User)
            .filter(or_(User.username == identifier, User.email == identifier.lower()))
            .first()
        )

    def update(self, user_filter: UserFilter, patch: dict) -> User:
        user = self.find(user_filter)
        if not user:
            raise NotFoundError(AppMessage.USER_NOT_FOUND)

        try:
            self._apply_patch(user, patch)
        except (ValidationError, ConflictError):
            # leave nothing half-applied in the shared session
            self.session.rollback()
            raise

        self._commit_or_conflict(user.username, exclude_id=user.id)
        return user

    def _apply_patch(self, user: User, patch: dict) -> None:
        if "username" in patch:
            username = clean_text(patch["username"], "username")
            if not username:
                raise ValidationError(AppMessage.USERNAME_REQUIRED)
            if self._username_taken(username, exclude_id=user.id):
                raise ConflictError(AppMessage.USERNAME_ALREADY_EXISTS)
            user.username = username

        if "email" in patch:
            email = normalize_email(patch["email"])
            if not email:
                raise ValidationError(AppMessage.EMAIL_REQUIRED)
            if self._email_taken(email, exclude_id=user.id):
                raise ConflictError(AppMessage.EMAIL_ALREADY_EXISTS)
            user.email = email

        if "name" in patch:
            user.name = clean_text(patch["name"], "name") or None

        if "password" in patch:
            password = patch["password"]
            if not isinstance(password, str) or not password:
                raise ValidationError(AppMessage.PASSWORD_REQUIRED)
            user.password_hash = hash_password(password, rounds=self.bcrypt_rounds)

    def delete(self, user_filter: UserFilter) -> DeleteResult:
        user = self.find(user_filter)
        if not user:
            raise NotFoundError(AppMessage.USER_NOT_FOUND)
        user_id = user.id
        self.session.delete(user)
        self.session.commit()
        logger.info("User {} deleted", user_id)
        return DeleteResult(acknowledged=True, deleted_count=1)
