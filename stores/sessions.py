from typing import Optional

from loguru import logger

from models.session import Session
from stores.common import DeleteResult


class SessionStore:
    """
    One row per login. Deleting a row revokes the refresh tokens signed
    with its secret; access tokens simply run out.
    """

    def __init__(self, session):
        self.session = session

    def create(self, subscriber_id: str, refresh_secret: str) -> Session:
        row = Session(subscriber=subscriber_id, rt_secret=refresh_secret)
        self.session.add(row)
        self.session.commit()
        logger.debug("Session {} created for {}", row.id, subscriber_id)
        return row

    def find_by_id(self, session_id: str) -> Optional[Session]:
        if not session_id:
            return None
        return self.session.get(Session, session_id)

    def delete_by_id(self, session_id: str) -> DeleteResult:
        # unknown ids are not an error: logout stays idempotent
        deleted = 0
        if session_id:
            deleted = self.session.query(Session).filter_by(id=session_id).delete(synchronize_session=False)
        self.session.commit()
        return DeleteResult(acknowledged=True, deleted_count=deleted)

    def delete_by_subscriber(self, subscriber_id: str) -> DeleteResult:
        deleted = self.session.query(Session).filter_by(subscriber=subscriber_id).delete(synchronize_session=False)
        self.session.commit()
        return DeleteResult(acknowledged=True, deleted_count=deleted)
