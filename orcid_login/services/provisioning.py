from datetime import datetime
from logging import getLogger
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from starlette.concurrency import run_in_threadpool

from orcid_login.models.orm import User
from orcid_login.models.schema.OAuthSchemas import NormalizedProfile

logger = getLogger(__name__)


def display_name_of(profile: NormalizedProfile) -> Optional[str]:
    # providers may send structured names, the column only takes plain ones
    if isinstance(profile.display_name, str):
        return profile.display_name
    return None


class DbUserProvisioner:
    """
    Finds or creates the user of an external identity. Users are identified
    by the key of the strategy instance and the (maybe synthetic) email.
    Database errors are raised after a rollback.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def process_profile(self, profile: NormalizedProfile, provider_key: str) -> User:
        return await run_in_threadpool(self.process_profile_sync, profile, provider_key)

    def process_profile_sync(self, profile: NormalizedProfile, provider_key: str) -> User:
        session: Session = self.session_factory()
        try:
            user = self.get_user(session, provider_key, profile.email)
            if user:
                self.update_user(user, profile)
                logger.debug(f"updated user {user}")
            else:
                user = self.create_user(session, provider_key, profile)
                logger.info(f"created user for {provider_key}")
            session.commit()
            return user
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def get_user(session: Session, provider_key: str, email: str) -> Optional[User]:
        return (
            session.query(User)
            .filter(User.provider_key == provider_key, User.email == email)
            .one_or_none()
        )

    @staticmethod
    def create_user(session: Session, provider_key: str, profile: NormalizedProfile) -> User:
        # noinspection PyArgumentList
        user = User(
            email=profile.email,
            display_name=display_name_of(profile),
            provider_key=provider_key,
            profile=profile.as_dict(),
        )
        session.add(user)
        return user

    @staticmethod
    def update_user(user: User, profile: NormalizedProfile):
        display_name = display_name_of(profile)
        if display_name:
            user.display_name = display_name
        user.profile = profile.as_dict()
        user.last_login = datetime.now()
