from logging import getLogger
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from orcid_login.models.orm import Base
from orcid_login.settings import env_settings

logger = getLogger(__name__)


def setup_db(uri: Optional[str] = None):
    uri = uri or env_settings().DATABASE_URL
    connect_args = {"check_same_thread": False} if uri.startswith("sqlite") else {}
    try:
        engine = create_engine(uri, connect_args=connect_args)
        Base.metadata.create_all(engine)
        return engine
    except OperationalError as err:
        logger.error("Cannot create DB engine")
        logger.error(err)
        raise


def create_session_factory(uri: Optional[str] = None) -> sessionmaker:
    # users are handed out of the session that created them
    session_factory = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=setup_db(uri)
    )
    logger.info("db session factory bound to db")
    return session_factory
