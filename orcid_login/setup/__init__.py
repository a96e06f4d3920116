from typing import Optional

from fastapi import FastAPI

from orcid_login import controller
from orcid_login.app_logger import get_logger
from orcid_login.middlewares import add_middlewares
from orcid_login.services.oauth_sw import OAuthHelper, OAuthService
from orcid_login.services.provisioning import DbUserProvisioner
from orcid_login.settings import strategy_config_dir
from orcid_login.setup_db import create_session_factory
from orcid_login.strategies.base import UserProvisioner
from orcid_login.util.exceptions import (
    ApplicationException,
    application_exception_handler,
    exception_handler,
)

logger = get_logger(__name__)


def setup_all(
    app: FastAPI,
    provisioner: Optional[UserProvisioner] = None,
    config_dir: Optional[str] = None,
):
    logger.info("setup")
    add_middlewares(app)

    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    app.include_router(controller.base_router)

    if not provisioner:
        provisioner = DbUserProvisioner(create_session_factory())

    helper = OAuthHelper(provisioner, config_dir or strategy_config_dir())
    if not helper.strategies:
        logger.warning("no login strategy registered")
    app.state.oauth = OAuthService(helper)

    logger.info(f"setup done. strategies: {helper.registry.names()}")
