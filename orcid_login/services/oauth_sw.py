from logging import getLogger
from os.path import basename
from typing import Any, Dict, List, Mapping, Optional

import httpx
import orjson
from authlib.integrations.base_client import OAuthError
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import RedirectResponse
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED

from orcid_login.models.schema.OAuthSchemas import StrategyInfo, StrategyInstanceConfig
from orcid_login.services.strategy_registry import OAuthStrategyRegistry
from orcid_login.strategies import strategy_modules
from orcid_login.strategies.base import UserProvisioner
from orcid_login.util.consts import SESSION_USER
from orcid_login.util.exceptions import ApplicationException, StrategyConfigError
from orcid_login.util.files import json_files, read_orjson

logger = getLogger(__name__)


def user_id_of(user: Any) -> Any:
    """
    id of a provisioned user, provisioners may return objects or mappings
    """
    if user is None:
        return None
    if isinstance(user, Mapping):
        return user.get("id")
    return getattr(user, "id", None)


class OAuthHelper:
    """
    Registers one strategy instance per json file in the strategy config folder.
    Files that cannot be read or validated are skipped.
    """

    def __init__(
        self,
        provisioner: UserProvisioner,
        config_dir: Optional[str] = None,
        registry: Optional[OAuthStrategyRegistry] = None,
    ):
        self.provisioner = provisioner
        self.registry = registry or OAuthStrategyRegistry()
        self.strategies: Dict[str, StrategyInfo] = {}
        if config_dir:
            for file in json_files(config_dir):
                self.load_strategy_file(file)

    def load_strategy_file(self, file: str) -> bool:
        try:
            instance = StrategyInstanceConfig.model_validate(read_orjson(file))
        except (orjson.JSONDecodeError, ValidationError) as err:
            logger.error(err)
            logger.error(f"Strategy not registered, file: {basename(file)}")
            return False
        return self.add_strategy(instance)

    def add_strategy(self, instance: StrategyInstanceConfig) -> bool:
        strategy_module = strategy_modules.get(instance.strategy)
        if not strategy_module:
            logger.error(f"Unknown strategy '{instance.strategy}' for key: {instance.key}")
            return False
        try:
            strategy_module.register(
                self.registry, instance.config, self.provisioner, instance.key
            )
        except StrategyConfigError as err:
            logger.error(err)
            return False
        self.strategies[instance.key] = StrategyInfo(
            key=instance.key,
            strategy=instance.strategy,
            display_name=instance.display_name,
        )
        return True


class OAuthService:
    def __init__(self, helper: OAuthHelper):
        self.helper = helper
        self.registry = helper.registry

    def get_strategies(self) -> List[StrategyInfo]:
        return list(self.helper.strategies.values())

    async def init_login(self, request: Request, key: str) -> RedirectResponse:
        strategy = self.registry.get(key)
        client = self.registry.create_client(key)
        return await client.authorize_redirect(request, strategy.redirect_uri)

    async def complete_login(self, request: Request, key: str):
        """
        token exchange and provisioning of the user.
        @return: the provisioned user
        """
        strategy = self.registry.get(key)
        client = self.registry.create_client(key)

        logger.info(f"completing login: {key}")
        try:
            token_response = await client.authorize_access_token(request)
        except (OAuthError, httpx.HTTPError) as err:
            logger.error(f"{key}: {err!r}")
            raise ApplicationException(HTTP_400_BAD_REQUEST, "cannot obtain token")

        result = await strategy.on_callback(
            request,
            token_response.get("access_token"),
            token_response.get("refresh_token"),
            dict(token_response),
            {},
        )
        if not result.ok:
            logger.error(f"login failed for {key}: {result.error!r}")
            raise ApplicationException(HTTP_401_UNAUTHORIZED, "authentication failed")

        user_id = user_id_of(result.user)
        if user_id is None:
            logger.error(f"login failed for {key}: provisioning returned no user id")
            raise ApplicationException(HTTP_401_UNAUTHORIZED, "authentication failed")
        request.session[SESSION_USER] = user_id
        return result.user
