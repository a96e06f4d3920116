"""
ORCiD login strategy.

ORCiD does not hand out email addresses through the authenticate flow. The
token response carries the orcid id and the public name, so the profile passed
to provisioning gets a placeholder email derived from the orcid id.
"""
from logging import getLogger
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError
from starlette.requests import Request

from orcid_login.models.schema.OAuthSchemas import (
    CallbackResult,
    NormalizedProfile,
    OrcidParams,
    StrategyConfig,
)
from orcid_login.strategies.base import StrategyRegistry, UserProvisioner
from orcid_login.util.consts import ORCID, STRATEGY_PATH_PARAM
from orcid_login.util.exceptions import MalformedProviderResponse, StrategyConfigError

logger = getLogger(__name__)

PROVIDER_NAME = ORCID

SYNTHETIC_EMAIL_PREFIX = "not-really-an-email-"
SYNTHETIC_EMAIL_DOMAIN = "fake.com"

orcid_hosts = {
    False: {"site": "https://orcid.org", "api": "https://pub.orcid.org/v3.0/"},
    True: {
        "site": "https://sandbox.orcid.org",
        "api": "https://pub.sandbox.orcid.org/v3.0/",
    },
}

orcid_paths = {
    "auth_path": "/oauth/authorize",
    "token_path": "/oauth/token",
}


def synthetic_email(orcid: str) -> str:
    return f"{SYNTHETIC_EMAIL_PREFIX}{orcid}@{SYNTHETIC_EMAIL_DOMAIN}"


def error_field(err: ValidationError) -> str:
    return ".".join(str(loc) for loc in err.errors()[0]["loc"])


def validate_config(config: Union[StrategyConfig, Mapping[str, Any]]) -> StrategyConfig:
    if isinstance(config, StrategyConfig):
        return config
    try:
        return StrategyConfig.model_validate(config)
    except ValidationError as err:
        raise StrategyConfigError(PROVIDER_NAME, err) from err


class OrcidStrategy:
    def __init__(
        self,
        config: StrategyConfig,
        provisioner: UserProvisioner,
        name: str = PROVIDER_NAME,
    ):
        self.name = name
        self.config = config
        self.provisioner = provisioner
        self.hosts = orcid_hosts[config.sandbox]

    @property
    def redirect_uri(self) -> str:
        return str(self.config.callback_url)

    def client_kwargs(self) -> dict:
        """
        kwargs for the authlib OAuth registry
        """
        site = self.hosts["site"]
        return {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret.get_secret_value(),
            "authorize_url": site + orcid_paths["auth_path"],
            "access_token_url": site + orcid_paths["token_path"],
            "api_base_url": self.hosts["api"],
            "client_kwargs": {
                "scope": "/authenticate",
                "token_endpoint_auth_method": "client_secret_post",
            },
        }

    def normalize_profile(
        self, params: Mapping[str, Any], profile: Optional[Mapping[str, Any]]
    ) -> NormalizedProfile:
        try:
            orcid_params = OrcidParams.model_validate(dict(params or {}))
        except ValidationError as err:
            raise MalformedProviderResponse(PROVIDER_NAME, error_field(err)) from err
        if not orcid_params.orcid:
            raise MalformedProviderResponse(PROVIDER_NAME, "orcid")

        data = {**(profile or {}), "email": synthetic_email(orcid_params.orcid)}
        # without a name in the response, the profile keeps its own displayName
        if orcid_params.name is not None:
            data["displayName"] = orcid_params.name
        return NormalizedProfile.model_validate(data)

    def provider_key(self, request: Optional[Request]) -> str:
        if request is None:
            return self.name
        return request.path_params.get(STRATEGY_PATH_PARAM, self.name)

    async def on_callback(
        self,
        request: Optional[Request],
        access_token: Optional[str],
        refresh_token: Optional[str],
        params: Mapping[str, Any],
        profile: Optional[Mapping[str, Any]],
    ) -> CallbackResult:
        """
        Called after a successful token exchange.

        @param request: the in-flight request, its "strategy" path param is the
            key of the strategy instance that handles it
        @param access_token: not used
        @param refresh_token: not used
        @param params: token response, must contain the orcid id
        @param profile: profile fields of the provider, passed through
        @return: CallbackResult with the provisioned user or the error
        """
        try:
            normalized = self.normalize_profile(params, profile)
        except MalformedProviderResponse as err:
            logger.warning(f"{self.name}: {err}")
            return CallbackResult(error=err)

        provider_key = self.provider_key(request)
        try:
            user = await self.provisioner.process_profile(
                profile=normalized, provider_key=provider_key
            )
        except Exception as err:
            logger.warning(f"provisioning failed for {provider_key}: {err!r}")
            return CallbackResult(error=err)
        logger.info(f"provisioned user for {provider_key}")
        return CallbackResult(user=user)


def register(
    registry: StrategyRegistry,
    config: Union[StrategyConfig, Mapping[str, Any]],
    provisioner: UserProvisioner,
    name: str = PROVIDER_NAME,
) -> None:
    """
    Registers an ORCiD strategy. A name that is already registered gets
    overwritten. Raises StrategyConfigError for invalid configs.
    """
    strategy = OrcidStrategy(validate_config(config), provisioner, name)
    registry.use(name, strategy)
    logger.info(f"strategy registered: {name} (sandbox: {strategy.config.sandbox})")
