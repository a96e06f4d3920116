from typing import Any, Optional

from pydantic import (
    AnyHttpUrl,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)

from orcid_login.util.consts import RESERVED_STRATEGY_KEYS


class StrategyConfig(BaseModel):
    """
    Credentials issued by the identity provider and the url it redirects to
    after consent.
    """

    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr
    callback_url: AnyHttpUrl
    sandbox: bool = False

    model_config = ConfigDict(frozen=True)


class StrategyInstanceConfig(BaseModel):
    """
    One file in configs/strategies. "key" identifies the instance (several
    instances of the same strategy can be configured), "strategy" names its type
    """

    key: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9_\-]+$")
    strategy: str
    display_name: Optional[str] = None
    config: dict

    @field_validator("key")
    @classmethod
    def key_not_reserved(cls, key: str) -> str:
        if key in RESERVED_STRATEGY_KEYS:
            raise ValueError(f"'{key}' is reserved for a login route")
        return key


class StrategyInfo(BaseModel):
    key: str
    strategy: str
    display_name: Optional[str] = None


class OrcidParams(BaseModel):
    """
    ORCiD token response. Next to the tokens it carries the orcid id and the
    public name of the researcher
    """

    orcid: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class NormalizedProfile(BaseModel):
    email: str = Field(..., min_length=1)
    # passed through as the provider sent it, only names from params are str
    display_name: Optional[Any] = Field(None, alias="displayName")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def as_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class CallbackResult(BaseModel):
    """
    Outcome of a strategy callback: the provisioned user or the error that
    stopped it. Never both.
    """

    user: Optional[Any] = None
    error: Optional[Exception] = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def user_or_error(self):
        if self.user is not None and self.error is not None:
            raise ValueError("a callback result carries either a user or an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
