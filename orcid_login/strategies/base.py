from typing import Any, Protocol, runtime_checkable

from orcid_login.models.schema.OAuthSchemas import NormalizedProfile


@runtime_checkable
class UserProvisioner(Protocol):
    """Maps an authenticated external identity to a user of the host."""

    async def process_profile(self, profile: NormalizedProfile, provider_key: str) -> Any:
        ...


@runtime_checkable
class StrategyRegistry(Protocol):
    """Anything that accepts a named strategy instance."""

    def use(self, name: str, strategy: Any) -> None:
        ...
