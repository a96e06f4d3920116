from logging import getLogger
from typing import Dict, List

from authlib.integrations.starlette_client import OAuth
from starlette.status import HTTP_404_NOT_FOUND

from orcid_login.util.exceptions import ApplicationException

logger = getLogger(__name__)


def drop_cached_client(oauth: OAuth, name: str) -> None:
    """
    OAuth.register returns the client created earlier for a known name and
    ignores the new kwargs, so that client has to go first. _clients is not
    public authlib api.
    """
    oauth._clients.pop(name, None)


class OAuthStrategyRegistry:
    """
    Named login strategies. Each strategy's OAuth2 client is registered
    under the same name in an authlib OAuth registry, which does the
    handshake and the token exchange.
    """

    def __init__(self, oauth: OAuth = None):
        self.oauth = oauth or OAuth()
        self.strategies: Dict[str, object] = {}

    def use(self, name: str, strategy) -> None:
        if name in self.strategies:
            logger.warning(f"strategy {name} registered again. overwriting")
        self.strategies[name] = strategy
        drop_cached_client(self.oauth, name)
        self.oauth.register(name=name, **strategy.client_kwargs())

    def get(self, name: str):
        strategy = self.strategies.get(name)
        if not strategy:
            raise ApplicationException(HTTP_404_NOT_FOUND, "unknown strategy", {"strategy": name})
        return strategy

    def create_client(self, name: str):
        self.get(name)
        return self.oauth.create_client(name)

    def names(self) -> List[str]:
        return list(self.strategies.keys())

    def __contains__(self, name: str) -> bool:
        return name in self.strategies

    def __len__(self) -> int:
        return len(self.strategies)
