from starlette.requests import Request

from orcid_login.services.oauth_sw import OAuthService


def get_oauth(request: Request) -> OAuthService:
    return request.app.state.oauth
