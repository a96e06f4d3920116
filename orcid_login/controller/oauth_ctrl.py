from typing import List

from fastapi import APIRouter, Depends
from starlette.requests import Request
from starlette.responses import RedirectResponse

from orcid_login.dependencies import get_oauth
from orcid_login.models.schema.OAuthSchemas import StrategyInfo
from orcid_login.models.schema.response import GenResponse
from orcid_login.models.schema.user import UserOut
from orcid_login.services.oauth_sw import OAuthService

router = APIRouter(prefix="/login", tags=["Login"])


@router.get("/strategies", response_model=GenResponse[List[StrategyInfo]])
async def get_strategies(oauth: OAuthService = Depends(get_oauth)):
    return GenResponse(data=oauth.get_strategies())


@router.get("/{strategy}")
async def init_login(
    request: Request, strategy: str, oauth: OAuthService = Depends(get_oauth)
) -> RedirectResponse:
    return await oauth.init_login(request, strategy)


@router.get("/{strategy}/callback", response_model=GenResponse[UserOut])
async def login_callback(
    request: Request, strategy: str, oauth: OAuthService = Depends(get_oauth)
):
    user = await oauth.complete_login(request, strategy)
    return GenResponse(data=UserOut.model_validate(user), msg="login ok")
