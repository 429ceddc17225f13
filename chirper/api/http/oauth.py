import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from chirper.api.deps import get_github_client, get_oauth_sign_in
from chirper.core.auth import set_remember_cookie
from chirper.core.config import Settings, get_settings
from chirper.core.errors import InvalidInput
from chirper.core.security import STATE_TOKEN_TTL, create_state_token, verify_state_token
from chirper.domains.oauth.github import GitHubClient
from chirper.domains.oauth.services import OAuthSignIn

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/oauth", tags=["oauth"])


@router.get("/github/connect")
async def github_connect(
    settings: Settings = Depends(get_settings),
    github: GitHubClient = Depends(get_github_client)
):
    """Отправка пользователя на GitHub; state сохраняется в подписанной cookie"""
    state, signed_state = create_state_token(settings.hmac_key)

    response = RedirectResponse(github.get_authorization_url(state), status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        key=settings.oauth_state_cookie_name,
        value=signed_state,
        max_age=int(STATE_TOKEN_TTL.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.is_prod,
    )
    return response


@router.get("/github/callback")
async def github_callback(
    request: Request,
    code: str = "",
    state: str = "",
    settings: Settings = Depends(get_settings),
    github: GitHubClient = Depends(get_github_client),
    sign_in: OAuthSignIn = Depends(get_oauth_sign_in)
):
    """Возврат с GitHub: проверка state, вход или регистрация, редирект в клиент"""
    signed_state = request.cookies.get(settings.oauth_state_cookie_name, "")
    if not verify_state_token(signed_state, state, settings.hmac_key):
        logger.warning("OAuth callback with invalid state")
        raise InvalidInput("Invalid state provided.")
    if not code:
        raise InvalidInput("The authorization code is missing.")

    identity = await github.fetch_identity(code)
    token, user = await sign_in.sign_in(identity)
    logger.info(f"User {user.id} signed in with {identity.provider}")

    response = RedirectResponse(settings.client_url, status_code=status.HTTP_302_FOUND)
    response.delete_cookie(settings.oauth_state_cookie_name, httponly=True, samesite="lax", secure=settings.is_prod)
    set_remember_cookie(response, token, settings)
    return response
