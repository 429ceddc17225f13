import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from chirper.core.errors import InvalidCredentials
from chirper.domains.oauth.entities import PROVIDER_GITHUB, ProviderIdentity
from chirper.domains.oauth.services import SIGN_IN_FAILED

logger = logging.getLogger(__name__)

AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
TOKEN_URL = "https://github.com/login/oauth/access_token"
API_URL = "https://api.github.com"
SCOPE = "read:user user:email"


class GitHubClient:
    """OAuth2-клиент GitHub: ссылка на авторизацию, обмен кода и профиль пользователя"""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.transport = transport

    def get_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "scope": SCOPE,
            "state": state,
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_identity(self, code: str) -> ProviderIdentity:
        """Обмен кода на токен и загрузка профиля пользователя GitHub"""
        async with httpx.AsyncClient(transport=self.transport, timeout=10.0) as client:
            token = await self._exchange_code(client, code)
            access_token = token["access_token"]
            github_user = await self._get(client, "/user", access_token)

            if github_user.get("id") is None:
                logger.warning("GitHub did not return a user id")
                raise InvalidCredentials(SIGN_IN_FAILED)

            email = github_user.get("email")
            if not email:
                email = await self._primary_email(client, access_token)

        expiry = None
        if token.get("expires_in"):
            expiry = datetime.now(timezone.utc) + timedelta(seconds=int(token["expires_in"]))

        login = github_user.get("login") or ""
        return ProviderIdentity(
            provider=PROVIDER_GITHUB,
            provider_user_id=str(github_user["id"]),
            name=github_user.get("name") or login,
            handle=login,
            email=email,
            access_token=access_token,
            token_type=token.get("token_type", ""),
            refresh_token=token.get("refresh_token", ""),
            expiry=expiry
        )

    async def _exchange_code(self, client: httpx.AsyncClient, code: str) -> Dict[str, Any]:
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_url,
        }
        try:
            response = await client.post(TOKEN_URL, data=data, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.warning(f"GitHub token exchange failed: {e}")
            raise InvalidCredentials(SIGN_IN_FAILED) from e

        try:
            payload = response.json() if response.status_code == 200 else {}
        except ValueError as e:
            logger.warning(f"GitHub token exchange returned a non-JSON body: {e}")
            raise InvalidCredentials(SIGN_IN_FAILED) from e
        # GitHub сообщает об ошибке обмена в теле ответа со статусом 200
        if "access_token" not in payload:
            logger.warning(f"GitHub token exchange rejected: {response.status_code} {payload.get('error', '')}")
            raise InvalidCredentials(SIGN_IN_FAILED)
        return payload

    async def _get(self, client: httpx.AsyncClient, path: str, access_token: str) -> Any:
        try:
            response = await client.get(
                f"{API_URL}{path}",
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Accept": "application/vnd.github+json",
                },
            )
        except httpx.HTTPError as e:
            logger.warning(f"GitHub request {path} failed: {e}")
            raise InvalidCredentials(SIGN_IN_FAILED) from e

        if response.status_code != 200:
            logger.warning(f"GitHub request {path} answered {response.status_code}")
            raise InvalidCredentials(SIGN_IN_FAILED)
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"GitHub request {path} returned a non-JSON body: {e}")
            raise InvalidCredentials(SIGN_IN_FAILED) from e

    async def _primary_email(self, client: httpx.AsyncClient, access_token: str) -> Optional[str]:
        """Основной подтвержденный email, если /user его скрывает"""
        emails = await self._get(client, "/user/emails", access_token)
        for entry in emails:
            if entry.get("primary") and entry.get("verified"):
                return entry.get("email")
        return None
