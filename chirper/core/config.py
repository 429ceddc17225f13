from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "postgresql+asyncpg://postgres@localhost:5432/twitter_clone"
    sql_echo: bool = False
    log_level: str = "INFO"

    # Адрес SPA-клиента, на который возвращаем пользователя после OAuth
    client_url: str = "http://localhost:4200"

    # Секреты для паролей и remember-токенов
    pepper: str = "secret-random-string"
    hmac_key: str = "secret-hmac-key"

    images_dir: str = "images"
    remember_cookie_name: str = "remember_token"
    oauth_state_cookie_name: str = "oauth_state"

    github_client_id: str = ""
    github_client_secret: str = ""
    github_redirect_url: str = "http://localhost:1111/api/oauth/github/callback"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
