from chirper.domains.oauth.entities import OAuthLink, ProviderIdentity, PROVIDER_GITHUB

__all__ = ["OAuthLink", "ProviderIdentity", "PROVIDER_GITHUB"]
