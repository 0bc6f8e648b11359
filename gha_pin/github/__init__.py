from .client import GitHubClient, token_from_env, DEFAULT_API_URL

__all__ = ["GitHubClient", "token_from_env", "DEFAULT_API_URL"]
