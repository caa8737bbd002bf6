"""GitHub token resolution.

Local runs use a personal token (``GH_TOKEN``). Inside GitHub Actions the
workflow identity is exposed as ``GITHUB_TOKEN``. Both end up as the same
gateway, only the token source differs.
"""

import os

from .models import ConfigurationError

TOKEN_ENV_VARS = ("GH_TOKEN", "GITHUB_TOKEN")


def token_from_env() -> str | None:
    """Return the first token found in the environment, or None."""
    for name in TOKEN_ENV_VARS:
        token = os.environ.get(name)
        if token:
            return token
    return None


def resolve_token(explicit: str | None = None) -> str:
    """Resolve the GitHub token to authenticate with.

    Parameters
    ----------
    explicit : str or None, optional
        Token passed on the command line. Takes precedence.

    Returns
    -------
    str
        GitHub token.

    Raises
    ------
    ConfigurationError
        If no token is available.

    """
    token = explicit or token_from_env()
    if not token:
        raise ConfigurationError(
            "No GitHub token: pass --token or set GH_TOKEN or GITHUB_TOKEN"
        )
    return token
