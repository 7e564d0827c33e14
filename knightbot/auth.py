"""Bearer-token authorization taken from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping

TOKEN_VARIABLE = "LICHESS_API_TOKEN"


class MissingTokenError(RuntimeError):
    """Raised when the API token is not set in the environment."""


def authorization_header(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return the Authorization header built from LICHESS_API_TOKEN."""
    env = os.environ if environ is None else environ
    api_token = env.get(TOKEN_VARIABLE)
    if api_token is None:
        raise MissingTokenError(
            f"Missing Lichess API Token! Set {TOKEN_VARIABLE} environment variable"
        )
    return {"Authorization": f"Bearer {api_token}"}