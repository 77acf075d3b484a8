"""Credential providers for the WaniKani API key."""

import os

from kanjideck.ports.review_service import InvalidCredentialsError

API_KEY_ENV_VAR = "WK_API_KEY"


class EnvCredentialProvider:
    """CredentialProvider reading the API key from the environment.

    The variable is read on every call, so a key rotated upstream is picked
    up without a restart.
    """

    def __init__(self, env_var: str = API_KEY_ENV_VAR):
        self._env_var = env_var

    async def get_api_key(self) -> str:
        api_key = os.getenv(self._env_var, "").strip()
        if not api_key:
            raise InvalidCredentialsError("Api key not found")
        return api_key


class StaticCredentialProvider:
    """CredentialProvider holding a key handed over by the caller."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    async def get_api_key(self) -> str:
        if not self._api_key:
            raise InvalidCredentialsError("Api key not found")
        return self._api_key
