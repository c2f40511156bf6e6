"""Google authentication modes.

An auth mode knows how to obtain credentials for a run. Credential
acquisition can hit the network (metadata server, token endpoint), so it is
exposed as a coroutine with retries on transient failures.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import Protocol

import google.auth
from google.auth.credentials import Credentials
from google.auth.exceptions import RefreshError, TransportError
from google.oauth2 import service_account

from bucketpath.core.config.models import GcsAuthConfig, GcsRetrySettings, PathBuilderOptions

logger = logging.getLogger(__name__)

_RETRYABLE_ERRORS = (TransportError, RefreshError)


class GoogleAuthMode(Protocol):
    """Protocol for obtaining Google credentials."""

    name: str

    async def retry_credential(self, options: PathBuilderOptions) -> Credentials:
        """
        Obtain credentials, retrying transient failures.

        Args:
            options: Per-run options (may carry user credentials)

        Returns:
            Credentials for Cloud Storage requests

        Raises:
            RuntimeError: When transient failures persist for every attempt
            google.auth.exceptions.GoogleAuthError: On non-transient auth failures
        """
        ...


class _RetryingAuthMode:
    """Shared retry loop; subclasses implement ``credential``."""

    def __init__(
        self,
        name: str,
        scopes: Sequence[str],
        retry_settings: GcsRetrySettings | None = None,
    ) -> None:
        self.name = name
        self.scopes = list(scopes)
        self._retry_settings = retry_settings or GcsRetrySettings()

    def credential(self, options: PathBuilderOptions) -> Credentials:
        raise NotImplementedError

    async def retry_credential(self, options: PathBuilderOptions) -> Credentials:
        settings = self._retry_settings
        delay = settings.initial_delay_seconds
        last_error: Exception | None = None

        for attempt in range(1, settings.max_attempts + 1):
            try:
                return await asyncio.to_thread(self.credential, options)
            except _RETRYABLE_ERRORS as e:
                last_error = e
                logger.warning(
                    "Credential attempt %d/%d for auth mode %s failed (retryable): %s",
                    attempt,
                    settings.max_attempts,
                    self.name,
                    e,
                )
                if attempt < settings.max_attempts:
                    await asyncio.sleep(delay)
                    delay = min(delay * settings.multiplier, settings.max_delay_seconds)

        raise RuntimeError(
            f"Could not obtain credentials for auth mode {self.name} "
            f"after {settings.max_attempts} attempts: {last_error}"
        ) from last_error


class ApplicationDefaultMode(_RetryingAuthMode):
    """Application default credentials (environment, gcloud, metadata server)."""

    def credential(self, options: PathBuilderOptions) -> Credentials:
        credentials, _ = google.auth.default(scopes=self.scopes)
        return credentials


class ServiceAccountFileMode(_RetryingAuthMode):
    """Service account key read from a JSON file."""

    def __init__(
        self,
        name: str,
        json_file: str,
        scopes: Sequence[str],
        retry_settings: GcsRetrySettings | None = None,
    ) -> None:
        super().__init__(name, scopes, retry_settings)
        self.json_file = json_file

    def credential(self, options: PathBuilderOptions) -> Credentials:
        return service_account.Credentials.from_service_account_file(
            self.json_file, scopes=self.scopes
        )


class UserServiceAccountMode(_RetryingAuthMode):
    """Service account key supplied per run in ``options.user_service_account_json``."""

    def credential(self, options: PathBuilderOptions) -> Credentials:
        if not options.user_service_account_json:
            raise ValueError(
                f"Auth mode {self.name} requires user_service_account_json in the options"
            )
        info = json.loads(options.user_service_account_json)
        return service_account.Credentials.from_service_account_info(info, scopes=self.scopes)


def auth_mode_from_config(
    config: GcsAuthConfig, retry_settings: GcsRetrySettings | None = None
) -> GoogleAuthMode:
    """Create the auth mode described by ``config``."""
    match config.scheme:
        case "service_account":
            # json_file presence is enforced by GcsAuthConfig
            assert config.json_file is not None
            return ServiceAccountFileMode(
                config.name, config.json_file, config.scopes, retry_settings
            )
        case "user_service_account":
            return UserServiceAccountMode(config.name, config.scopes, retry_settings)
        case _:
            return ApplicationDefaultMode(config.name, config.scopes, retry_settings)
