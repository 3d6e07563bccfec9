"""HTTP client for the Confluent Schema Registry."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from topologist.adapters.http_resilience import ResilientClient
from topologist.config.http_resilience import ResilienceConfig

from .schema import ErrorResponse, RegisterSchemaRequest, RegisterSchemaResponse

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

SCHEMA_REGISTRY_CONTENT_TYPE: Final[str] = "application/vnd.schemaregistry.v1+json"
_DEFAULT_TIMEOUT_SECONDS = 10.0


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class SchemaRegistryError(RuntimeError):
    """Raised when the registry rejects a request."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class SchemaRegistryClient:
    def __init__(
        self,
        url: str,
        *,
        resilience: ResilienceConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
    ) -> None:
        self.url = url.rstrip("/")
        self.resilience = resilience or ResilienceConfig(
            name="schema-registry",
            base_url=self.url,
            timeout_seconds=_DEFAULT_TIMEOUT_SECONDS,
            default_headers={
                "Content-Type": SCHEMA_REGISTRY_CONTENT_TYPE,
                "Accept": SCHEMA_REGISTRY_CONTENT_TYPE,
            },
        )
        self._client_factory = client_factory
        self._client: ResilientClient | None = None

    def register(self, subject: str, schema: str, *, schema_type: str = "AVRO") -> int:
        """Register ``schema`` under ``subject`` and return the registry's schema id."""

        body = RegisterSchemaRequest(schema=schema, schema_type=schema_type)
        try:
            response = self._get_client().post(
                f"/subjects/{quote(subject, safe='')}/versions",
                json=body.model_dump(by_alias=True),
            )
        except httpx.HTTPError as exc:
            raise SchemaRegistryError(f"Cannot reach schema registry {self.url}: {exc}") from exc

        if response.is_error:
            raise _error_from(response, subject)
        try:
            registered = RegisterSchemaResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise SchemaRegistryError(f"Unexpected registry response for {subject}") from exc
        log.info("Registered schema %s for subject %s", registered.id, subject)
        return registered.id

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()

    def _get_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self.resilience)
        return self._client


def _error_from(response: httpx.Response, subject: str) -> SchemaRegistryError:
    try:
        error = ErrorResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        return SchemaRegistryError(
            f"Registering {subject} failed with HTTP {response.status_code}",
            code=response.status_code,
        )
    return SchemaRegistryError(
        f"Registering {subject} failed: {error.message}", code=error.error_code
    )
