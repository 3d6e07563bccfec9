"""Redis backend: type tag under one key, bindings as a set under another."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

import redis
from pydantic import ValidationError
from redis.exceptions import RedisError

from topologist.domain.errors import StorageError, StorageUnavailableError

from .schema import decode_binding, encode_binding

if TYPE_CHECKING:
    from collections.abc import Set

    from topologist.domain.model import AccessBinding

log = getLogger(__name__)

type RedisClientFactory = Callable[[str, int], redis.Redis]


def _default_client_factory(host: str, port: int) -> redis.Redis:
    return redis.Redis(host=host, port=port, decode_responses=True)


class RedisBackend:
    def __init__(
        self,
        host: str,
        port: int,
        *,
        key_prefix: str = "topologist",
        client_factory: RedisClientFactory = _default_client_factory,
    ) -> None:
        self.host = host
        self.port = port
        self.key_prefix = key_prefix
        self.client_factory = client_factory
        self._client: redis.Redis | None = None

    @property
    def type_key(self) -> str:
        return f"{self.key_prefix}.type"

    @property
    def bindings_key(self) -> str:
        return f"{self.key_prefix}.bindings"

    def create_or_open(self) -> None:
        if self._client is not None:
            return
        client = self.client_factory(self.host, self.port)
        try:
            client.ping()
        except RedisError as exc:
            client.close()
            raise StorageUnavailableError(
                f"Cannot reach redis at {self.host}:{self.port}: {exc}"
            ) from exc
        log.debug("Connected to redis at %s:%s", self.host, self.port)
        self._client = client

    def save_type(self, type_name: str) -> None:
        client = self._require_client()
        try:
            client.set(self.type_key, type_name)
        except RedisError as exc:
            raise StorageError(f"Cannot save state type to redis: {exc}") from exc

    def save_bindings(self, bindings: Set[AccessBinding]) -> None:
        client = self._require_client()
        members = sorted(encode_binding(binding) for binding in bindings)
        try:
            with client.pipeline(transaction=True) as pipe:
                pipe.delete(self.bindings_key)
                if members:
                    pipe.sadd(self.bindings_key, *members)
                pipe.execute()
        except RedisError as exc:
            raise StorageError(f"Cannot save bindings to redis: {exc}") from exc

    def load(self) -> set[AccessBinding]:
        client = self._require_client()
        try:
            members = client.smembers(self.bindings_key)
        except RedisError as exc:
            raise StorageError(f"Cannot load bindings from redis: {exc}") from exc
        try:
            return {decode_binding(member) for member in members}
        except ValidationError as exc:
            raise StorageError(f"Corrupt binding stored under {self.bindings_key}") from exc

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()

    def _require_client(self) -> redis.Redis:
        if self._client is None:
            raise StorageError("Redis backend used before create_or_open()")
        return self._client
