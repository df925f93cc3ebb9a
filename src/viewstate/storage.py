"""Protected session storage — signed page-state snapshots.

Snapshots are serialized as JSON and signed using ``itsdangerous`` before
they are written to the backing mapping.  The backing mapping is scoped
to one browser session: typically the dict a signed-cookie session
middleware exposes, or a plain dict in tests.

A value that fails signature verification is never handed back to a
page; reads raise ``StorageError`` instead, which the page state
controller treats as "nothing stored".
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any

from itsdangerous import BadData, URLSafeSerializer

from viewstate.config import ViewStateConfig
from viewstate.errors import ConfigurationError, StorageError

logger = logging.getLogger("viewstate.storage")


@dataclass(frozen=True, slots=True)
class StorageResult[T]:
    """Outcome of a storage read.

    ``success`` is ``False`` when nothing is stored under the key.
    """

    success: bool
    value: T | None = None


class ProtectedSessionStorage:
    """Async key-value store for page-state snapshots.

    Usage::

        storage = ProtectedSessionStorage({}, secret_key="my-secret-key")

        await storage.set_async("Metrics_PageState", MetricsPageState(app="frontend"))
        result = await storage.get_async("Metrics_PageState", MetricsPageState)
        if result.success:
            ...
    """

    __slots__ = ("_backing", "_serializer")

    def __init__(
        self,
        backing: MutableMapping[str, Any],
        *,
        secret_key: str,
        salt: str = "viewstate.session-storage",
    ) -> None:
        if not secret_key:
            msg = "ProtectedSessionStorage secret_key must not be empty."
            raise ConfigurationError(msg)

        self._backing = backing
        self._serializer = URLSafeSerializer(secret_key, salt=salt)

    @classmethod
    def from_config(
        cls, backing: MutableMapping[str, Any], config: ViewStateConfig
    ) -> ProtectedSessionStorage:
        return cls(backing, secret_key=config.secret_key, salt=config.storage_salt)

    async def get_async[T](self, key: str, cls: type[T] | None = None) -> StorageResult[T]:
        """Read and verify the value stored under *key*.

        With a dataclass *cls* the stored fields are rebuilt into an
        instance of it; otherwise the decoded JSON value is returned.

        Raises:
            StorageError: The value was tampered with, cannot be decoded,
                or does not fit *cls*.
        """
        raw = self._backing.get(key)
        if raw is None:
            return StorageResult(success=False)

        try:
            payload = self._serializer.loads(raw)
        except (BadData, TypeError, ValueError) as exc:
            msg = f"Stored value for {key!r} failed verification."
            raise StorageError(msg) from exc

        if cls is None or payload is None:
            return StorageResult(success=True, value=payload)
        if not dataclasses.is_dataclass(cls):
            if not isinstance(payload, cls):
                msg = f"Stored value for {key!r} is not a {cls.__name__}."
                raise StorageError(msg)
            return StorageResult(success=True, value=payload)
        if not isinstance(payload, dict):
            msg = f"Stored value for {key!r} is not an object."
            raise StorageError(msg)

        try:
            value = cls(**payload)
        except TypeError as exc:
            msg = f"Stored value for {key!r} does not match {cls.__name__}."
            raise StorageError(msg) from exc
        return StorageResult(success=True, value=value)

    async def set_async(self, key: str, value: Any) -> None:
        """Sign and store *value* under *key*.

        Raises:
            StorageError: If *value* is not JSON-serializable.
        """
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)

        try:
            signed = self._serializer.dumps(value)
        except (TypeError, ValueError) as exc:
            msg = f"Value for {key!r} cannot be serialized: {exc}"
            raise StorageError(msg) from exc

        self._backing[key] = signed
        logger.debug("Stored session state under %s", key)
