from __future__ import annotations

import os
from typing import Iterable, List, Optional

from ...domain.constants import KeyType
from ...domain.exceptions import KeyLoaderError
from ...domain.ports import KeyLoader

KEY_FILE_SUFFIXES = (".pem", ".key", ".crt", ".pub")


def _looks_like_path(value: str) -> bool:
    return (
        value.startswith(("/", "./", "../", "~"))
        or value.lower().endswith(KEY_FILE_SUFFIXES)
    )


def _read_key(value: str) -> str:
    """
    Accept either a path to a key file or the key material itself.

    Values that look like a path (absolute or relative, or ending in a
    key-file suffix) must point at a readable file; they are never used
    as raw secrets.
    """
    if "\n" in value or value.lstrip().startswith("-----BEGIN"):
        return value
    if os.path.isfile(value):
        try:
            with open(value, "r", encoding="utf-8") as fh:
                return fh.read()
        except OSError as exc:
            raise KeyLoaderError(f"Signature key '{value}' is not readable: {exc}") from exc
    if _looks_like_path(value):
        raise KeyLoaderError(f"Signature key file '{value}' does not exist.")
    return value


class RawKeyLoader(KeyLoader):
    """
    Loads signature keys given as file paths, inline PEM or raw secrets.

    For HMAC setups only `secret_key` is needed, it is returned for both
    key types.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        public_key: Optional[str] = None,
        pass_phrase: Optional[str] = None,
        additional_public_keys: Iterable[str] = (),
    ) -> None:
        self._secret_key = secret_key
        self._public_key = public_key
        self._pass_phrase = pass_phrase or None
        self._additional_public_keys = list(additional_public_keys)

    def load_key(self, key_type: KeyType) -> str:
        if key_type is KeyType.PUBLIC and self._public_key:
            return _read_key(self._public_key)
        if self._secret_key:
            return _read_key(self._secret_key)

        raise KeyLoaderError(
            f"Signature key for type '{key_type.value}' is not configured."
        )

    def get_passphrase(self) -> Optional[str]:
        return self._pass_phrase

    def get_additional_public_keys(self) -> List[str]:
        return [_read_key(k) for k in self._additional_public_keys]
