"""Key material storage, addressed cyclically.

RC4 keys are anywhere from 8 to 256 bits long, always in whole bytes,
and during key scheduling they are simply repeated to cover the 256
entries of the permutation.
"""

import logging
from typing import Sequence, Union

from arcstream import settings
from arcstream.exceptions import InvalidKeySize

log = logging.getLogger(__name__)

MIN_KEY_BITS = 8
MAX_KEY_BITS = 256
KeyLike = Union[bytes, bytearray, memoryview, Sequence[int]]


def check_key_size(key_size_bits: int) -> int:
    """Verify a key size in bits, returning the length in bytes."""
    if isinstance(key_size_bits, bool) or not isinstance(key_size_bits, int):
        raise InvalidKeySize("Key size must be an integer: %r" % (key_size_bits,))
    if key_size_bits % 8 != 0:
        raise InvalidKeySize("Key size %d is not a multiple of 8" % key_size_bits)
    if not MIN_KEY_BITS <= key_size_bits <= MAX_KEY_BITS:
        raise InvalidKeySize(
            "Key size %d not in [%d, %d]" % (key_size_bits, MIN_KEY_BITS, MAX_KEY_BITS)
        )
    return key_size_bits // 8


def key_bytes(key: KeyLike) -> bytes:
    """Convert a bytes-like object or sequence of byte values to `bytes`."""
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, (str, int)) or not isinstance(key, Sequence):
        raise TypeError("Key must be bytes or a sequence of ints, not %r" % (key,))
    try:
        return bytes(key)
    except (TypeError, ValueError) as e:
        raise InvalidKeySize("Invalid key material: %s" % e) from e


class KeyStore:
    def __init__(self) -> None:
        self._key = b""

    @property
    def configured(self) -> bool:
        return bool(self._key)

    @property
    def key_size_bits(self) -> int:
        return len(self._key) * 8

    def __len__(self) -> int:
        return len(self._key)

    def configure(self, key: KeyLike, key_size_bits: Union[int, None] = None) -> None:
        """Store new key material.

        Only the first `key_size_bits / 8` bytes of `key` are used.  If
        anything is wrong, `InvalidKeySize` is raised and the previous
        key (if any) is left alone.
        """
        material = key_bytes(key)
        if key_size_bits is None:
            key_size_bits = len(material) * 8
        nbytes = check_key_size(key_size_bits)
        if not 1 <= len(material) <= MAX_KEY_BITS // 8:
            raise InvalidKeySize(
                "Key material must be 1 to 32 bytes, got %d" % len(material)
            )
        if len(material) < nbytes:
            raise InvalidKeySize(
                "Key size %d bits but only %d bytes of key material"
                % (key_size_bits, len(material))
            )
        if len(material) > nbytes:
            if settings.STRICT:
                raise InvalidKeySize(
                    "Key size %d bits but %d bytes of key material"
                    % (key_size_bits, len(material))
                )
            log.warning(
                "Ignoring %d extra bytes of key material beyond %d bits",
                len(material) - nbytes,
                key_size_bits,
            )
        self._key = material[:nbytes]

    def read(self, index: int) -> int:
        """Key byte at logical position `index`, wrapping around."""
        return self._key[index % len(self._key)]
