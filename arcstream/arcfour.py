"""Arcfour encryption, i.e. XOR with an RC4 keystream.
See https://en.wikipedia.org/wiki/RC4

"""

from typing import Union

from arcstream.keystore import KeyLike
from arcstream.keystream import Keystream


class Arcfour:
    def __init__(
        self,
        key: KeyLike,
        *,
        key_size_bits: Union[int, None] = None,
        rfc4345: bool = False,
    ) -> None:
        self.keystream = Keystream(key, key_size_bits, rfc4345)
        self.keystream.init()

    def process(self, data: bytes) -> bytes:
        k = self.keystream.read(len(data))
        r = bytearray(data)
        for n, c in enumerate(k):
            r[n] ^= c
        return bytes(r)

    encrypt = decrypt = process
