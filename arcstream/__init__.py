"""
arcstream: RC4 keystream generation, with or without the RFC 4345
initial keystream discard.

Basic usage:

    import arcstream

    ks = arcstream.new(b"Key")
    print(ks.read(10).hex())  # eb9f7781b734ca72a719

    with_discard = arcstream.new(b"0123456789abcdef", rfc4345=True)
    ciphertext = arcstream.Arcfour(b"Secret").encrypt(b"Attack at dawn")
"""

from typing import Union

from arcstream.arcfour import Arcfour as Arcfour  # noqa: F401
from arcstream.automaton import ControlState as ControlState  # noqa: F401
from arcstream.exceptions import (  # noqa: F401
    ArcstreamException as ArcstreamException,
    InvalidKeySize as InvalidKeySize,
    NotReady as NotReady,
    ReconfigureWhileActive as ReconfigureWhileActive,
)
from arcstream.keystore import KeyLike
from arcstream.keystream import Keystream as Keystream  # noqa: F401
from arcstream._version import __version__  # noqa: F401


def new(
    key: KeyLike,
    *,
    key_size_bits: Union[int, None] = None,
    rfc4345: bool = False,
) -> Keystream:
    """Create a keystream for `key` and run it up to its first output."""
    ks = Keystream(key, key_size_bits, rfc4345)
    ks.init()
    ks.read(0)
    return ks
