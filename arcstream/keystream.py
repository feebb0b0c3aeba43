"""The keystream generator proper.

A `Keystream` ties together a `KeyStore`, a `PermutationState` and a
`ControlAutomaton`, and is the thing you actually want to use.  It
works one round at a time if you like:

    ks = Keystream(b"Key")
    ks.init()
    while True:
        try:
            byte = ks.next_byte()
        except NotReady:
            continue
        ...

Or, more sensibly, in bulk:

    ks = Keystream(b"Key")
    ks.init()
    ks.read(10)  # b"\\xeb\\x9fw\\x81\\xb74\\xcar\\xa7\\x19"

One instance is one keystream.  It is not safe to share an instance
between threads; make one per key instead.
"""

import logging
from typing import Iterator, Tuple, Union

from arcstream.automaton import ControlAutomaton, ControlState
from arcstream.exceptions import NotReady, ReconfigureWhileActive
from arcstream.keystore import KeyLike, KeyStore
from arcstream.permutation import PermutationState

log = logging.getLogger(__name__)


class Keystream:
    def __init__(
        self,
        key: Union[KeyLike, None] = None,
        key_size_bits: Union[int, None] = None,
        rfc4345: bool = False,
    ) -> None:
        self.keys = KeyStore()
        self.perm = PermutationState()
        self.control = ControlAutomaton(rfc4345)
        if key is not None:
            self.configure(key, key_size_bits, rfc4345)

    def __repr__(self) -> str:
        return "<%s state=%s key_size_bits=%d rfc4345=%r>" % (
            self.__class__.__name__,
            self.state.name,
            self.key_size_bits,
            self.rfc4345,
        )

    @property
    def state(self) -> ControlState:
        return self.control.state

    @property
    def counter(self) -> int:
        return self.control.counter

    @property
    def i(self) -> int:
        return self.control.i

    @property
    def j(self) -> int:
        return self.control.j

    @property
    def rfc4345(self) -> bool:
        return self.control.rfc4345

    @property
    def key_size_bits(self) -> int:
        return self.keys.key_size_bits

    @property
    def ready(self) -> bool:
        """Will the next round produce a valid byte?"""
        return self.control.state is ControlState.GENERATE

    @property
    def permutation(self) -> Tuple[int, ...]:
        return self.perm.snapshot()

    def configure(
        self,
        key: KeyLike,
        key_size_bits: Union[int, None] = None,
        rfc4345: Union[bool, None] = None,
    ) -> None:
        """Set the key and mode.  Only allowed when idle.

        If `rfc4345` is not given, the current mode is kept.
        """
        if self.control.state is not ControlState.IDLE:
            raise ReconfigureWhileActive(
                "Cannot change key in state %s, call rearm() first"
                % self.control.state.name
            )
        self.keys.configure(key, key_size_bits)
        if rfc4345 is not None:
            self.control.rfc4345 = rfc4345

    def init(self) -> None:
        """Start key scheduling."""
        if self.control.state is not ControlState.IDLE:
            raise ReconfigureWhileActive(
                "Already running (%s), call rearm() first" % self.control.state.name
            )
        if not self.keys.configured:
            raise NotReady("No key configured")
        self.control.start(self.perm)
        log.debug(
            "Key scheduling with %d-bit key, rfc4345=%r",
            self.keys.key_size_bits,
            self.control.rfc4345,
        )

    def rearm(self) -> None:
        """Go back to idle, keeping the key.  Call `init` to start over."""
        log.debug("Re-arming from %s", self.control.state.name)
        self.control.stop()
        self.perm.reset()

    def step(self) -> Tuple[int, bool]:
        """Do one round of work, returning `(byte, valid)`."""
        return self.control.advance(self.perm, self.keys)

    def next_byte(self) -> int:
        """Do one round of work, returning a keystream byte if there is one.

        Raises `NotReady` if the round did not produce a valid byte,
        which is normal during key scheduling and discard.
        """
        if self.control.state is ControlState.IDLE:
            raise NotReady("Keystream is idle, call init() first")
        byte, valid = self.control.advance(self.perm, self.keys)
        if not valid:
            raise NotReady("No keystream byte in state %s" % self.control.state.name)
        return byte

    def _warm_up(self) -> None:
        if self.control.state is ControlState.IDLE:
            raise NotReady("Keystream is idle, call init() first")
        while self.control.state is not ControlState.GENERATE:
            self.control.advance(self.perm, self.keys)

    def read(self, count: int) -> bytes:
        """Get the next `count` bytes of keystream.

        Any remaining key-scheduling or discard rounds are run first,
        their output is never returned.
        """
        if count < 0:
            raise ValueError("Negative byte count %d" % count)
        self._warm_up()
        return self.control.generate(self.perm, count)

    def __iter__(self) -> Iterator[int]:
        while True:
            self._warm_up()
            yield self.control.generate(self.perm, 1)[0]
