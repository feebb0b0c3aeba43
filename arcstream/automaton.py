"""Control automaton sequencing key scheduling, discard and generation.

The automaton is a small Mealy machine: each call to `advance` performs
exactly one round of work on the permutation, depending on the current
phase, then moves to the next phase if the phase counter says so.  The
next-state logic itself is the pure function `next_state`, and the
decision whether a round's output may be shown to anybody is made by
the equally pure `gate`.

Phases:

- `IDLE`: nothing happens, no output.
- `KEY_SCHEDULE`: 256 rounds of the RC4 key-scheduling algorithm.
- `DISCARD`: 1356 rounds of keystream generation whose output is
  thrown away (only when RFC 4345 mode is requested).
- `GENERATE`: keystream generation, output is valid.
"""

import logging
from enum import Enum
from typing import Tuple

from arcstream.exceptions import NotReady
from arcstream.keystore import KeyStore
from arcstream.permutation import PermutationState

log = logging.getLogger(__name__)

SCHEDULE_ROUNDS = 256
# Initial keystream discarded in RFC 4345 mode (0x54c), not configurable
DISCARD_ROUNDS = 1356
# Width of the phase counter
COUNTER_MASK = 0x7FF
NO_OUTPUT = (0, False)


class ControlState(Enum):
    IDLE = "idle"
    KEY_SCHEDULE = "key_schedule"
    DISCARD = "discard"
    GENERATE = "generate"


def next_state(
    state: ControlState, counter: int, rfc4345: bool
) -> Tuple[ControlState, int]:
    """Transition function, given the counter *after* a round.

    Returns the new state and the new counter value.
    """
    if state is ControlState.KEY_SCHEDULE and counter >= SCHEDULE_ROUNDS:
        if rfc4345:
            return ControlState.DISCARD, 0
        return ControlState.GENERATE, counter
    if state is ControlState.DISCARD and counter >= DISCARD_ROUNDS:
        return ControlState.GENERATE, counter
    return state, counter


def gate(state: ControlState, byte: int) -> Tuple[int, bool]:
    """Decide what, if anything, the caller gets to see from a round."""
    if state is ControlState.GENERATE:
        return byte, True
    return NO_OUTPUT


class ControlAutomaton:
    """Owner of the pointers, the phase counter and the phase."""

    def __init__(self, rfc4345: bool = False) -> None:
        self.rfc4345 = rfc4345
        self.state = ControlState.IDLE
        self.counter = 0
        self.i = 0
        self.j = 0

    def start(self, perm: PermutationState) -> None:
        """Leave `IDLE` and begin key scheduling from scratch."""
        perm.reset()
        self.counter = 0
        self.i = self.j = 0
        self.state = ControlState.KEY_SCHEDULE

    def stop(self) -> None:
        self.state = ControlState.IDLE
        self.counter = 0
        self.i = self.j = 0

    def advance(self, perm: PermutationState, keys: KeyStore) -> Tuple[int, bool]:
        """Perform one round and return its gated `(byte, valid)` output."""
        state = self.state
        if state is ControlState.IDLE:
            return NO_OUTPUT
        if state is ControlState.KEY_SCHEDULE:
            i = self.i
            j = (self.j + perm.read(i) + keys.read(i)) & 0xFF
            perm.swap(i, j)
            byte = 0
            i = (i + 1) & 0xFF
        else:
            i = (self.i + 1) & 0xFF
            j = (self.j + perm.read(i)) & 0xFF
            perm.swap(i, j)
            (si, sj) = perm.pair(i, j)
            byte = perm.read(si + sj)
        output = gate(state, byte)
        counter = self.counter
        if state is not ControlState.GENERATE:
            counter = (counter + 1) & COUNTER_MASK
        rounds = counter
        new_state, counter = next_state(state, counter, self.rfc4345)
        if new_state is not state:
            log.debug("%s -> %s after %d rounds", state.name, new_state.name, rounds)
            # Classical RC4 generation starts over from i = j = 0
            if state is ControlState.KEY_SCHEDULE:
                i = j = 0
        (self.i, self.j, self.counter, self.state) = (i, j, counter, new_state)
        return output

    def generate(self, perm: PermutationState, count: int) -> bytes:
        """Produce `count` keystream bytes in one go (`GENERATE` only)."""
        if self.state is not ControlState.GENERATE:
            raise NotReady("No keystream in state %s" % self.state.name)
        (i, j) = (self.i, self.j)
        s = perm.s
        r = bytearray(count)
        for n in range(count):
            i = (i + 1) & 0xFF
            j = (j + s[i]) & 0xFF
            (s[i], s[j]) = (s[j], s[i])
            r[n] = s[(s[i] + s[j]) & 0xFF]
        (self.i, self.j) = (i, j)
        return bytes(r)
