"""
Test the keystream generator.
"""

import random

import pytest

from arcstream.automaton import DISCARD_ROUNDS, SCHEDULE_ROUNDS, ControlState
from arcstream.exceptions import InvalidKeySize, NotReady, ReconfigureWhileActive
from arcstream.keystream import Keystream

VECTORS = [
    (b"Key", "eb9f7781b734ca72a719"),
    (b"Wiki", "6044db6d41b7"),
    (b"Secret", "04d46b053ca87b59"),
]


def poll(ks: Keystream, count: int):
    """Call next_byte until we have enough, counting failures."""
    out = bytearray()
    misses = 0
    while len(out) < count:
        try:
            out.append(ks.next_byte())
        except NotReady:
            misses += 1
    return bytes(out), misses


@pytest.mark.parametrize("key,expected", VECTORS)
def test_known_vectors(key, expected) -> None:
    """Verify classic RC4 test vectors."""
    ks = Keystream(key, len(key) * 8)
    ks.init()
    data, misses = poll(ks, len(expected) // 2)
    assert data.hex() == expected
    assert misses == SCHEDULE_ROUNDS
    ks = Keystream(key)
    ks.init()
    assert ks.read(len(expected) // 2).hex() == expected


def test_determinism() -> None:
    """Same key, same keystream."""
    key = bytes(range(1, 17))
    streams = []
    for _ in range(2):
        ks = Keystream(key)
        ks.init()
        streams.append(ks.read(1000))
    assert streams[0] == streams[1]


def test_idle() -> None:
    """Nothing happens before init."""
    ks = Keystream(b"Key")
    assert ks.state is ControlState.IDLE
    with pytest.raises(NotReady):
        ks.next_byte()
    assert ks.step() == (0, False)
    with pytest.raises(NotReady):
        ks.read(1)
    assert ks.permutation == tuple(range(256))
    assert not ks.ready


def test_init_without_key() -> None:
    ks = Keystream()
    with pytest.raises(NotReady):
        ks.init()
    assert ks.state is ControlState.IDLE


def test_rfc4345_discard() -> None:
    """The first 1356 bytes of keystream are never seen."""
    key = b"0123456789abcdef"
    plain = Keystream(key)
    plain.init()
    full = plain.read(DISCARD_ROUNDS + 32)
    ks = Keystream(key, 128, rfc4345=True)
    ks.init()
    data, misses = poll(ks, 32)
    assert misses == SCHEDULE_ROUNDS + DISCARD_ROUNDS
    assert data == full[DISCARD_ROUNDS:]
    ks.rearm()
    ks.init()
    assert ks.read(32) == full[DISCARD_ROUNDS:]


def test_phases() -> None:
    """Step through the phases one round at a time."""
    ks = Keystream(b"Wiki", rfc4345=True)
    ks.init()
    assert ks.state is ControlState.KEY_SCHEDULE
    for _ in range(SCHEDULE_ROUNDS - 1):
        assert ks.step() == (0, False)
    assert ks.state is ControlState.KEY_SCHEDULE
    assert ks.counter == SCHEDULE_ROUNDS - 1
    ks.step()
    assert ks.state is ControlState.DISCARD
    assert ks.counter == 0
    assert (ks.i, ks.j) == (0, 0)
    for _ in range(DISCARD_ROUNDS):
        assert ks.step() == (0, False)
    assert ks.state is ControlState.GENERATE
    assert ks.ready
    byte, valid = ks.step()
    assert valid


def test_permutation_invariant() -> None:
    """The state is always a permutation."""
    rng = random.Random(42)
    key = bytes(rng.randrange(256) for _ in range(32))
    ks = Keystream(key, 256, rfc4345=True)
    ks.init()
    for _ in range(20):
        for _ in range(rng.randrange(1, 300)):
            ks.step()
        assert sorted(ks.permutation) == list(range(256))


def test_reconfigure_while_active() -> None:
    ks = Keystream(b"Key")
    ks.init()
    ks.step()
    before = ks.permutation
    with pytest.raises(ReconfigureWhileActive):
        ks.configure(b"Wiki")
    with pytest.raises(NotReady):
        ks.configure(b"Wiki")
    with pytest.raises(ReconfigureWhileActive):
        ks.init()
    assert ks.permutation == before
    assert ks.state is ControlState.KEY_SCHEDULE
    ks.rearm()
    assert ks.state is ControlState.IDLE
    assert ks.permutation == tuple(range(256))
    ks.configure(b"Wiki")
    ks.init()
    assert ks.read(6).hex() == "6044db6d41b7"


def test_key_sizes() -> None:
    """Key size boundaries."""
    with pytest.raises(InvalidKeySize):
        Keystream(b"Key", 9)
    with pytest.raises(InvalidKeySize):
        Keystream(b"Key", 32)
    ks = Keystream(bytes(32), 256)
    assert ks.key_size_bits == 256
    with pytest.raises(InvalidKeySize):
        Keystream(bytes(33), 256)


def test_truncated_key() -> None:
    """Only key_size_bits of the key are used."""
    short = Keystream(b"Key")
    short.init()
    long = Keystream(b"Keyboard", 24)
    long.init()
    assert long.read(64) == short.read(64)


def test_iterate() -> None:
    ks = Keystream(b"Key")
    ks.init()
    it = iter(ks)
    assert bytes(next(it) for _ in range(10)).hex() == "eb9f7781b734ca72a719"


def test_read_zero() -> None:
    ks = Keystream(b"Key", rfc4345=True)
    ks.init()
    assert ks.read(0) == b""
    assert ks.state is ControlState.GENERATE
    with pytest.raises(ValueError):
        ks.read(-1)


def test_new() -> None:
    """The convenience constructor leaves us ready to go."""
    import arcstream

    ks = arcstream.new(b"Key")
    assert ks.ready
    assert ks.read(10).hex() == "eb9f7781b734ca72a719"
    ks = arcstream.new(b"Key", rfc4345=True)
    assert ks.state is ControlState.GENERATE
    assert ks.counter == DISCARD_ROUNDS


def test_rearm_while_iterating() -> None:
    """An iterator stops producing bytes once we are idle again."""
    ks = Keystream(b"Key")
    ks.init()
    it = iter(ks)
    assert next(it) == 0xEB
    ks.rearm()
    with pytest.raises(NotReady):
        next(it)
    assert ks.state is ControlState.IDLE
    assert ks.permutation == tuple(range(256))


def test_rearm_then_read() -> None:
    """Generation refuses to run outside of the generate phase."""
    ks = Keystream(b"Key")
    ks.init()
    ks.read(4)
    ks.rearm()
    with pytest.raises(NotReady):
        ks.control.generate(ks.perm, 4)
    assert ks.permutation == tuple(range(256))


def test_configure_keeps_mode() -> None:
    """Configuring a key keeps the mode unless told otherwise."""
    ks = Keystream(rfc4345=True)
    ks.configure(b"Key")
    assert ks.rfc4345
    ks.configure(b"Key", rfc4345=False)
    assert not ks.rfc4345
    ks.configure(b"Key", 24, True)
    assert ks.rfc4345


def test_bad_key_types() -> None:
    """Integers and strings are not keys."""
    with pytest.raises(TypeError):
        Keystream(5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        Keystream("Key")  # type: ignore[arg-type]
    with pytest.raises(InvalidKeySize):
        Keystream([75, 300, 121])
    ks = Keystream([75, 101, 121])
    ks.init()
    assert ks.read(10).hex() == "eb9f7781b734ca72a719"
