"""The 256-entry permutation at the heart of RC4."""

from typing import Iterator, List, Tuple


class PermutationState:
    """The S-box, a permutation of {0, ..., 255}.

    The only way to change it (other than `reset`) is `swap`, so it is
    always a permutation.
    """

    def __init__(self) -> None:
        self.s: List[int] = list(range(256))

    def reset(self) -> None:
        self.s[:] = range(256)

    def read(self, index: int) -> int:
        return self.s[index & 0xFF]

    def pair(self, a: int, b: int) -> Tuple[int, int]:
        """Read two entries at once."""
        s = self.s
        return s[a & 0xFF], s[b & 0xFF]

    def swap(self, i: int, j: int) -> None:
        s = self.s
        (i, j) = (i & 0xFF, j & 0xFF)
        (s[i], s[j]) = (s[j], s[i])

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self.s)

    def is_identity(self) -> bool:
        return all(k == v for k, v in enumerate(self.s))

    def is_permutation(self) -> bool:
        return len(self.s) == 256 and set(self.s) == set(range(256))

    def __getitem__(self, index: int) -> int:
        return self.read(index)

    def __iter__(self) -> Iterator[int]:
        return iter(self.s)

    def __len__(self) -> int:
        return len(self.s)
