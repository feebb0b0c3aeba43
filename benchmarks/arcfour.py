"""
Benchmark keystream generation, one round at a time and in bulk.
"""

import logging
import time
from pathlib import Path

from arcstream import Arcfour, Keystream, NotReady

LOG = logging.getLogger(Path(__file__).stem)
KEYS = [b"0123456789abcdef", bytes(range(32))]
NBYTES = 1 << 16


def benchmark_step(key: bytes) -> None:
    ks = Keystream(key, rfc4345=True)
    ks.init()
    count = 0
    while count < NBYTES:
        try:
            ks.next_byte()
        except NotReady:
            continue
        count += 1


def benchmark_bulk(key: bytes) -> None:
    Arcfour(key, rfc4345=True).encrypt(bytes(NBYTES))


if __name__ == "__main__":
    logging.basicConfig(level=logging.ERROR)
    niter = 10
    for func in benchmark_step, benchmark_bulk:
        t = 0.0
        for iter in range(niter + 1):
            for key in KEYS:
                start = time.time()
                func(key)
                if iter != 0:
                    t += time.time() - start
        print("%s took %.2f ms / iter" % (func.__name__, t / niter * 1000))
