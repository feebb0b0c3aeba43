"""Generate RC4 keystream, or encrypt/decrypt a file with it.

By default this prints the first 16 bytes of keystream for the given
key in hexadecimal:

    arcstream --key 4b6579
    eb9f7781b734ca72a719...

Add `--rfc4345` to get the keystream after the initial discard (as
used by the `arcfour128` and `arcfour256` SSH ciphers), or `--count`
to get more or less of it.

With `--infile` the contents of the file are XORed with the keystream
instead, which is the same thing as encryption or decryption:

    arcstream --key-text Secret -i plain.txt -o secret.bin
    arcstream --key-text Secret -i secret.bin
"""

import argparse
import binascii
import logging
import sys
from typing import BinaryIO

from arcstream.arcfour import Arcfour
from arcstream.exceptions import ArcstreamException
from arcstream.keystream import Keystream

LOG = logging.getLogger(__name__)
CHUNK = 65536


def make_argparse() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    keys = parser.add_mutually_exclusive_group(required=True)
    keys.add_argument("-k", "--key", help="Key as hexadecimal digits")
    keys.add_argument("--key-text", help="Key as (UTF-8) text")
    parser.add_argument(
        "-b",
        "--key-size",
        type=int,
        help="Key size in bits (default: length of the key)",
    )
    parser.add_argument(
        "--rfc4345",
        action="store_true",
        help="Discard the initial keystream as in RFC 4345",
    )
    parser.add_argument(
        "-n",
        "--count",
        type=int,
        default=16,
        help="Number of keystream bytes to output (default: %(default)s)",
    )
    parser.add_argument(
        "-i",
        "--infile",
        type=argparse.FileType("rb"),
        help="File to encrypt or decrypt",
    )
    parser.add_argument(
        "-o",
        "--outfile",
        help="File to write output (or - for standard output)",
        default="-",
    )
    parser.add_argument(
        "--debug",
        help="Very verbose debugging output",
        action="store_true",
    )
    return parser


def parse_key(args: argparse.Namespace) -> bytes:
    if args.key_text is not None:
        return args.key_text.encode("utf-8")
    try:
        return binascii.unhexlify(args.key)
    except (binascii.Error, ValueError) as e:
        raise ArcstreamException(f"Invalid hexadecimal key {args.key!r}: {e}")


def make_keystream(key: bytes, args: argparse.Namespace) -> Keystream:
    """Configure and start a keystream, checking all the arguments."""
    if args.count < 0:
        raise ArcstreamException(f"Invalid count {args.count}")
    ks = Keystream(key, args.key_size, args.rfc4345)
    ks.init()
    return ks


def write_keystream(ks: Keystream, args: argparse.Namespace, outfh: BinaryIO) -> None:
    """Write keystream bytes as hex."""
    outfh.write(ks.read(args.count).hex().encode("ascii"))
    outfh.write(b"\n")


def crypt_file(cipher: Arcfour, args: argparse.Namespace, outfh: BinaryIO) -> None:
    """XOR the input file with the keystream."""
    total = 0
    while True:
        data = args.infile.read(CHUNK)
        if not data:
            break
        outfh.write(cipher.process(data))
        total += len(data)
    LOG.debug("Processed %d bytes", total)


def main(argv=None) -> None:
    parser = make_argparse()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    try:
        key = parse_key(args)
        # Everything is checked before the output file gets truncated
        if args.infile is not None:
            cipher = Arcfour(key, key_size_bits=args.key_size, rfc4345=args.rfc4345)
        else:
            ks = make_keystream(key, args)
        if args.outfile == "-":
            outfh = sys.stdout.buffer
        else:
            outfh = open(args.outfile, "wb")
        try:
            if args.infile is not None:
                crypt_file(cipher, args, outfh)
            else:
                write_keystream(ks, args, outfh)
        finally:
            if outfh is not sys.stdout.buffer:
                outfh.close()
    except (ArcstreamException, OSError) as e:
        parser.error(f"Something went wrong:\n{e}")
    finally:
        if args.infile is not None:
            args.infile.close()


if __name__ == "__main__":
    main()
