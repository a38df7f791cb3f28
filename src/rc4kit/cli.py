"""
Command-line driver: encrypt or decrypt data with RC4 and print the result.

Examples::

    rc4kit --key Key --drop 0 Plaintext
    # bbf3 16e8 d940 af0a d3

    rc4kit --key Key --drop 0 --input-hex "bbf3 16e8 d940 af0a d3" --raw
    # Plaintext
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator, Sequence
from typing import BinaryIO

from rc4kit.infra.config import ConfigAdapter, copy_default_config, load_config
from rc4kit.infra.logger import setup_logging
from rc4kit.libs.crypto import DEFAULT_DROP, RC4
from rc4kit.infra.paths import SETTING_TOML_PATH
from rc4kit.libs.textutils import iter_format_hex, iter_parse_hex, parse_hex
from rc4kit.schemas import CipherConfig
from rc4kit.version import __version__

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rc4kit",
        description=(
            "Apply the RC4 keystream to DATA (or stdin). The same command "
            "encrypts and decrypts. Peers must agree on the key and on "
            f"--drop (default {DEFAULT_DROP}; 0 is textbook RC4)."
        ),
    )
    parser.add_argument("data", nargs="?", help="Input text. Reads stdin if omitted.")

    key_group = parser.add_mutually_exclusive_group()
    key_group.add_argument("-k", "--key", help="Key text, see key_encoding.")
    key_group.add_argument("--key-hex", help="Key as hex digits.")

    parser.add_argument(
        "-d",
        "--drop",
        type=_non_negative_int,
        help="Keystream bytes to discard after key setup.",
    )
    parser.add_argument(
        "--input-hex",
        action="store_true",
        help="Treat the input as hex text (e.g. output of a previous run).",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Write raw bytes to stdout instead of grouped hex.",
    )
    parser.add_argument("-c", "--config", help="Settings file (TOML or JSON).")
    parser.add_argument("-p", "--profile", help="Profile from the settings file.")
    parser.add_argument("--log-level", help="Logging level, overrides settings.")
    parser.add_argument(
        "--init-config",
        metavar="PATH",
        help=(
            "Write the sample settings file to PATH and exit. It is picked up "
            f"from ./settings.toml or {SETTING_TOML_PATH}."
        ),
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _read_chunks(stream: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while chunk := stream.read(chunk_size):
        yield chunk


def _resolve_key(args: argparse.Namespace, cipher_cfg: CipherConfig) -> bytes:
    if args.key_hex is not None:
        return parse_hex(args.key_hex)
    return cipher_cfg.decode_key(args.key)


def _input_chunks(
    args: argparse.Namespace,
    stdin: BinaryIO,
    chunk_size: int,
) -> Iterator[bytes]:
    if args.data is not None:
        data = args.data
        yield parse_hex(data) if args.input_hex else data.encode("utf-8")
    elif args.input_hex:
        text_chunks = (
            chunk.decode("ascii", errors="replace")
            for chunk in _read_chunks(stdin, chunk_size)
        )
        yield from iter_parse_hex(text_chunks)
    else:
        yield from _read_chunks(stdin, chunk_size)


def run(
    args: argparse.Namespace,
    stdin: BinaryIO,
    stdout: BinaryIO,
) -> None:
    """Execute a parsed command line.

    Raises:
        ValueError: On invalid keys, settings or input.
        OSError: On I/O failures.
    """
    config = ConfigAdapter(load_config(args.config, required=False))
    setup_logging(args.log_level or config.get_log_level())

    cipher_cfg = config.get_cipher_config(args.profile)
    drop = cipher_cfg.drop if args.drop is None else args.drop
    key = _resolve_key(args, cipher_cfg)

    total = 0

    def counted(chunks: Iterator[bytes]) -> Iterator[bytes]:
        nonlocal total
        for out in chunks:
            total += len(out)
            yield out

    with RC4(key, drop=drop) as cipher:
        chunks = counted(
            cipher.crypt_iter(_input_chunks(args, stdin, cipher_cfg.chunk_size))
        )
        if args.raw:
            for out in chunks:
                stdout.write(out)
        else:
            for text in iter_format_hex(chunks):
                stdout.write(text.encode("ascii"))
            stdout.write(b"\n")
        stdout.flush()

    logger.info("Processed %d bytes (drop=%d)", total, drop)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.init_config and args.key is None and args.key_hex is None:
        parser.error("one of the arguments -k/--key --key-hex is required")

    try:
        setup_logging(args.log_level or "INFO")
        if args.init_config:
            copy_default_config(args.init_config)
        else:
            run(args, sys.stdin.buffer, sys.stdout.buffer)
    except (ValueError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
