#!/usr/bin/env python3

from __future__ import annotations

import enum
import io
from typing import BinaryIO, Iterable, Iterator

LINE_LENGTH = 80
CHUNK_SIZE = 120
TOOL_NAME = "arrayify"

PREFIX = "const char {name}[] = "
PREFIX_LENGTH = 16  # PREFIX without the name
POSTFIX = b'"\n'
POSTFIX_LENGTH = len(POSTFIX)
BARE_ENDFIX = b'";\n'
ENDFIX = b'";\n\n// End of file\n'
HEADER = "/* This file was created from input file {input_name} by {tool_name} */\n\n"

QUOTE = ord('"')
BACKSLASH = ord("\\")
SPACE = ord(" ")

ESCAPES = {
    0x07: ord("a"),  # bell
    0x08: ord("b"),  # backspace
    0x1B: ord("e"),  # escape
    0x0C: ord("f"),  # form feed
    0x0A: ord("n"),
    0x0D: ord("r"),
    0x09: ord("t"),
    0x0B: ord("v"),  # vertical tab
    0x5C: ord("\\"),
    0x27: ord("'"),
    0x22: ord('"'),
    0x3F: ord("?"),  # trigraphs
}


def encode_text(text: str) -> bytes:
    # names taken from undecodable file names keep their original bytes
    return text.encode("utf-8", "surrogateescape")


class EscapeState(enum.Enum):
    IDLE = enum.auto()
    BACKSLASH = enum.auto()
    MNEMONIC = enum.auto()


def minimum_line_length(name: str) -> int:
    # prefix, quote, one possibly escaped character, quote, newline
    return PREFIX_LENGTH + len(encode_text(name)) + 5


def effective_line_length(name: str, line_length: int) -> int:
    return max(line_length, minimum_line_length(name))


def iter_literal_lines(chunks: Iterable[bytes], name: str, line_length: int) -> Iterator[bytes]:
    """Yield each physical line of the literal, without its postfix.

    The first line starts with the declaration, later lines with as many
    spaces; every line carries its own opening quote. Escape state is kept
    across chunks so the output does not depend on how the input was read.
    """
    line_length = effective_line_length(name, line_length)
    prefix: bytes | None = encode_text(PREFIX.format(name=name))
    prefix_length = len(prefix)
    line = bytearray()
    state = EscapeState.IDLE

    for chunk in chunks:
        pos = 0
        while pos < len(chunk):
            byte = chunk[pos]
            cursor = len(line)
            force_flush = False
            if cursor < prefix_length:
                line.append(prefix[cursor] if prefix is not None else SPACE)
            elif cursor == prefix_length:
                prefix = None
                line.append(QUOTE)
            elif state is EscapeState.BACKSLASH:
                line.append(BACKSLASH)
                state = EscapeState.MNEMONIC
            elif state is EscapeState.MNEMONIC:
                line.append(ESCAPES[byte])
                state = EscapeState.IDLE
                pos += 1
            elif byte in ESCAPES:
                state = EscapeState.BACKSLASH
                # backslash and mnemonic must land on the same line
                if cursor > line_length - POSTFIX_LENGTH - 2:
                    force_flush = True
            else:
                line.append(byte)
                pos += 1

            if force_flush or len(line) >= line_length - POSTFIX_LENGTH:
                yield bytes(line)
                line.clear()

    if prefix is not None:
        # empty input still declares an (empty) array
        line[:] = prefix + bytes((QUOTE,))
    if line:
        yield bytes(line)


def transcode(
    source: BinaryIO,
    sink: BinaryIO,
    name: str,
    line_length: int = LINE_LENGTH,
    bare: bool = False,
    input_name: str = "",
    tool_name: str = TOOL_NAME,
    chunk_size: int = CHUNK_SIZE,
) -> int:
    """Write ``source`` to ``sink`` as a C char array named ``name``.

    Returns the number of literal lines written; the header comment and the
    trailing ``// End of file`` are not counted.
    """
    if not bare:
        sink.write(encode_text(HEADER.format(input_name=input_name, tool_name=tool_name)))

    chunks = iter(lambda: source.read(chunk_size), b"")
    lines_written = 0
    held: bytes | None = None
    # the last line is held back until we know it is the last, then its
    # postfix is swapped for the statement terminator
    for literal_line in iter_literal_lines(chunks, name, line_length):
        if held is not None:
            sink.write(held + POSTFIX)
            lines_written += 1
        held = literal_line

    if held is not None:
        sink.write(held + (BARE_ENDFIX if bare else ENDFIX))
        lines_written += 1
    return lines_written


def transcode_bytes(data: bytes, name: str, **options) -> tuple[bytes, int]:
    sink = io.BytesIO()
    lines_written = transcode(io.BytesIO(data), sink, name, **options)
    return sink.getvalue(), lines_written
