"""
Program image loading for the FemtoRV32 testbench.

The image is a text file with one hexadecimal 32-bit word per line:

    # boot
    00000013
    0x00500113

Blank lines and lines starting with '#' are skipped. Only the first token of
a line is parsed, so trailing annotations are allowed. A missing image is not
fatal: the harness falls back to a small built-in program so it can still be
run without any file. A malformed word is fatal.
"""

import logging
import re

from .memory import InstructionMemory, MIN_WORDS, NOP, WORD_MASK

log = logging.getLogger(__name__)

FALLBACK_PROGRAM = (
    0x00000013,  # nop
    0x00500113,  # addi x2, x0, 5
    0x00300193,  # addi x3, x0, 3
    0x003100B3,  # add  x1, x2, x3
)


_HEX_WORD_RE = re.compile(r"(?:0[xX])?[0-9a-fA-F]+")


class ProgramImageError(ValueError):
    """A program image could not be read as a list of 32-bit words."""

    def __init__(self, path, lineno, text, reason="invalid program word"):
        where = f"{path}:{lineno}" if lineno is not None else f"{path}"
        super().__init__(f"{where}: {reason} {text!r}")
        self.path = path
        self.lineno = lineno
        self.text = text


def parse_word(token):
    """Parse one hex token (optional 0x prefix) into a 32-bit word.

    Raises:
        ValueError if the token is not plain hex digits or does not fit in 32 bits.
    """
    if not _HEX_WORD_RE.fullmatch(token):
        raise ValueError(f"not a hex word: {token}")
    value = int(token, 16)
    if value > WORD_MASK:
        raise ValueError(f"word out of 32-bit range: {token}")
    return value


def parse_program(lines, path="<program>"):
    """Parse program image lines into a list of words.

    Args:
        lines: Iterable of text lines.
        path: Name used in error messages.

    Returns:
        List of 32-bit integers in file order.

    Raises:
        ProgramImageError on the first malformed line.
    """
    words = []
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith("#"):
            continue
        token = text.split()[0]
        try:
            value = parse_word(token)
        except ValueError:
            raise ProgramImageError(path, lineno, token) from None
        log.debug("Loaded instruction: 0x%08x", value)
        words.append(value)
    return words


def load_program(path):
    """Load a program image, substituting FALLBACK_PROGRAM if it can't be opened."""
    try:
        with open(path, encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as exc:
        log.warning(
            "Could not open %s (%s). Using default memory contents.",
            path,
            exc.strerror or exc,
        )
        return list(FALLBACK_PROGRAM)
    except UnicodeDecodeError as exc:
        bad = exc.object[exc.start:exc.end]
        raise ProgramImageError(path, None, bad, reason=f"not UTF-8 text at byte {exc.start}") from None
    words = parse_program(lines, path=str(path))
    log.info("Loaded %d words from %s", len(words), path)
    return words


def build_memory(words, min_words=MIN_WORDS, filler=NOP):
    """Create the instruction store for a loaded program."""
    return InstructionMemory(words, size=min_words, filler=filler)
