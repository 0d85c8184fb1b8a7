"""Command-line parsing — tokenizing and redirection extraction.

A command line goes through two small, pure steps before the shell
decides what to run:

    1. **Tokenize** — split the line on runs of whitespace.  There is
       no quoting, escaping, or globbing: ``echo "a b"`` yields the
       three tokens ``echo``, ``"a``, ``b"``.
    2. **Extract redirections** — pull ``<``, ``>`` and ``>>`` (and
       the filename after each) out of the token list.

Both steps leave the original line untouched, so the shell can still
use it for history and job labels.

Design choices:
    - **Frozen dataclass for the parsed command** — it is built once
      per line and never mutated.
    - **Bounds-checked operators** — an operator with no filename after
      it (``cat >``) or followed by another operator (``cat > <``) is a
      syntax error, not a silent no-op.
"""

from dataclasses import dataclass

from py_sh.status import ShellError, ShellStatus

REDIRECT_INPUT = "<"
REDIRECT_OUTPUT = ">"
REDIRECT_APPEND = ">>"

REDIRECTION_OPERATORS: frozenset[str] = frozenset(
    [REDIRECT_INPUT, REDIRECT_OUTPUT, REDIRECT_APPEND]
)


@dataclass(frozen=True)
class ParsedCommand:
    """One command line, ready for dispatch.

    Attributes:
        argv: Argument tokens; ``argv[0]`` is the command name.
        stdin: Path for input redirection (``<``), if any.
        stdout: Path for output redirection (``>`` / ``>>``), if any.
        append: True when the output redirection was ``>>``.
        line: The original, unmodified command line.

    """

    argv: tuple[str, ...]
    stdin: str | None = None
    stdout: str | None = None
    append: bool = False
    line: str = ""

    @property
    def name(self) -> str | None:
        """Return the command name, or None for an empty command."""
        return self.argv[0] if self.argv else None

    @property
    def redirected(self) -> bool:
        """Return True if any redirection was requested."""
        return self.stdin is not None or self.stdout is not None


def tokenize(line: str) -> list[str]:
    """Split *line* into whitespace-separated tokens.

    Whitespace-only or empty input yields an empty list.
    """
    return line.split()


def extract_redirections(tokens: list[str], *, line: str = "") -> ParsedCommand:
    """Remove redirection operators and their targets from *tokens*.

    Scans left to right.  When the same kind of redirection appears
    more than once, the last one wins.

    Args:
        tokens: Output of ``tokenize()``.
        line: The original line, kept on the result for labelling.

    Returns:
        The filtered argument list plus the redirection targets.

    Raises:
        ShellError: ``INVALID_SYNTAX`` if an operator has no filename.

    """
    argv: list[str] = []
    stdin: str | None = None
    stdout: str | None = None
    append = False

    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token not in REDIRECTION_OPERATORS:
            argv.append(token)
            i += 1
            continue

        if i + 1 >= len(tokens) or tokens[i + 1] in REDIRECTION_OPERATORS:
            msg = f"syntax error: expected a filename after '{token}'"
            raise ShellError(ShellStatus.INVALID_SYNTAX, msg)

        target = tokens[i + 1]
        if token == REDIRECT_INPUT:
            stdin = target
        else:
            stdout = target
            append = token == REDIRECT_APPEND
        i += 2

    return ParsedCommand(argv=tuple(argv), stdin=stdin, stdout=stdout, append=append, line=line)


def parse_command(line: str) -> ParsedCommand:
    """Tokenize *line* and extract its redirections in one step."""
    return extract_redirections(tokenize(line), line=line)
