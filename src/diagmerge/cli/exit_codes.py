# topmark:header:start
#
#   project      : DiagMerge
#   file         : exit_codes.py
#   file_relpath : src/diagmerge/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Exit codes for the DiagMerge CLI.

DiagMerge aligns with the BSD `sysexits` convention where practical, so that other
tooling can interpret failures consistently. ``DIAGNOSTICS_ERROR=1`` signals that
the published diagnostics contain at least one error, which lets build scripts
use ``diagmerge parse`` as a gate.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the DiagMerge CLI.

    Attributes:
        SUCCESS: Successful execution; no published error diagnostics.
        DIAGNOSTICS_ERROR: At least one published diagnostic has error severity.
        USAGE_ERROR: Command-line invocation error (invalid flags/args). Mirrors
            BSD ``EX_USAGE (64)``.
        DATA_ERROR: Malformed input data (e.g. a structured diagnostics file).
            Mirrors BSD ``EX_DATAERR (65)``.
        FILE_NOT_FOUND: Input path does not exist. Mirrors BSD ``EX_NOINPUT (66)``.
        IO_ERROR: I/O error reading a file. Mirrors BSD ``EX_IOERR (74)``.
        CONFIG_ERROR: Configuration error (invalid config). Mirrors BSD
            ``EX_CONFIG (78)``.
        UNEXPECTED_ERROR: Unhandled/unknown error (last-resort).
    """

    SUCCESS = 0
    DIAGNOSTICS_ERROR = 1

    # sysexits-aligned values for better interoperability
    USAGE_ERROR = 64  # EX_USAGE
    DATA_ERROR = 65  # EX_DATAERR
    FILE_NOT_FOUND = 66  # EX_NOINPUT
    IO_ERROR = 74  # EX_IOERR
    CONFIG_ERROR = 78  # EX_CONFIG

    UNEXPECTED_ERROR = 255
