# topmark:header:start
#
#   project      : DiagMerge
#   file         : __main__.py
#   file_relpath : src/diagmerge/__main__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Module entry point for running DiagMerge via ``python -m diagmerge``.

It delegates directly to :func:`diagmerge.cli.main.cli`, ensuring a single,
authoritative CLI entry point regardless of how DiagMerge is launched.

Examples:
    Parse a saved build log::

        python -m diagmerge parse build.log
"""

from __future__ import annotations

from diagmerge.cli.main import cli

if __name__ == "__main__":
    cli()
