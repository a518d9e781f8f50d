# topmark:header:start
#
#   project      : DiagMerge
#   file         : constants.py
#   file_relpath : src/diagmerge/constants.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""DiagMerge Constants."""

from __future__ import annotations

from importlib.metadata import version as get_version

DIAGMERGE_VERSION: str = get_version("diagmerge")

# Config file discovered in the working directory:
DEFAULT_CONFIG_FILENAME: str = "diagmerge.toml"
PYPROJECT_FILENAME: str = "pyproject.toml"
PYPROJECT_SECTION: str = "tool.diagmerge"

# Source tags carried on diagnostics by the two producers.
TEXTUAL_SOURCE_TAG: str = "swiftc"
STRUCTURED_SOURCE_TAG: str = "sourcekit"

# Label used for repaired documentation links.
MORE_INFORMATION_LABEL: str = "More Information..."

# File extensions whose deletion drops stored diagnostics.
DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = ("swift", "c", "cpp", "h", "hpp", "m", "mm")

DEFAULT_DOCUMENTATION_HOSTS: tuple[str, ...] = ("docs.swift.org",)
DEFAULT_DOCUMENTATION_SUFFIXES: tuple[str, ...] = (".md",)

# Build-completion markers emitted by the compiler driver (line-anchored).
DEFAULT_COMPLETION_PATTERNS: tuple[str, ...] = (
    r"^Build complete!",
    r"^Build of product '.*' complete!",
    r"^Build of target '.*' complete!",
)
