"""
Configuration constants for TeX command extraction.

Defines the regex patterns and policy constants used by the heuristic scanner.
The patterns intentionally recognize only flat (non-nested) brace groups.
"""

import re
from typing import Pattern, Set

# Command usage: \name followed by up to three flat brace groups
COMMAND_USAGE_RE: Pattern[str] = re.compile(
    r"\\([a-zA-Z]+)(\{[^{}]*\})?(\{[^{}]*\})?(\{[^{}]*\})?"
)

# Macro definitions: \newcommand\foo, \renewcommand{\foo}, \providecommand\foo, \command\foo
MACRO_DEFINITION_RE: Pattern[str] = re.compile(
    r"\\(?:re|provide)?(?:new)?command\{?\\(\w+)"
)

# Package usage: \usepackage[opts]{pkg1, pkg2}
PACKAGE_USAGE_RE: Pattern[str] = re.compile(
    r"\\usepackage(?:\[[^\[\]{}]*\])?\{([^{}]*)\}"
)

# Maximum number of argument groups turned into snippet placeholders
MAX_ARGUMENT_GROUPS: int = 3

# Names that trigger a second completion stage once their argument is entered
RETRIGGER_SUBSTRINGS: tuple = ("cite", "ref")
RETRIGGER_NAMES: Set[str] = {"begin"}

# Post-completion action that re-opens the suggestion widget
TRIGGER_SUGGEST_ACTION: str = "editor.action.triggerSuggest"

# TeX file extensions
TEX_EXTENSIONS: Set[str] = {
    ".tex",
    ".sty",
    ".cls",
    ".ltx",
    ".dtx",
}

# Directories skipped during discovery
SKIPPED_DIRECTORIES: Set[str] = {
    "build",
    "out",
    "dist",
    "node_modules",
    "venv",
    "__pycache__",
    "_minted",
}
