"""
Configuration constants for the command completion catalog.

Defines data-file names, the bracket shortcut mapping and picker texts.
Environment variables are loaded from a .env file at module import time via
python-dotenv.
"""

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load .env file (idempotent; does nothing if already loaded or missing)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Data files
# ---------------------------------------------------------------------------
COMMANDS_FILE: str = "commands.json"
ENVIRONMENTS_FILE: str = "environments.json"
SYMBOLS_FILE: str = "unimathsymbols.json"
PACKAGES_DIR: str = "packages"
PACKAGE_FILE_SUFFIX: str = "_cmd.json"

# ---------------------------------------------------------------------------
# Default snippets
# ---------------------------------------------------------------------------
# Environments whose body starts with an \item line
ITEMIZED_ENVIRONMENTS: tuple = ("enumerate", "itemize")

# Default command name -> opening bracket typed by the user
BRACKET_COMMANDS: dict = {
    "latexinlinemath": "(",
    "latexdisplaymath": "[",
    "curlybrackets": "{",
    "lrparen": "left(",
    "lrbrack": "left[",
    "lrcurly": "left\\{",
}

# ---------------------------------------------------------------------------
# Wrap selection
# ---------------------------------------------------------------------------
SURROUND_PLACEHOLDER: str = "Press ENTER to surround previous selection with selected command"
# Labels never offered as wrappers
SURROUND_EXCLUDED_LABELS: tuple = ("\\begin",)
