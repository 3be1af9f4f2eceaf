import re

# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "interp": "dockrun.engine.interpreter",
    "itp": "dockrun.engine.interpreter",
    "ctx": "dockrun.engine.context",
    "context": "dockrun.engine.context",
    "vars": "dockrun.engine.variables",
    "var": "dockrun.engine.variables",
    "args": "dockrun.engine.args",
    "arg": "dockrun.engine.args",
    "cls": "dockrun.engine.classifier",
    "classify": "dockrun.engine.classifier",
    "cont": "dockrun.engine.continuation",
    "shell": "dockrun.io.shell",
    "sh": "dockrun.io.shell",
    "fetch": "dockrun.io.fetch",
    "io": "dockrun.io",
    "conf": "dockrun.config",
    "cli": "dockrun.cli",
}

# Top-level modules within dockrun for auto-prefixing
KNOWN_TOP_MODULES = {
    "engine",
    "io",
    "datacls",
    "utils",
    "exceptions",
    "config",
    "cli",
}

LOG_LEVELS_ENV = "DOCKRUN_LOG_LEVELS"
CONFIG_ENV = "DOCKRUN_CONFIG"

# --- Script defaults ---
DOCKERFILE_NAME = "Dockerfile"
DEFAULT_SHELL = "bash"
CONTINUATION_MARKER = "\\"
COMMENT_PREFIX = "#"

# --- Variables ---
VAR_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
VAR_NAME_PATTERN = re.compile(rf"^{VAR_NAME}$")

# --- Remote sources ---
FETCH_PROTOCOLS = {"http", "https"}
