"""Global constants for tailwatch."""

# Layout of a project using the Tailwind CLI

TAILWIND_DIR_NAME = ".tailwind"
DEFAULT_OUTPUT_DIR_NAME = "wwwroot"
PROJECT_FILE_PATTERN = "*.csproj"
PYPROJECT_FILE_NAME = "pyproject.toml"
PYPROJECT_TOOL_TABLE = "tailwatch"

# Project-file markers for auto-detection
INPUT_ELEMENT_NAME = "TailwindInput"
INPUT_INCLUDE_ATTRIBUTE = "Include"
INPUT_OUTPUT_ATTRIBUTE = "Output"

# Binary selection, keyed by platform family
BINARY_PATTERNS = {
    "windows": "tailwindcss-windows-*",
    "macos": "tailwindcss-macos-*",
    "linux": "tailwindcss-linux-*",
}

# Tailwind CLI flags
WATCH_FLAG = "--watch"
MINIFY_FLAG = "--minify"

# Seconds to wait for a killed watcher to exit during teardown
TEARDOWN_TIMEOUT = 5.0

# Longest line read from a watcher's output stream, in bytes
STREAM_LINE_LIMIT = 1024 * 1024
