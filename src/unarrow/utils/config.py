"""
Configuration constants to replace magic values throughout unarrow
"""

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Name used for sources that do not come from a file
DEFAULT_SOURCE_FILE = "<input>"

# `arguments` hoisting: base name of the shared binding; collisions append 1, 2, ...
ARGUMENTS_NAME = "arguments"
HOISTED_ARGUMENTS_BASE_NAME = "$__arguments"

# Lexical `this` capture: fn.bind(this)
BIND_METHOD_NAME = "bind"

# Printer constants
DEFAULT_INDENT = "  "
STATEMENT_TERMINATOR = ";"

# Source map constants
SOURCE_MAP_VERSION = 3
BASE64_VLQ_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"

# Environment switches
DUMP_AST_ENV_VAR = "UNARROW_DUMP_AST"
