# Pipeline/config.py
from os import getenv

TOOL_VERSION = "fjson-gen-1.0.0"

# Base directory holding one sub-directory per generated version
DEFAULT_OUTPUT_DIR = getenv("FJSON_OUTPUT_DIR", ".")

# Log level used by main.py when --log-level is not given
DEFAULT_LOG_LEVEL = getenv("LOG_LEVEL", "INFO")
