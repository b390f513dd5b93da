# Patcher/config.py
from typing import Dict

# ===== Target files inside an extracted version directory =====
TARGET_FILE = "encode.go"
IMPORT_FILE = "bench_test.go"

# ===== Call pattern: e.error(...) with e declared as *encodeState =====
TARGET_MEMBER = "error"
RECEIVER_TYPE = "encodeState"

# ===== Rewrite: e.WriteString(fmt.Sprintf("\"%s\"", (ARG).Error())) =====
REPLACEMENT_MEMBER = "WriteString"
FORMAT_FUNC = "fmt.Sprintf"
QUOTED_FORMAT = '"\\"%s\\""'
DESCRIBE_METHOD = "Error"

# ===== Import substitutions applied to IMPORT_FILE =====
IMPORT_REWRITES: Dict[str, str] = {
    "internal/testenv": "testenv",
}

# ===== Formatting =====
# gofmt binary (name on PATH or absolute path); override with $GOFMT
GOFMT_BIN = "gofmt"
GOFMT_ENV_VAR = "GOFMT"
