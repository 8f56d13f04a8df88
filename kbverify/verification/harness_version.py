# kbverify/verification/harness_version.py
# Harness version constants. Single authoritative definition.
# Referenced by report_serializer.py and failure_handler.py for version
# stamping of run records.

HARNESS_VERSION: str = "1.0.0"

# Operator every report of this harness describes.
OPERATOR_NAME: str = "mulhs"

# Storage format version for JSON run and failure records.
STORAGE_FORMAT_VERSION: str = "1.0.0"
