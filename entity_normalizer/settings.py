# entity_normalizer/settings.py
import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "entity-normalizer")
SERVICE_VERSION = 1

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Deepest entity nesting either traversal will follow before giving up.
NORMALIZER_MAX_DEPTH = int(os.getenv("NORMALIZER_MAX_DEPTH", "100"))

# Name of the merge strategy used when the same entity ID shows up twice.
#   last_write_wins  -> later occurrences overwrite earlier fields
#   first_write_wins -> earlier occurrences keep their fields
#   strict           -> differing values raise ConflictingEntityError
NORMALIZER_MERGE_STRATEGY = os.getenv("NORMALIZER_MERGE_STRATEGY", "last_write_wins")
