"""
System constants that should never change.

These are technical/system limits, not user preferences.
User-configurable values should go in config.yaml instead.
"""

VERBOSE_LOGGING_THRESHOLD = 2  # -vv switches on debug output and ffmpeg info logs

# ffmpeg -loglevel values by verbosity
FFMPEG_QUIET_LOGLEVEL = "error"
FFMPEG_VERBOSE_LOGLEVEL = "info"

# Summary table layout
MAX_FILENAME_LENGTH = 37
FILENAME_TRUNCATE_LENGTH = 34
