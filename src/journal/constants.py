"""Constants for the journal reader."""

import re


# Older files beyond the one holding the position that are scanned for docking
VISITED_WINDOW_FILES = 50

# Journal.220131235959.01.log (pre-Odyssey) and
# Journal.2022-01-31T235959.01.log (Odyssey onwards)
JOURNAL_FILE_PATTERN = re.compile(
    r"^Journal\.(?:(?P<short>\d{12})|(?P<iso>\d{4}-\d{2}-\d{2}T\d{6}))\.(?P<part>\d{2})\.log$"
)
SHORT_TIMESTAMP_FORMAT = "%y%m%d%H%M%S"
ISO_TIMESTAMP_FORMAT = "%Y-%m-%dT%H%M%S"

EVENT_LOCATION = "Location"
EVENT_FSD_JUMP = "FSDJump"
EVENT_DOCKED = "Docked"
POSITION_EVENTS = frozenset({EVENT_LOCATION, EVENT_FSD_JUMP})

SOL_SYSTEM_NAME = "Sol"
