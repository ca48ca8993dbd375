"""Constants for the stations module."""

# Timestamp format used by the dump producer (always UTC)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Upstream dumps
STATIONS_DUMP_URL = "https://www.edsm.net/dump/stations.json"
STATIONS_DUMP_FILE = "stations.json.gz"
SYSTEMS_DUMP_URL = "https://www.edsm.net/dump/systemsPopulated.json"
SYSTEMS_DUMP_FILE = "systemsPopulated.json.gz"

# Compact coordinates cache derived from the systems dump
COORDINATES_FILE = "coordinates.json.gz"

# Array delimiters of the one-value-per-line dump layout
ARRAY_OPEN = "["
ARRAY_CLOSE = "]"

# Truncate offending lines in error messages to keep logs readable
ERROR_LINE_PREVIEW_CHARS = 200
