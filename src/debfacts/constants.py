from os import cpu_count, getenv

# archive files are matched on this suffix during directory scans
ARCHIVE_SUFFIX = getenv("DEBFACTS_ARCHIVE_SUFFIX", ".deb")

# worker pool size; defaults to the machine's parallelism
WORKERS = int(getenv("DEBFACTS_WORKERS", "0")) or cpu_count() or 1

# how many archives may be queued per worker before the scanner is paused
IN_FLIGHT_FACTOR = max(1, int(getenv("DEBFACTS_IN_FLIGHT_FACTOR", "4")))

LOG_LEVEL = getenv("DEBFACTS_LOG_LEVEL", "INFO").upper()
