# Defaults shared by the library and the command line tools.

DEFAULT_TIME_LIMIT = 300      # seconds, used by the CLI (the library runs to completion)
DATA_DIR = "data"             # where instances are written and read
OUTPUT_DIR = "."              # where solution reports go
RESULTS_DIR = "res/MIP"       # json summaries, one file per instance
MAX_CLUB_DRAWS = 1000         # rejection draws per team before the fallback
SUPPORTED_LEAGUE_SIZES = (4, 6, 8, 10, 12, 14, 16)
