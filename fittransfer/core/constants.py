# --- Solver search grid ---
SPACER_STEP_MM = 5
MIN_STEM_ANGLE = -17
MAX_STEM_ANGLE = 17

# --- Solver component bounds ---
MIN_STEM_LENGTH_MM = 60
MAX_STEM_LENGTH_MM = 140
MAX_SPACERS_MM = 50
PREFERRED_STEM_ANGLE = -6
FALLBACK_STEM_LENGTH_MM = 100
COMMON_STEM_LENGTHS_MM = (70, 80, 90, 100, 110, 120, 130, 140)

# --- Solver heuristics (empirical, no cited derivation) ---
ANGLE_PENALTY_WEIGHT = 0.5  # mm of error per degree away from the preferred angle
SINGULAR_THRESHOLD = 0.1  # |cos| / |sin| below this is treated as degenerate
ACHIEVABLE_TOLERANCE_MM = 10
DELTA_NOTE_THRESHOLD_MM = 5

# --- Saddle / seatpost ---
DEFAULT_SEAT_TUBE_ANGLE = 73.0
MIN_SEATPOST_EXTENSION_MM = 50
MAX_SEATPOST_EXTENSION_MM = 200
STA_TOLERANCE_DEG = 0.5
LARGE_OFFSET_THRESHOLD_MM = 15
SMALL_OFFSET_THRESHOLD_MM = 8
LARGE_SEATPOST_OFFSET_MM = 25
SMALL_SEATPOST_OFFSET_MM = 20
FORWARD_SADDLE_SETBACK_MM = 50

NOT_ACHIEVABLE_NOTE = "Exact fit position may not be achievable with standard components"
FORWARD_SADDLE_NOTE = "Forward saddle position - ensure saddle rails allow this adjustment"
