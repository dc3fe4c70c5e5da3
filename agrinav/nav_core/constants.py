"""Protocol constants and guidance defaults."""

# Speed conversion factors
MPS_PER_KNOT = 0.514444
KMH_PER_MPS = 3.6

# Geodesy
EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE_LAT = 111_320.0

# Fix quality descriptions (GGA field 6)
FIX_QUALITY_DESCRIPTIONS = {
    0: "Invalid",
    1: "GPS",
    2: "DGPS",
    3: "PPS",
    4: "RTK Fixed",
    5: "RTK Float",
    6: "Dead reckoning",
    7: "Manual",
    8: "Simulation",
}

# Guidance defaults
DEFAULT_TOLERANCE_M = 0.5
DEFAULT_MACHINE_WIDTH_M = 3.0
DEFAULT_PARALLEL_SEARCH_RANGE = 10

# Coverage heuristic: each path point stands for roughly this many meters
APPROX_METERS_PER_PATH_POINT = 2.0

# Transport defaults
DEFAULT_RECONNECT_DELAY = 5.0
DEFAULT_RELAY_URL = "ws://localhost:8080"
DEFAULT_SERIAL_PORT = "/dev/serial0"
DEFAULT_BAUD_RATE = 9600
