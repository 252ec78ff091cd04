"""Named constants for routing, reconciliation, conversion and rendering."""

# --- Survey reconciliation ---

# Samples faster than this (blocks/s) ride on coppered rail.
COPPER_SPEED_THRESHOLD: float = 11.0
# Max planar distance between a sample and an edge's geometry.
DEFAULT_SNAP_THRESHOLD: float = 5.0
# A run seen by a single sample still covers this many blocks.
MIN_RUN_LENGTH: float = 1.0
# Slack used when testing whether a segment covers a sub-interval.
COVER_TOLERANCE: float = 1e-6
# Points closer than this are treated as the same point.
POINT_TOLERANCE: float = 1e-9

# --- Ratio snapping (editor helper) ---

RATIO_SNAP_THRESHOLD: float = 20.0
RATIO_SNAP_MIN_DISTANCE: float = 0.01
# (dy, dx, name) of the slopes track can be laid at.
SNAPPING_RATIOS: tuple[tuple[int, int, str], ...] = (
    (0, 1, "Horizontal"),
    (1, 0, "Vertical"),
    (1, 1, "1:1"),
    (1, 2, "1:2"),
    (1, 3, "1:3"),
    (1, 4, "1:4"),
    (1, 5, "1:5"),
    (1, 6, "1:6"),
    (2, 3, "2:3"),
    (2, 5, "2:5"),
    (3, 4, "3:4"),
    (3, 5, "3:5"),
)

# --- Legacy OneDest conversion ---

STATION_SEARCH_RADIUS: float = 300.0
STATION_SNAP_RADIUS: float = 150.0
DEFAULT_JUNCTION_Y: float = 70.0
DEFAULT_WAYPOINT_Y: float = 70.0
# Lines shorter than this are not given a reverse edge.
MIN_REVERSE_EDGE_DISTANCE: float = 10.0

# --- Rendering ---

RENDER_PADDING: float = 40.0
RENDER_MAX_SIZE: float = 1200.0
EDGE_STROKE_WIDTH: float = 4.0
NODE_RADIUS: float = 5.0
JUNCTION_RADIUS: float = 4.0
LABEL_FONT_SIZE: float = 11.0
LABEL_OFFSET: float = 8.0
TITLE_FONT_SIZE: float = 16.0
LEGEND_SWATCH: float = 14.0
