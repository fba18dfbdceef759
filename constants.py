# constants.py

import math

# =============================================================================
# --- SIMULATION & PERFORMANCE SETTINGS ---
# =============================================================================
CLOCK_TICK_RATE = 60
SIMULATION_TICK_RATE = 60.0 # The fixed number of logic updates per second
SIMULATION_TICK_INTERVAL_SECONDS = 1.0 / SIMULATION_TICK_RATE
MAX_FRAME_DELTA_SECONDS = 0.25 # Caps real frame time to avoid a "spiral of death"
MAX_TICKS_PER_FRAME = 5
MILLISECONDS_PER_SECOND = 1000.0
PROFILER_PRINT_LINE_COUNT = 20
TIME_MULTIPLIERS = {
    0: 0.25,
    1: 0.5,
    2: 1.0,
    3: 2.0,
    4: 4.0
}
DEFAULT_TIME_MULTIPLIER_LEVEL = 2
LOG_SHOW_DEBUG = True

# =============================================================================
# --- SCREEN, UI & COLORS ---
# =============================================================================
SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 720
GROUND_MARGIN_PIXELS = 10 # Plants are seeded this far above the bottom edge
UI_FONT_SIZE = 22
UI_TEXT_POS_X = 10
UI_TEXT_POS_Y = 10
UI_TEXT_LINE_HEIGHT = 20
COLOR_WHITE = (255, 255, 255)
COLOR_BACKGROUND = (12, 14, 24)
COLOR_GROUND = (40, 32, 24)
COLOR_DEBUG_SPRING = (100, 200, 255)
COLOR_DEBUG_FIXED = (255, 100, 100)
COLOR_DEBUG_FREE = (255, 255, 100)
COLOR_ATTRACTOR = (0, 255, 255)
COLOR_FRUIT_HIGHLIGHT = (255, 255, 255, 100)
COLOR_ATTRACTOR_FILL = (0, 255, 255, 40)

# Segment thickness tapers from full at depth 0 to 30% at depth 5.
RENDER_DEPTH_TAPER_DEPTHS = (0, 5)
RENDER_DEPTH_TAPER_RANGE = (1.0, 0.3)
RENDER_MIN_LINE_WIDTH = 1
LEAF_SIDE_LENGTH = 8.0
LEAF_TIP_LENGTH = 18.0
LEAF_SIDE_ANGLE = math.pi / 4
FRUIT_HIGHLIGHT_OFFSET = 0.2 # Fraction of fruit size
FRUIT_HIGHLIGHT_SIZE = 0.3
DEBUG_POINT_RADIUS = 2

# =============================================================================
# --- GRAMMAR (L-SYSTEM) ---
# =============================================================================
LSYSTEM_DEFAULT_AXIOM = "F"
LSYSTEM_DEFAULT_RULES = {"F": "FF+[+F]-[-F]"}
LSYSTEM_DEFAULT_ANGLE = math.pi / 7
LSYSTEM_DEFAULT_ITERATIONS = 2
# Productions grow exponentially; more than four rewrites is never worth the physics cost.
LSYSTEM_MAX_ITERATIONS = 4
LSYSTEM_MAX_PRODUCTION_LENGTH = 2000
LSYSTEM_WEIGHT_TOLERANCE = 1e-9

DEFAULT_STEM_COLOR = (80, 120, 40)
DEFAULT_LEAF_COLOR = (100, 220, 50)
DEFAULT_FRUIT_COLOR = (255, 50, 50)
DEFAULT_STEM_THICKNESS = 4.0

# =============================================================================
# --- TURTLE INTERPRETER ---
# =============================================================================
TURTLE_STEP_LENGTH = 10.0
TURTLE_INITIAL_HEADING = -math.pi / 2 # Screen space is y-down, so this points up
TURTLE_INITIAL_THICKNESS = 1.0
TURTLE_TURN_JITTER_MIN = 0.8
TURTLE_TURN_JITTER_MAX = 3.0
TURTLE_ANGLE_SCALE_DOWN = 0.8
TURTLE_ANGLE_SCALE_UP = 1.25
TURTLE_BRANCH_THICKNESS_TAPER = 0.75
TURTLE_THICKEN_FACTOR = 1.2
TURTLE_THIN_FACTOR = 0.8
# Trunk segments starting at or below this plant-local height are anchored.
TURTLE_ROOT_BASELINE_Y = -1.0
FRUIT_SIZE_MIN = 5.0
FRUIT_SIZE_MAX = 12.0
COLOR_SHIFT_HUE_DEGREES = 20.0
COLOR_SHIFT_SATURATION_PERCENT = 15.0
COLOR_SHIFT_BRIGHTNESS_PERCENT = 15.0

# =============================================================================
# --- PHYSICS BACKEND ---
# =============================================================================
PHYSICS_INITIAL_CAPACITY = 256
PHYSICS_GRAVITY = (0.0, -95.0) # pixels/s^2; negative y lifts stems upright
PHYSICS_AIR_FRICTION = 0.02 # Fraction of velocity lost per step
PHYSICS_CONSTRAINT_ITERATIONS = 4
# Converts applied force units into pixels/s^2 per unit of mass.
PHYSICS_FORCE_SCALE = 20000.0
PHYSICS_MIN_SPRING_LENGTH = 1e-6
SPRING_DAMPING = 0.03
SPRING_MAX_STIFFNESS = 1.0

# =============================================================================
# --- PHYSICS GRAPH (PLANT -> MASS-SPRING MAPPING) ---
# =============================================================================
POINT_KEY_DECIMALS = 2 # Endpoints closer than 10^-2 local units share a point mass
DEPTH_MAPPING_RANGE = (0, 10)
JOINT_MASS_RANGE = (2.0, 0.2) # Mass at depth 0 and at depth 10
TIP_MASS_RANGE = (0.5, 0.05)
POINT_MASS_MIN = 0.01
SPRING_STIFFNESS_RANGE = (0.25, 0.05)
SPRING_STIFFNESS_MIN = 0.001
ANGLE_CONSTRAINT_STIFFNESS_RANGE = (0.0025, 0.0005)
DEGENERATE_LENGTH_EPSILON = 1e-6
FRUIT_MASS = 0.3
FRUIT_SPRING_STIFFNESS = 0.025
FRUIT_REST_LENGTH_FACTOR = 1.2
QUADTREE_CAPACITY = 4
QUADTREE_NEAREST_INITIAL_HALF_SIZE = 8.0

# =============================================================================
# --- GROWTH ---
# =============================================================================
PLANT_GROWTH_RATE = 0.03 # Growth fraction gained per tick
PLANT_TARGET_GROWTH = 1.0
GROWTH_START_FRACTION = 0.1 # No segments are added beyond the root until this
ROOT_SEGMENT_COUNT = 3
GROWTH_BATCH_DIVISOR = 50 # Per-tick batch = total segments // divisor (min 1)
ANGLE_CONSTRAINT_TRIGGER_FRACTION = 0.8
SEGMENT_FADE_FRACTION = 0.1 # Newest slice of the revealed window that fades in
FRUIT_REVEAL_GROWTH = 0.7
LEAF_REVEAL_GROWTH = 0.8
LEAF_MIN_DEPTH = 2
PLANT_SCALE_FACTOR_RANGE = (0.6, 1.8)
PLANT_STEM_THICKNESS_RANGE = (3.0, 5.0) # Used for randomly chosen presets
PLANT_ID_MIN = 1000
PLANT_ID_MAX = 9999

GROWTH_STAGE_SEEDED = "seeded"
GROWTH_STAGE_ROOT_PLACED = "root_placed"
GROWTH_STAGE_GROWING = "growing"
GROWTH_STAGE_CONSTRAINTS_APPLIED = "constraints_applied"
GROWTH_STAGE_FRUITS_APPLIED = "fruits_applied"
GROWTH_STAGE_STEADY = "steady"

# =============================================================================
# --- GARDEN ---
# =============================================================================
GARDEN_MAX_PLANTS = 18
GARDEN_MIN_SECONDS_BETWEEN_PLANTS = 0.6
GARDEN_DEFAULT_THEME = "mixed"
GARDEN_MAX_SCHEDULED_PLANTS = 4
GARDEN_SCHEDULE_INTERVAL_SECONDS = 0.8
GARDEN_PLANTING_MIN_X_FRACTION = 0.1
GARDEN_PLANTING_MAX_X_FRACTION = 0.9

# =============================================================================
# --- EXTERNAL FORCES ---
# =============================================================================
ATTRACTOR_STRENGTH = 0.2
ATTRACTOR_RADIUS = 60.0
ATTRACTOR_MAX_FORCE = 0.1
ATTRACTOR_STRENGTH_LIMITS = (0.0001, 0.5)
ATTRACTOR_RADIUS_LIMITS = (10.0, 200.0)
FORCE_DEGENERATE_DIRECTION = (0.0, -1.0) # Used when a point sits exactly on a source

WIND_MAX_FORCE = 0.00025
WIND_EASING = 0.01
WIND_RETARGET_PROBABILITY = 0.5
WIND_HEIGHT_FACTOR_RANGE = (0.5, 2.0) # At the ground line and at the top of the world
WIND_MASS_RANGE = (0.1, 2.0)
WIND_MASS_FACTOR_RANGE = (1.5, 0.5)
WIND_RIPPLE_FREQUENCY = 0.01
WIND_RIPPLE_AMPLITUDE = 0.2
