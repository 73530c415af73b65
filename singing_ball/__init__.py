# ── Central defaults (tune here, not scattered across files) ──

# Canvas
WIDTH = 1080
HEIGHT = 1920
ARENA_MARGIN = 125        # circle radius = min(w, h) / 2 - ARENA_MARGIN
BALL_MARGIN = 10          # max ball radius = circle radius - BALL_MARGIN

# Ball
INITIAL_BALL_RADIUS = 5
START_HEIGHT_DIVISOR = 2.7
START_VELOCITY = (0.8, 0.8)
BASE_MASS = 1.0

# Tunables (panel-facing values)
GRAVITY = 0.4
VELOCITY_INCREASE = 0.02
SECONDARY_INCREASE_OFFSET = 0.01
VELOCITY_DECAY = 0.998
BALL_GROWTH = 0.015

# Rendering
MOTION_BLUR_STEPS = 5
COLOR_PHASE_SPEED = 0.05
MAX_COLLISION_POINTS = None   # None keeps every trace line
FPS = 60

# Panel ranges: (min, max, step)
GRAVITY_RANGE = (0.0, 1.0, 0.1)
VELOCITY_INCREASE_RANGE = (0.0, 0.1, 0.01)
VELOCITY_DECAY_RANGE = (0.99, 1.0, 0.001)
BALL_GROWTH_RANGE = (0.0, 0.2, 0.001)
