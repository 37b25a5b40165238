# src/flappy/config.py
# --- Display ---
WIDTH = 400
HEIGHT = 600
FPS = 60

# --- World ---
GROUND_MARGIN = 120          # ground band height at the bottom of the world
FLOOR_Y = HEIGHT - GROUND_MARGIN

# --- Actor ---
ACTOR_X = 80                 # actor's fixed x (world scrolls left)
ACTOR_START_Y = 300.0
ACTOR_SIZE = 30              # side of the square collision box
START_IMPULSE = -6.0         # small upward kick when a session starts

# --- Obstacles ---
OBSTACLE_WIDTH = 60
SPAWN_INTERVAL = 220         # horizontal spacing between spawns (px)
MIN_TOP_HEIGHT = 50          # smallest top barrier / bottom barrier height
SEED_DEFAULT = None          # None -> random layout every launch

# --- Tunable defaults (per tick units) ---
GAP_SIZE = 150.0             # px
OBSTACLE_SPEED = 2.0         # px / tick
GRAVITY = 0.5                # px / tick^2
JUMP_IMPULSE = -9.0          # px / tick
OBSTACLE_KIND = "pipe"

# --- Settings panel ranges (min, max) and slider steps ---
GAP_RANGE = (100.0, 250.0)
SPEED_RANGE = (1.0, 6.0)
GRAVITY_RANGE = (0.1, 1.5)
JUMP_RANGE = (-20.0, -4.0)
GAP_STEP = 10.0
SPEED_STEP = 0.5
GRAVITY_STEP = 0.1
JUMP_STEP = 1.0

# --- Persistence ---
SETTINGS_KEY = "flappySettings"
BEST_SCORE_KEY = "flappyBestScore"
SETTINGS_FILE_DEFAULT = "~/.flappy_core.json"

# --- Gym env ---
SIM_FPS = 60
FRAME_SKIP_DEFAULT = 2
TIME_LIMIT_S = 60.0

# --- Colors (RGB) ---
COLOR_SKY = (112, 197, 206)
COLOR_GROUND = (222, 216, 149)
COLOR_GRASS = (94, 201, 72)
COLOR_FG = (255, 255, 255)
COLOR_SHADOW = (40, 40, 40)
COLOR_ACTOR = (255, 213, 0)
COLOR_DANGER = (255, 86, 110)
COLOR_PANEL = (30, 40, 60)
COLOR_PANEL_EDGE = (90, 130, 180)
COLOR_BUTTON = (240, 120, 40)
OBSTACLE_COLORS = {
    "pipe": (83, 171, 58),
    "pillar": (150, 140, 125),
    "laser": (255, 60, 90),
}
