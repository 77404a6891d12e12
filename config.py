"""Configuration constants for the rescue swarm simulation."""

# Region dimensions (world units)
REGION_WIDTH = 1000.0  # X-axis
REGION_HEIGHT = 700.0  # Y-axis

# Scenario counts
NUM_DRONES = 20
NUM_DRONES_FALLBACK = 10  # used when a config asks for no drones at all
NUM_SURVIVORS = 5
NUM_TRACES = 8

# Drone configuration
DRONE_SPEED = 50.0  # world units per second
DETECTION_RADIUS = 40.0
DRONE_AUTONOMY = 20.0  # seconds of flight for homogeneous drones
TYPED_DRONE_AUTONOMY = 10.0  # fallback autonomy for typed drones
DRONE_WEIGHT = 1.0

# Survivors and clues
SURVIVOR_RADIUS = 6.0
CLUE_PLACEMENT_MARGIN = 3.0  # extra gap keeping the survivor inside its clue

# Trainable parameters
HELP_RADIUS = 150.0          # rayonAide
MAX_HELPERS_PER_HIT = 3      # MaxHelpersPerHit
CLUE_SIZE_FACTOR = 1.5       # tailleIndice
EXPLORATION_RATE = 0.02      # tauxExploration
ENGAGEMENT_TIMEOUT = 8.0     # dureeEngagement (seconds)

# Controller
AUTONOMY_SAFETY_MARGIN = 1.1   # return when autonomy <= margin * time to charger
RESPOND_ARRIVAL_FACTOR = 0.8   # fraction of clue zone radius counted as arrival
CHARGER_REACHED_DISTANCE = 5.0
EXPLORATION_HEADINGS = 8       # candidate headings, 45 degrees apart
EXPLORATION_LOOKAHEAD = 30.0   # distance at which the heatmap is sampled
EXPLORATION_JITTER = 0.1       # random tie-break added to each heading score

# Heatmap
HEATMAP_CELL_SIZE = 20.0

# Simulation
SIMULATION_TIMESTEP = 0.1  # seconds per simulation tick
RUN_INTERVAL = 0.05        # wall-clock seconds between background steps
MAX_HEADLESS_STEPS = 20000

# Offline training
TRAIN_CANDIDATES = 80
TRAIN_RUNS_PER_CANDIDATE = 5
TRAIN_MAX_STEPS = 20000
FAILED_RUN_SCORE = -1e9
SAVED_SURVIVOR_REWARD = 1000.0

# Files
CONFIG_PATH = "config.json"
POLICY_PATH = "best_policy.json"
