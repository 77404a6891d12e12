"""Scenario configuration for the rescue swarm.

A SimConfig describes one run: world size, population counts, drone
specifications and the five trainable behavior parameters. Configs coming
from outside are never rejected; `sanitized()` replaces every non-positive,
non-finite or missing field with its documented default.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional
import json
import math

import config
from entities import ChargingPoint
from zone import Region, default_charging_points


def _number(data: dict, key: str, default: float) -> float:
    """Read a numeric field, falling back to `default` if missing, malformed or not finite."""
    value = data.get(key, default)
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return value


def _integer(data: dict, key: str, default: int) -> int:
    return int(_number(data, key, default))


def _positive(value) -> bool:
    """True for a finite number above zero; NaN and infinities are rejected."""
    return math.isfinite(value) and value > 0


@dataclass
class DroneType:
    """A family of identical drones in a heterogeneous fleet."""
    name: str = ""
    count: int = 0
    speed: float = 0.0
    weight: float = 0.0
    autonomy: float = 0.0  # total flight time in seconds
    detection_radius: float = 0.0

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'count': self.count,
            'speed': self.speed,
            'weight': self.weight,
            'autonomy': self.autonomy,
            'detectionRadius': self.detection_radius,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DroneType':
        return cls(
            name=str(data.get('name', '')),
            count=_integer(data, 'count', 0),
            speed=_number(data, 'speed', 0.0),
            weight=_number(data, 'weight', 0.0),
            autonomy=_number(data, 'autonomy', 0.0),
            detection_radius=_number(data, 'detectionRadius', 0.0),
        )


@dataclass
class SimConfig:
    """
    Configuration of a single simulation run.

    The trainable parameters keep the names used by the tuning tools in
    their serialized form: rayonAide (help_radius), maxHelpersPerHit,
    tailleIndice (clue_size_factor), tauxExploration (exploration_rate)
    and dureeEngagement (engagement_timeout).
    """
    width: float = config.REGION_WIDTH
    height: float = config.REGION_HEIGHT
    num_drones: int = config.NUM_DRONES
    num_survivors: int = config.NUM_SURVIVORS
    num_traces: int = config.NUM_TRACES
    drone_speed: float = config.DRONE_SPEED
    detection_radius: float = config.DETECTION_RADIUS
    time_step: float = config.SIMULATION_TIMESTEP
    drone_types: List[DroneType] = field(default_factory=list)
    charging_points: List[ChargingPoint] = field(default_factory=list)
    base_x: float = -1.0  # non-positive base means "world center"
    base_y: float = -1.0

    # Trainable parameters
    help_radius: float = config.HELP_RADIUS
    max_helpers_per_hit: int = config.MAX_HELPERS_PER_HIT
    clue_size_factor: float = config.CLUE_SIZE_FACTOR
    exploration_rate: float = config.EXPLORATION_RATE
    engagement_timeout: float = config.ENGAGEMENT_TIMEOUT

    # Recruit the nearest candidates instead of the first ones found
    recruit_nearest_first: bool = False

    @property
    def region(self) -> Region:
        return Region(width=self.width, height=self.height)

    @property
    def clue_zone_radius(self) -> float:
        """Radius of the local search zone drawn around a clue."""
        radius = self.detection_radius * self.clue_size_factor
        if radius <= 0:
            radius = self.detection_radius if self.detection_radius > 0 else 80.0
        return radius

    def sanitized(self) -> 'SimConfig':
        """
        Return a copy with every non-positive or non-finite field replaced by its default.

        Never raises. Drone types keep their values, except that non-finite
        ones are zeroed so the fleet builder falls back to its defaults.
        Charging points with non-finite coordinates are dropped.
        """
        cfg = replace(
            self,
            drone_types=[DroneType(
                name=dt.name,
                count=int(dt.count) if _positive(dt.count) else 0,
                speed=dt.speed if math.isfinite(dt.speed) else 0.0,
                weight=dt.weight if math.isfinite(dt.weight) else 0.0,
                autonomy=dt.autonomy if math.isfinite(dt.autonomy) else 0.0,
                detection_radius=dt.detection_radius if math.isfinite(dt.detection_radius) else 0.0,
            ) for dt in self.drone_types],
            charging_points=[cp for cp in self.charging_points
                             if math.isfinite(cp.x) and math.isfinite(cp.y)],
        )

        if not (_positive(cfg.width) and _positive(cfg.height)):
            cfg.width, cfg.height = config.REGION_WIDTH, config.REGION_HEIGHT
        if _positive(cfg.num_drones):
            cfg.num_drones = int(cfg.num_drones)
        elif cfg.drone_types:
            cfg.num_drones = 0
        else:
            cfg.num_drones = config.NUM_DRONES_FALLBACK
        cfg.num_survivors = int(cfg.num_survivors) if _positive(cfg.num_survivors) else 0
        cfg.num_traces = int(cfg.num_traces) if _positive(cfg.num_traces) else 0
        if not _positive(cfg.drone_speed):
            cfg.drone_speed = config.DRONE_SPEED
        if not _positive(cfg.detection_radius):
            cfg.detection_radius = config.DETECTION_RADIUS
        if not _positive(cfg.help_radius):
            cfg.help_radius = config.HELP_RADIUS
        if _positive(cfg.max_helpers_per_hit):
            cfg.max_helpers_per_hit = int(cfg.max_helpers_per_hit)
        else:
            cfg.max_helpers_per_hit = config.MAX_HELPERS_PER_HIT
        if not _positive(cfg.time_step):
            cfg.time_step = config.SIMULATION_TIMESTEP
        if not _positive(cfg.clue_size_factor):
            cfg.clue_size_factor = config.CLUE_SIZE_FACTOR
        if not _positive(cfg.exploration_rate):
            cfg.exploration_rate = config.EXPLORATION_RATE
        if not _positive(cfg.engagement_timeout):
            cfg.engagement_timeout = config.ENGAGEMENT_TIMEOUT
        if not cfg.charging_points:
            cfg.charging_points = default_charging_points(cfg.region)
        if not (math.isfinite(cfg.base_x) and math.isfinite(cfg.base_y)):
            cfg.base_x, cfg.base_y = -1.0, -1.0
        if cfg.base_x <= 0 and cfg.base_y <= 0:
            cfg.base_x, cfg.base_y = cfg.region.center

        return cfg

    def to_dict(self) -> dict:
        return {
            'width': self.width,
            'height': self.height,
            'numDrones': self.num_drones,
            'numSurvivors': self.num_survivors,
            'numTraces': self.num_traces,
            'droneSpeed': self.drone_speed,
            'detectionRadius': self.detection_radius,
            'rayonAide': self.help_radius,
            'maxHelpersPerHit': self.max_helpers_per_hit,
            'timeStep': self.time_step,
            'droneTypes': [dt.to_dict() for dt in self.drone_types],
            'chargingPoints': [cp.to_dict() for cp in self.charging_points],
            'baseX': self.base_x,
            'baseY': self.base_y,
            'tailleIndice': self.clue_size_factor,
            'tauxExploration': self.exploration_rate,
            'dureeEngagement': self.engagement_timeout,
            'recruitNearestFirst': self.recruit_nearest_first,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SimConfig':
        """Build a config from a plain record; unknown keys are ignored."""
        defaults = cls()
        drone_types = data.get('droneTypes')
        if not isinstance(drone_types, list):
            drone_types = []
        charging_points = data.get('chargingPoints')
        if not isinstance(charging_points, list):
            charging_points = []
        return cls(
            width=_number(data, 'width', defaults.width),
            height=_number(data, 'height', defaults.height),
            num_drones=_integer(data, 'numDrones', defaults.num_drones),
            num_survivors=_integer(data, 'numSurvivors', defaults.num_survivors),
            num_traces=_integer(data, 'numTraces', defaults.num_traces),
            drone_speed=_number(data, 'droneSpeed', defaults.drone_speed),
            detection_radius=_number(data, 'detectionRadius', defaults.detection_radius),
            time_step=_number(data, 'timeStep', defaults.time_step),
            drone_types=[DroneType.from_dict(dt) for dt in drone_types if isinstance(dt, dict)],
            charging_points=[ChargingPoint(id=_integer(cp, 'id', i), x=_number(cp, 'x', 0.0),
                                           y=_number(cp, 'y', 0.0))
                             for i, cp in enumerate(charging_points) if isinstance(cp, dict)],
            base_x=_number(data, 'baseX', defaults.base_x),
            base_y=_number(data, 'baseY', defaults.base_y),
            help_radius=_number(data, 'rayonAide', defaults.help_radius),
            max_helpers_per_hit=_integer(data, 'maxHelpersPerHit', defaults.max_helpers_per_hit),
            clue_size_factor=_number(data, 'tailleIndice', defaults.clue_size_factor),
            exploration_rate=_number(data, 'tauxExploration', defaults.exploration_rate),
            engagement_timeout=_number(data, 'dureeEngagement', defaults.engagement_timeout),
            recruit_nearest_first=bool(data.get('recruitNearestFirst', False)),
        )


def default_config() -> SimConfig:
    """The stock scenario used when no config file is available."""
    return SimConfig()


@dataclass
class LearnedPolicy:
    """The five trainable parameters, as tuned by the offline trainer."""
    help_radius: float = config.HELP_RADIUS
    max_helpers_per_hit: int = config.MAX_HELPERS_PER_HIT
    clue_size_factor: float = config.CLUE_SIZE_FACTOR
    exploration_rate: float = config.EXPLORATION_RATE
    engagement_timeout: float = config.ENGAGEMENT_TIMEOUT

    def apply(self, cfg: SimConfig) -> SimConfig:
        """Return a copy of `cfg` using these parameters."""
        return replace(
            cfg,
            help_radius=self.help_radius,
            max_helpers_per_hit=self.max_helpers_per_hit,
            clue_size_factor=self.clue_size_factor,
            exploration_rate=self.exploration_rate,
            engagement_timeout=self.engagement_timeout,
        )

    def describe(self) -> str:
        return (f"rayonAide={self.help_radius:.1f}, maxHelpers={self.max_helpers_per_hit}, "
                f"traceFactor={self.clue_size_factor:.2f}, exploreRate={self.exploration_rate:.3f}, "
                f"timeout={self.engagement_timeout:.1f}s")

    def to_dict(self) -> dict:
        return {
            'rayonAide': self.help_radius,
            'maxHelpersPerHit': self.max_helpers_per_hit,
            'tailleIndice': self.clue_size_factor,
            'tauxExploration': self.exploration_rate,
            'dureeEngagement': self.engagement_timeout,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'LearnedPolicy':
        defaults = cls()
        return cls(
            help_radius=_number(data, 'rayonAide', defaults.help_radius),
            max_helpers_per_hit=_integer(data, 'maxHelpersPerHit', defaults.max_helpers_per_hit),
            clue_size_factor=_number(data, 'tailleIndice', defaults.clue_size_factor),
            exploration_rate=_number(data, 'tauxExploration', defaults.exploration_rate),
            engagement_timeout=_number(data, 'dureeEngagement', defaults.engagement_timeout),
        )


def load_config(path: str = config.CONFIG_PATH) -> SimConfig:
    """
    Load a scenario from a JSON file.

    A missing or unreadable file is reported and the default scenario is
    returned instead.
    """
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        print("[Config] No config file found, using defaults.")
        return default_config()
    except (OSError, ValueError) as e:
        print(f"[Config] Config file invalid, using defaults: {e}")
        return default_config()

    if not isinstance(data, dict):
        print("[Config] Config file invalid, using defaults: expected an object")
        return default_config()
    return SimConfig.from_dict(data)


def load_best_policy(path: str = config.POLICY_PATH) -> Optional[LearnedPolicy]:
    """Load a learned policy, or None if there is no usable file."""
    try:
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        print(f"[Config] {path} invalid, ignored: {e}")
        return None

    if not isinstance(data, dict):
        print(f"[Config] {path} invalid, ignored: expected an object")
        return None
    return LearnedPolicy.from_dict(data)


def save_best_policy(path: str, policy: LearnedPolicy) -> None:
    """Write a learned policy as indented JSON."""
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(policy.to_dict(), f, indent=2)
        f.write('\n')
