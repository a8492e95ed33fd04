import argparse
import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidArgument

# --- 1. SETTINGS ---
PARTICLE_COUNT = 15000
GALAXY_RADIUS = 50.0
ORBIT_SEGMENTS = 64
SPIN_RATE = 0.005
REFERENCE_FPS = 60.0
SPHERE_STACKS = 32
SPHERE_SLICES = 32
SPRITE_SIZE = 32
POINT_SCALE = 0.1

WINDOW_WIDTH, WINDOW_HEIGHT = 1280, 720
CAMERA_FOV = 75.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 1000.0
CAMERA_DISTANCE = 20.0
DAMPING_FACTOR = 0.05
MOUSE_SENSITIVITY = 0.005
ZOOM_SPEED = 0.1
PAN_SPEED = 0.002

ORBIT_LINE_COLOR = (1.0, 1.0, 1.0)
ORBIT_LINE_OPACITY = 0.3
ASSETS_DIR = "assets"


class RotationMode(enum.Enum):
    """How the self-rotation accumulator grows between frames.

    LEGACY adds a fixed increment per ``advance`` call, so the visible spin
    follows the display refresh rate. SCALED multiplies the increment by the
    measured frame time (normalised to ``REFERENCE_FPS``), which gives the
    same spin on any display.
    """

    LEGACY = "legacy"
    SCALED = "scaled"


@dataclass(frozen=True)
class GalaxyStyle:
    """Sampling ranges for the particle galaxy. Hues and lightness are in [0, 1]."""

    radius: float = GALAXY_RADIUS
    hue: float = 0.5
    hue_span: float = 0.2
    saturation: float = 0.7
    lightness_min: float = 0.4
    lightness_span: float = 0.6
    size_min: float = 0.5
    size_span: float = 2.0

    @property
    def hue_band(self) -> Tuple[float, float]:
        return self.hue, self.hue + self.hue_span

    def validate(self) -> None:
        if not self.radius > 0:
            raise InvalidArgument(f"galaxy radius must be positive, got {self.radius}")
        if not (0.0 <= self.hue and self.hue + self.hue_span <= 1.0 and self.hue_span >= 0):
            raise InvalidArgument(f"hue band {self.hue_band} must lie inside [0, 1]")
        if not 0.0 <= self.saturation <= 1.0:
            raise InvalidArgument(f"saturation must be in [0, 1], got {self.saturation}")
        if not (0.0 <= self.lightness_min and self.lightness_span >= 0
                and self.lightness_min + self.lightness_span <= 1.0):
            raise InvalidArgument("lightness range must lie inside [0, 1]")
        if not (self.size_min > 0 and self.size_span >= 0):
            raise InvalidArgument("point sizes must be positive")


DEFAULT_GALAXY = GalaxyStyle()


@dataclass(frozen=True)
class PlanetSpec:
    name: str
    radius: float
    orbit_radius: float
    angular_speed: float
    color: Tuple[float, float, float] = (0.7, 0.7, 0.7)

    @property
    def texture(self) -> str:
        return self.name.lower()


# Sizes and distances are not to scale.
SOLAR_SYSTEM: Tuple[PlanetSpec, ...] = (
    PlanetSpec("Sun", 1.0, 0.0, 0.0, (1.0, 0.8, 0.0)),
    PlanetSpec("Mercury", 0.1, 2.0, 0.5, (0.7, 0.7, 0.7)),
    PlanetSpec("Venus", 0.15, 3.0, 0.4, (0.9, 0.8, 0.5)),
    PlanetSpec("Earth", 0.2, 4.0, 0.3, (0.2, 0.5, 1.0)),
    PlanetSpec("Mars", 0.15, 5.0, 0.25, (1.0, 0.3, 0.2)),
    PlanetSpec("Jupiter", 0.5, 7.0, 0.2, (0.8, 0.7, 0.5)),
    PlanetSpec("Saturn", 0.45, 9.0, 0.15, (0.9, 0.8, 0.6)),
    PlanetSpec("Uranus", 0.3, 11.0, 0.1, (0.5, 0.8, 0.9)),
    PlanetSpec("Neptune", 0.3, 13.0, 0.08, (0.3, 0.3, 0.8)),
)


@dataclass
class AppConfig:
    particles: int = PARTICLE_COUNT
    seed: Optional[int] = None
    rotation_mode: RotationMode = RotationMode.LEGACY
    assets: str = ASSETS_DIR
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    log_level: int = logging.INFO
    log_file: Optional[str] = None
    galaxy: GalaxyStyle = DEFAULT_GALAXY
    planets: List[PlanetSpec] = field(default_factory=lambda: list(SOLAR_SYSTEM))


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return value


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="galaxy-orrery",
        description="Animated particle galaxy with orbiting planets.",
    )
    parser.add_argument("--particles", type=_positive_int, default=PARTICLE_COUNT,
                        help="number of galaxy points (default: %(default)s)")
    parser.add_argument("--seed", type=_non_negative_int, default=None,
                        help="seed for the galaxy generator; random when omitted")
    parser.add_argument("--rotation-mode", choices=[m.value for m in RotationMode],
                        default=RotationMode.LEGACY.value,
                        help="legacy spins a fixed step per frame, scaled spins per second")
    parser.add_argument("--assets", default=ASSETS_DIR,
                        help="directory holding planet textures (default: %(default)s)")
    parser.add_argument("--width", type=_positive_int, default=WINDOW_WIDTH)
    parser.add_argument("--height", type=_positive_int, default=WINDOW_HEIGHT)
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> AppConfig:
    args = build_parser().parse_args(argv)
    return AppConfig(
        particles=args.particles,
        seed=args.seed,
        rotation_mode=RotationMode(args.rotation_mode),
        assets=args.assets,
        width=args.width,
        height=args.height,
        log_level=getattr(logging, args.log_level),
        log_file=args.log_file,
    )
