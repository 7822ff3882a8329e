"""
Configuration and target layout loading for the cannon simulation.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union
import json
import logging
import math
import yaml
from .engine import GRAVITY, HIT_MARGIN, MAX_VELOCITY, MIN_VELOCITY, PhysicsEngine
from .game import GameLogic, TargetLayoutError, make_target
from .primitives import DEFAULT_TRAIL_CAPACITY, CannonState, Target, Vector2D
from .state import GameState

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT_PATH = Path(__file__).parent / 'data' / 'targets.json'
DEFAULT_CANVAS_SIZE = (1200, 600)
DEFAULT_FRAME_RATE = 60


class GameSetup(NamedTuple):
    """Everything a host needs to start a game."""

    logic: GameLogic
    state: GameState
    width: float
    height: float
    frame_rate: int


def _section(config: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = config.get(key, {})
    if not isinstance(section, dict):
        raise ValueError(f"Config section '{key}' must be a mapping")
    return section


def _number(section: Dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    if isinstance(value, bool):
        raise ValueError(f"Config value '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Config value '{key}' must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Config value '{key}' must be finite, got {value!r}")
    return number


class ConfigLoader:
    """Load target layouts and simulation configuration from JSON/YAML files."""

    @staticmethod
    def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from file.

        Args:
            config_path: Path to configuration file (.json, .yaml or .yml)

        Returns:
            Parsed document

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If file format is unsupported or cannot be parsed
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        ext = path.suffix.lower()
        with path.open('r', encoding='utf-8') as f:
            try:
                if ext == '.json':
                    config = json.load(f)
                elif ext in ('.yaml', '.yml'):
                    config = yaml.safe_load(f)
                else:
                    raise ValueError(f"Unsupported config format: {ext}")
            except (json.JSONDecodeError, yaml.YAMLError) as exc:
                raise ValueError(f"Could not parse {path}: {exc}") from exc

        logger.info(f"Loaded configuration from {path}")
        return config

    @staticmethod
    def parse_targets(document: Any) -> List[Target]:
        """
        Validate a target layout document.

        Args:
            document: A list of target records, or a mapping with a
                ``targets`` list

        Returns:
            Targets in layout order, all unhit

        Raises:
            TargetLayoutError: If the layout is empty or malformed
        """
        if isinstance(document, dict):
            if 'targets' not in document:
                raise TargetLayoutError("Target layout has no 'targets' list")
            document = document['targets']
        if not isinstance(document, list):
            raise TargetLayoutError("Target layout must be a list of target records")
        if not document:
            raise TargetLayoutError("Target layout is empty")

        targets = [make_target(record) for record in document]
        seen = set()
        for target in targets:
            if target.id in seen:
                raise TargetLayoutError(f"Duplicate target id: {target.id!r}")
            seen.add(target.id)
        return targets

    @staticmethod
    def load_target_layout(layout_path: Union[str, Path]) -> List[Target]:
        """
        Load and validate a target layout file.

        Raises:
            TargetLayoutError: If the file is missing, unreadable or malformed
        """
        try:
            document = ConfigLoader.load_config(layout_path)
        except (OSError, ValueError) as exc:
            raise TargetLayoutError(f"Cannot load target layout: {exc}") from exc

        targets = ConfigLoader.parse_targets(document)
        logger.info(f"Loaded {len(targets)} targets from {layout_path}")
        return targets

    @staticmethod
    def default_target_layout() -> List[Target]:
        """The layout shipped with the package."""
        return ConfigLoader.load_target_layout(DEFAULT_LAYOUT_PATH)

    @staticmethod
    def create_game_from_config(config: Optional[Dict[str, Any]] = None,
                                base_dir: Optional[Union[str, Path]] = None) -> GameSetup:
        """
        Create game logic and the initial state from configuration.

        Args:
            config: Configuration dictionary; missing sections use defaults
            base_dir: Directory that relative ``targets_file`` paths resolve
                against, defaults to the working directory

        Returns:
            GameSetup with logic, initial state, canvas size and frame rate

        Raises:
            TargetLayoutError: If the target layout is missing or malformed
            ValueError: If canvas or physics settings are out of range
        """
        config = config or {}
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        canvas_config = _section(config, 'canvas')
        width = _number(canvas_config, 'width', DEFAULT_CANVAS_SIZE[0])
        height = _number(canvas_config, 'height', DEFAULT_CANVAS_SIZE[1])
        if width <= 0 or height <= 0:
            raise ValueError("Canvas dimensions must be positive")

        frame_rate = int(_number(config, 'frame_rate', DEFAULT_FRAME_RATE))
        if frame_rate <= 0:
            raise ValueError("Frame rate must be positive")

        physics_config = _section(config, 'physics')
        physics = PhysicsEngine(
            gravity=_number(physics_config, 'gravity', GRAVITY),
            min_velocity=_number(physics_config, 'min_velocity', MIN_VELOCITY),
            max_velocity=_number(physics_config, 'max_velocity', MAX_VELOCITY),
            max_trail_length=int(_number(physics_config, 'trail_length', DEFAULT_TRAIL_CAPACITY)),
            hit_margin=_number(physics_config, 'hit_margin', HIT_MARGIN),
        )

        cannon_config = _section(config, 'cannon')
        cannon = CannonState()
        if 'position' in cannon_config:
            position = cannon_config['position']
            if not isinstance(position, (list, tuple)) or len(position) != 2:
                raise ValueError("Cannon position must be an [x, y] pair")
            point = dict(zip('xy', position))
            cannon = replace(cannon, position=Vector2D(_number(point, 'x', 0.0),
                                                       _number(point, 'y', 0.0)))
        if 'length' in cannon_config:
            cannon = replace(cannon, length=_number(cannon_config, 'length', cannon.length))

        if 'targets' in config:
            targets = ConfigLoader.parse_targets(config['targets'])
        elif 'targets_file' in config:
            if not isinstance(config['targets_file'], str):
                raise ValueError("Config value 'targets_file' must be a path string")
            layout_path = Path(config['targets_file'])
            if base_dir is not None and not layout_path.is_absolute():
                layout_path = Path(base_dir) / layout_path
            targets = ConfigLoader.load_target_layout(layout_path)
        else:
            targets = ConfigLoader.default_target_layout()

        logic = GameLogic(physics=physics, cannon=cannon)
        state = logic.initialize_game(targets)
        logger.info(f"Created game with {len(targets)} targets on a {width:g}x{height:g} canvas")
        return GameSetup(logic, state, width, height, frame_rate)
