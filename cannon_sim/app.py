"""
Interactive host loop: wires matplotlib input events and an animation timer
to the game logic.
"""

from typing import Any, Callable, List, Optional, Tuple
import logging
import time
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from .io import GameSetup
from .state import GameState
from .visualization import CanvasRenderer

logger = logging.getLogger(__name__)

MAX_FRAME_DELTA_MS = 100.0
RESET_KEYS = ('r', 'R')


class SimulationApp:
    """Owns the current snapshot and advances it once per frame."""

    def __init__(self, setup: GameSetup, renderer: Optional[CanvasRenderer] = None,
                 clock: Callable[[], float] = time.perf_counter,
                 max_frame_delta: float = MAX_FRAME_DELTA_MS):
        """
        Initialize the app.

        Args:
            setup: Game logic, initial state and canvas settings
            renderer: Renderer to draw on; created from the canvas size when
                omitted
            clock: Monotonic clock in seconds
            max_frame_delta: Largest frame delta in milliseconds passed to the
                game logic

        Raises:
            RenderSurfaceError: If the renderer cannot be created
        """
        if max_frame_delta <= 0:
            raise ValueError("Maximum frame delta must be positive")

        self.logic = setup.logic
        self.state: GameState = setup.state
        self.width = setup.width
        self.height = setup.height
        self.frame_rate = setup.frame_rate
        self.renderer = renderer or CanvasRenderer(self.width, self.height)
        self.clock = clock
        self.max_frame_delta = float(max_frame_delta)
        self.pointer: Tuple[float, float] = (0.0, 0.0)
        self.animation = None
        self._last_time: Optional[float] = None
        self._connections: List[int] = []

        self._connect_events()
        logger.info(f"Simulation ready at {self.frame_rate} fps")

    def _connect_events(self) -> None:
        canvas = self.renderer.fig.canvas
        self._connections = [
            canvas.mpl_connect('motion_notify_event', self.on_pointer_move),
            canvas.mpl_connect('button_press_event', self.on_pointer_press),
            canvas.mpl_connect('button_release_event', self.on_pointer_release),
            canvas.mpl_connect('key_press_event', self.on_key_press),
        ]

    def _in_play_area(self, event: Any) -> bool:
        return (event.inaxes is self.renderer.ax
                and event.xdata is not None and event.ydata is not None)

    def on_pointer_move(self, event: Any) -> None:
        if not self._in_play_area(event):
            return
        self.pointer = (float(event.xdata), float(event.ydata))
        self.state = self.logic.update_cannon_angle(self.state, *self.pointer)

    def on_pointer_press(self, event: Any) -> None:
        if not self._in_play_area(event):
            return
        self.state = self.logic.start_charging(self.state)

    def on_pointer_release(self, event: Any) -> None:
        self.state = self.logic.fire_projectile(self.state)

    def on_key_press(self, event: Any) -> None:
        if event.key in RESET_KEYS:
            self.reset()

    def reset(self) -> None:
        self.state = self.logic.reset_game(self.state)

    def tick(self, delta_time: float) -> GameState:
        """
        Advance the game by one frame: charge first, then physics.

        Args:
            delta_time: Elapsed time in milliseconds

        Returns:
            The new current state
        """
        if delta_time > self.max_frame_delta:
            logger.warning(f"Frame delta {delta_time:.1f} ms clamped to {self.max_frame_delta:.1f} ms")
            delta_time = self.max_frame_delta
        delta_time = max(0.0, delta_time)

        state = self.logic.update_charge(self.state, delta_time)
        state = self.logic.update(state, delta_time, self.width, self.height)
        self.state = state
        return state

    def update_frame(self, frame_num: int = 0) -> List[Any]:
        """Animation callback: measure elapsed time, tick and redraw."""
        now = self.clock()
        delta_time = 0.0 if self._last_time is None else (now - self._last_time) * 1000.0
        self._last_time = now

        self.tick(delta_time)
        return self.renderer.draw(self.state, self.pointer)

    def run(self) -> None:
        """Start the animation loop and block until the window closes."""
        self._last_time = None
        self.animation = animation.FuncAnimation(
            self.renderer.fig, self.update_frame, interval=1000 / self.frame_rate,
            blit=False, cache_frame_data=False
        )
        plt.show()

    def close(self) -> None:
        """Stop the loop and release the figure."""
        if self.animation:
            self.animation.event_source.stop()
        canvas = self.renderer.fig.canvas
        for cid in self._connections:
            canvas.mpl_disconnect(cid)
        self._connections = []
        self.renderer.close()
