"""Live matplotlib view of a running rescue swarm simulation."""

from typing import List, Optional
import threading

import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.animation import FuncAnimation
import numpy as np

import config
from entities import DroneMode
from environment import Environment
from simulation import Simulation


class LiveView:
    """
    Draws snapshots of a simulation stepped by a background thread.

    The view never touches the live environment: every frame reads a
    fresh snapshot. Keys: space toggles running, 'r' resets, 'q' quits.
    """

    MODE_COLORS = {
        DroneMode.SEARCHING: '#377eb8',
        DroneMode.RESPONDING: '#ff7f00',
        DroneMode.HOVERING: '#984ea3',
        DroneMode.RETURNING: '#e41a1c',
    }

    def __init__(self, sim: Simulation, interval: float = config.RUN_INTERVAL):
        """
        Args:
            sim: The simulation to display
            interval: Seconds between background steps and between frames
        """
        self.sim = sim
        self.interval = interval

        self.fig = None
        self.ax = None
        self.ax_dashboard = None
        self.heat_image = None
        self.drone_markers = None
        self.survivor_markers = None
        self.charger_markers = None
        self.clue_artists: List[patches.Circle] = []
        self.dashboard_text = None
        self.animation: Optional[FuncAnimation] = None

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def setup_plot(self) -> None:
        """Set up the figure, the map axes and the dashboard panel."""
        env = self.sim.snapshot()
        cfg = env.config

        self.fig = plt.figure(figsize=(16, 8))

        self.ax = self.fig.add_axes([0.05, 0.1, 0.6, 0.85])
        self.ax.set_xlim(-10, cfg.width + 10)
        self.ax.set_ylim(-10, cfg.height + 10)
        self.ax.set_aspect('equal')
        self.ax.set_xlabel('X')
        self.ax.set_ylabel('Y')
        self.ax.set_title('Rescue Swarm')

        self.ax_dashboard = self.fig.add_axes([0.68, 0.1, 0.3, 0.85])
        self.ax_dashboard.axis('off')
        self.ax_dashboard.set_title('Dashboard', fontsize=14, fontweight='bold')

        heatmap = env.heatmap
        if heatmap.grid.size:
            extent = (0, heatmap.num_cols * heatmap.cell_size,
                      0, heatmap.num_rows * heatmap.cell_size)
            self.heat_image = self.ax.imshow(
                heatmap.grid.T, origin='lower', extent=extent,
                cmap='Greys', alpha=0.4, vmin=0, vmax=1, zorder=0
            )

        self.charger_markers = self.ax.scatter(
            [], [], s=120, marker='s', c='#4daf4a', edgecolors='black', zorder=5,
            label='Charging point'
        )
        self.survivor_markers = self.ax.scatter(
            [], [], s=40, marker='o', edgecolors='black', zorder=6, label='Survivor'
        )
        self.drone_markers = self.ax.scatter(
            [], [], s=50, marker='^', zorder=10
        )

        self.dashboard_text = self.ax_dashboard.text(
            0.02, 0.98, '', transform=self.ax_dashboard.transAxes,
            verticalalignment='top', fontsize=10, fontfamily='monospace',
            bbox=dict(boxstyle='round', facecolor='white', alpha=0.9, edgecolor='gray')
        )

        self._add_legend()
        self.fig.canvas.mpl_connect('key_press_event', self._on_key_press)
        self.update_visualization(env)

    def _add_legend(self) -> None:
        legend_elements = [
            patches.Patch(facecolor=color, edgecolor='black', label=mode.value.capitalize())
            for mode, color in self.MODE_COLORS.items()
        ]
        legend_elements.append(patches.Patch(facecolor='#fdd49e', edgecolor='#d7301f',
                                             label='Trace'))
        self.ax.legend(handles=legend_elements, loc='upper right', fontsize=8)

    def _on_key_press(self, event) -> None:
        """Handle key press events."""
        if event.key == ' ':
            running = self.sim.toggle_running()
            print(f"[View] Running: {running}")
        elif event.key == 'r':
            self.sim.reset()
            print("[View] Simulation reset")
        elif event.key == 'q':
            self.close()

    @staticmethod
    def _offsets(points: list) -> np.ndarray:
        return np.reshape(np.array(points, dtype=float), (-1, 2))

    def update_visualization(self, env: Environment) -> None:
        """Redraw all artists from a snapshot."""
        if self.heat_image is not None and env.heatmap.grid.size:
            grid = env.heatmap.grid
            self.heat_image.set_data(grid.T)
            self.heat_image.set_clim(0, max(1.0, float(grid.max())))

        self.charger_markers.set_offsets(
            self._offsets([(cp.x, cp.y) for cp in env.charging_points])
        )

        # Trace circles are rebuilt each frame; their count changes on reset
        for artist in self.clue_artists:
            artist.remove()
        self.clue_artists = []
        for clue in env.clues:
            circle = patches.Circle(
                (clue.x, clue.y), clue.radius,
                facecolor='#fdd49e', edgecolor='#d7301f',
                alpha=0.1 if clue.consumed else 0.35, zorder=2
            )
            self.ax.add_patch(circle)
            self.clue_artists.append(circle)

        self.survivor_markers.set_offsets(
            self._offsets([(s.x, s.y) for s in env.survivors])
        )
        self.survivor_markers.set_facecolor(
            ['#4daf4a' if s.saved else '#ffff33' for s in env.survivors]
        )

        self.drone_markers.set_offsets(
            self._offsets([(d.x, d.y) for d in env.drones])
        )
        self.drone_markers.set_facecolor(
            [self.MODE_COLORS[d.mode] for d in env.drones]
        )

        if self.dashboard_text is not None:
            self.dashboard_text.set_text(self._generate_dashboard_content(env))

    def _generate_dashboard_content(self, env: Environment) -> str:
        """Dashboard text for a snapshot."""
        lines = []

        if env.finished:
            state = 'FINISHED'
        elif self.sim.is_running():
            state = 'RUNNING'
        else:
            state = 'PAUSED'

        lines.append(f"{'═' * 36}")
        lines.append(f"  TIME: {env.time:.1f}s  |  {state}")
        lines.append(f"{'═' * 36}")
        lines.append("")

        lines.append("┌─── RESCUE ───────────────────────┐")
        lines.append(f"│ Survivors saved: {env.saved_count()}/{len(env.survivors)}")
        lines.append(f"│ Traces consumed: {env.consumed_count()}/{len(env.clues)}")
        lines.append(f"│ Area visited: {env.heatmap.visited_fraction():.0%}")
        lines.append("└──────────────────────────────────┘")
        lines.append("")

        lines.append("┌─── DRONES ───────────────────────┐")
        for mode, count in env.mode_counts().items():
            lines.append(f"│ {mode.value.capitalize():<11} {count}")
        low = [d for d in env.drones if d.autonomy > 0
               and d.remaining_autonomy / d.autonomy < 0.25]
        lines.append(f"│ Low autonomy: {len(low)}")
        lines.append("└──────────────────────────────────┘")

        if env.finished:
            lines.append("")
            lines.append(f"  All survivors saved in {env.stats.total_time:.1f}s")

        lines.append("")
        lines.append("  Space: pause/resume  r: reset  q: quit")

        return '\n'.join(lines)

    def start_background(self) -> None:
        """Start stepping the simulation in a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self.sim.run, args=(self._stop, self.interval), daemon=True
        )
        self._thread.start()

    def stop_background(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def close(self) -> None:
        self.stop_background()
        if self.fig is not None:
            plt.close(self.fig)

    def show(self) -> None:
        """Open the window and block until it is closed."""
        self.setup_plot()
        self.start_background()

        def animate(frame):
            self.update_visualization(self.sim.snapshot())

        self.animation = FuncAnimation(
            self.fig, animate,
            interval=int(self.interval * 1000),
            cache_frame_data=False
        )
        try:
            plt.show(block=True)
        finally:
            self.stop_background()
