from __future__ import annotations

import math
from pathlib import Path
from typing import Callable

from rich.console import Console

from digitspin.mesh import mesh_to_pyvista
from digitspin.switcher import DisplayFrame, DisplaySwitcher, SwapEvent

MESH_NAME = "digitspin-solid"
_MAX_TIMER_STEPS = 2**31 - 1


class PreviewBackendError(RuntimeError):
    """Raised when a preview backend cannot run."""


class SpinPreviewer:
    """Render the display switcher's current solid in a PyVista window."""

    def __init__(self, console: Console | None = None):
        self.console = console
        self._pv = None
        self._actor = None

    def show(
        self,
        switcher: DisplaySwitcher,
        target_fps: int = 60,
        off_screen: bool = False,
        ticks: int | None = None,
        screenshot_path: Path | None = None,
        show_edges: bool = True,
    ) -> None:
        pv = self._ensure_backend()
        plotter = pv.Plotter(window_size=(1280, 800), off_screen=off_screen)
        self._configure_plotter(plotter)
        self._apply_frame(plotter, switcher.frame(), show_edges=show_edges)
        self._reset_camera(plotter, switcher)

        if off_screen:
            for _ in range(ticks or 0):
                self._advance(plotter, switcher, show_edges)
            if screenshot_path is not None:
                screenshot_path.parent.mkdir(parents=True, exist_ok=True)
                plotter.screenshot(str(screenshot_path))
            plotter.close()
            return

        interval_seconds = 1.0 / max(target_fps, 1)
        remaining = [ticks]

        def on_timer() -> None:
            if remaining[0] is not None:
                if remaining[0] <= 0:
                    return
                remaining[0] -= 1
            self._advance(plotter, switcher, show_edges)
            plotter.render()

        cleanup = self._install_timer_callback(plotter, on_timer, interval_seconds)
        try:
            plotter.show(title="digitspin", auto_close=False)
        finally:
            cleanup()
            plotter.close()

    # Internal helpers -----------------------------------------------------

    def _ensure_backend(self):
        if self._pv is None:
            try:
                import pyvista as pv
            except ImportError as exc:  # pragma: no cover - runtime dep
                raise PreviewBackendError(
                    "PyVista is required for previewing. Install digitspin with `pip install -e .`."
                ) from exc
            pv.set_plot_theme("document")
            self._pv = pv
        return self._pv

    def _advance(self, plotter, switcher: DisplaySwitcher, show_edges: bool) -> SwapEvent | None:
        event = switcher.tick()
        if event is not None:
            self._apply_frame(plotter, switcher.frame(), show_edges=show_edges)
            if self.console is not None:
                self.console.print(
                    f"[cyan]tick {event.tick}: {event.previous[0]}→{event.previous[1]} "
                    f"becomes {event.current[0]}→{event.current[1]}[/cyan]"
                )
        elif self._actor is not None:
            self._actor.user_matrix = switcher.display_transform
        return event

    def _configure_plotter(self, plotter) -> None:
        plotter.set_background("#090c10", top="#1b2333")
        plotter.add_axes(interactive=False)

    def _apply_frame(self, plotter, frame: DisplayFrame, show_edges: bool) -> None:
        poly = mesh_to_pyvista(frame.solid.world_mesh())
        self._actor = plotter.add_mesh(
            poly,
            name=MESH_NAME,
            color="#6ab0ff",
            show_edges=show_edges,
            edge_color="#cdd7ff",
            smooth_shading=False,
            specular=0.2,
            reset_camera=False,
        )
        self._actor.user_matrix = frame.transform

    def _reset_camera(self, plotter, switcher: DisplaySwitcher) -> None:
        bounds = None
        for index in switcher.table.indices:
            b = switcher.table.source(index).bounds
            if bounds is None:
                bounds = list(b)
                continue
            bounds = [min(bounds[0], b[0]), max(bounds[1], b[1]), min(bounds[2], b[2]),
                      max(bounds[3], b[3]), min(bounds[4], b[4]), max(bounds[5], b[5])]
        if bounds is None:
            return

        diag = math.sqrt(
            (bounds[1] - bounds[0]) ** 2
            + (bounds[3] - bounds[2]) ** 2
            + (bounds[5] - bounds[4]) ** 2
        )
        distance = max(diag, 1.0) * 2.5
        focal_point = (0.0, 0.0, 0.0)
        camera_pos = (0.0, distance * 0.25, distance)
        view_up = (0.0, 1.0, 0.0)
        plotter.camera_position = [camera_pos, focal_point, view_up]

    def _install_timer_callback(
        self,
        plotter,
        callback: Callable[[], None],
        interval_seconds: float,
    ) -> Callable[[], None]:
        """Install a repeating timer callback compatible with the current PyVista backend."""

        duration_ms = max(int(interval_seconds * 1000), 10)
        add_timer_event = getattr(plotter, "add_timer_event", None)
        if callable(add_timer_event):
            add_timer_event(max_steps=_MAX_TIMER_STEPS, duration=duration_ms, callback=lambda _step: callback())
            return lambda: None

        interactor = getattr(plotter, "iren", None)
        if interactor is None:
            raise PreviewBackendError("PyVista interactor unavailable; cannot attach timer callbacks.")

        timer_id = interactor.create_timer(duration=duration_ms, repeating=True)
        observer_id = interactor.add_observer("TimerEvent", lambda *_: callback())

        def cleanup() -> None:
            interactor.remove_observer(observer_id)
            destroy_timer = getattr(interactor, "destroy_timer", None)
            if callable(destroy_timer):
                destroy_timer(timer_id)

        return cleanup
