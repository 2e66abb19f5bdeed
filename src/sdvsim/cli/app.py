"""SDV Simulator CLI Application.

A Textual-based terminal interface that visualizes a validation run:
- Scenario selection
- Viewport with the ego vehicle and surrounding traffic
- HUD with simulator version, map, frame counter, FPS and weather
- Step list with live status, progress bar and pass/fail footer
- Report export (JSON and plain text)
"""

from __future__ import annotations

import argparse
import math
from pathlib import Path
from typing import Optional

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.logging import TextualHandler
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, OptionList, ProgressBar, Rule, Static
from textual.widgets.option_list import Option

from sdvsim.catalog import ScenarioId, list_scenarios, parse_scenario_id
from sdvsim.config import Settings, configure_logging, get_settings
from sdvsim.engine.scheduler import AsyncioScheduler
from sdvsim.engine.simulation import Simulation
from sdvsim.models.artifact import ComponentType, GeneratedArtifact, Language
from sdvsim.models.motion import MotionState
from sdvsim.models.run import Run
from sdvsim.models.steps import Step, StepStatus
from sdvsim.parameters import SIMULATOR_VERSION
from sdvsim.report.render import ExportFormat, write_report

VIEWPORT_WIDTH = 60
VIEWPORT_HEIGHT = 16
REFRESH_SECONDS = 0.1

STATUS_ICONS = {
    StepStatus.PENDING: "○",
    StepStatus.RUNNING: "◌",
    StepStatus.PASSED: "✓",
    StepStatus.FAILED: "✗",
}

# Heading buckets clockwise from east, 45 degrees each
HEADING_GLYPHS = ["→", "↘", "↓", "↙", "←", "↖", "↑", "↗"]


# =============================================================================
# Rendering helpers
# =============================================================================


def heading_glyph(heading: float) -> str:
    """Arrow glyph closest to a heading in degrees."""
    index = int(math.floor(((heading % 360) + 22.5) / 45)) % 8
    return HEADING_GLYPHS[index]


def render_viewport(state: MotionState, width: int = VIEWPORT_WIDTH, height: int = VIEWPORT_HEIGHT) -> str:
    """Draw actors onto a character grid; percent coordinates map to cells."""
    grid = [["·" if (row % 4 == 0 or col % 10 == 0) else " " for col in range(width)] for row in range(height)]

    def place(x: float, y: float, glyph: str) -> None:
        col = min(width - 1, max(0, int(x / 100 * width)))
        row = min(height - 1, max(0, int(y / 100 * height)))
        grid[row][col] = glyph

    for actor in state.secondary:
        place(actor.x, actor.y, "■")
    primary = state.primary
    place(primary.x, primary.y, heading_glyph(primary.heading))
    return "\n".join("".join(row) for row in grid)


def format_step_line(step: Step) -> str:
    line = f"{STATUS_ICONS[step.status]} {step.id:>2}. {step.name} - {step.description}"
    if step.status.is_terminal:
        line += f"  {step.nominal_duration_ms / 1000:.1f}s"
    return line


def format_hud(simulation: Simulation) -> str:
    state = simulation.motion.state
    presentation = simulation.presentation
    return (
        f"{SIMULATOR_VERSION}  |  {presentation.map_name}  |  "
        f"Frame: {state.frame_count:,}  |  {state.fps} FPS  |  Weather: {state.weather.value}"
    )


def format_summary(run: Run) -> str:
    summary = f"{run.passed_count} Passed   {run.failed_count} Failed   {run.pending_count} Pending"
    if run.is_complete and run.failed_count == 0:
        summary += "   All Tests Passed - Ready for Deployment"
    elif run.is_complete:
        summary += "   Validation finished with failures"
    return summary


# =============================================================================
# Theme and Styles
# =============================================================================

CSS = """
Screen {
    background: $surface;
}

#main-menu {
    align: center middle;
    width: 100%;
    height: 100%;
}

.menu-container {
    width: 60;
    height: auto;
    border: solid green;
    padding: 1 2;
}

.menu-title {
    text-align: center;
    text-style: bold;
}

#hud {
    height: 1;
    padding: 0 1;
    background: $boost;
}

#viewport {
    border: solid $primary;
    height: auto;
    width: auto;
}

#steps {
    border: solid $secondary;
    padding: 0 1;
    height: auto;
}

#summary {
    height: 1;
    padding: 0 1;
}

#progress {
    padding: 0 1;
}
"""


# =============================================================================
# Screens
# =============================================================================


class ScenarioSelectScreen(Screen[Optional[str]]):
    """Screen for selecting a scenario; dismisses with the chosen id."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main-menu"):
            with Vertical(classes="menu-container"):
                yield Static("SELECT SCENARIO", classes="menu-title")
                yield Rule()
                yield OptionList(id="scenario-list")
                yield Rule()
                yield Button("Back", id="back", variant="default")
        yield Footer()

    def on_mount(self) -> None:
        option_list = self.query_one("#scenario-list", OptionList)
        for scenario in list_scenarios():
            option_list.add_option(Option(f"{scenario['name']} - {scenario['map']}", id=scenario["id"]))

    @on(OptionList.OptionSelected)
    def scenario_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(str(event.option.id))

    @on(Button.Pressed, "#back")
    def go_back(self) -> None:
        self.dismiss(None)

    def action_go_back(self) -> None:
        self.dismiss(None)


class SimulationScreen(Screen):
    """Live view of one validation run."""

    BINDINGS = [
        Binding("r", "run", "Run"),
        Binding("p", "pause", "Pause"),
        Binding("x", "reset", "Reset"),
        Binding("s", "select_scenario", "Scenario"),
        Binding("e", "export_json", "Export JSON"),
        Binding("t", "export_text", "Export Text"),
    ]

    def __init__(self, simulation: Simulation, settings: Settings) -> None:
        super().__init__()
        self.simulation = simulation
        self.settings = settings

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Static("", id="hud")
        with Horizontal():
            yield Static("", id="viewport")
        yield ProgressBar(total=100, show_eta=False, id="progress")
        yield Static("", id="steps")
        yield Static("", id="summary")
        yield Footer()

    def on_mount(self) -> None:
        self.set_interval(REFRESH_SECONDS, self.refresh_view)
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw every panel from the current simulation state."""
        run = self.simulation.sequencer.run
        self.sub_title = self.simulation.presentation.display_name
        self.query_one("#hud", Static).update(format_hud(self.simulation))
        self.query_one("#viewport", Static).update(render_viewport(self.simulation.motion.state))
        self.query_one("#progress", ProgressBar).update(progress=run.progress_pct)
        self.query_one("#steps", Static).update("\n".join(format_step_line(step) for step in run.steps))
        self.query_one("#summary", Static).update(format_summary(run))

    def action_run(self) -> None:
        if self.simulation.is_running:
            self.notify("Run already in progress", severity="warning")
            return
        if not self.simulation.start():
            self.notify("No generated code to validate", severity="warning")
        self.refresh_view()

    def action_pause(self) -> None:
        if not self.simulation.pause():
            self.notify("Nothing to pause", severity="warning")
        self.refresh_view()

    def action_reset(self) -> None:
        if self.simulation.is_running:
            self.notify("Pause the run before resetting", severity="warning")
            return
        self.simulation.reset()
        self.refresh_view()

    def action_select_scenario(self) -> None:
        def on_selected(scenario_id: Optional[str]) -> None:
            if scenario_id is not None:
                self.simulation.select_scenario(scenario_id)
                self.refresh_view()

        self.app.push_screen(ScenarioSelectScreen(), on_selected)

    def action_export_json(self) -> None:
        self._export(ExportFormat.JSON)

    def action_export_text(self) -> None:
        self._export(ExportFormat.TEXT)

    def _export(self, fmt: ExportFormat) -> None:
        report = self.simulation.build_report()
        if report is None:
            self.notify("Run must complete before exporting", severity="warning")
            return
        path = write_report(report, self.settings.export_dir, self.settings.report_prefix, fmt)
        self.notify(f"Report saved: {path}", timeout=10)


# =============================================================================
# Main Application
# =============================================================================


class SimulatorApp(App):
    """Main SDV simulator application."""

    TITLE = "SDV Simulator"
    SUB_TITLE = "Simulation Validation Loop"
    CSS = CSS

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit", show=True, priority=True),
    ]

    def __init__(
        self,
        artifact: Optional[GeneratedArtifact] = None,
        scenario: ScenarioId = ScenarioId.FULL,
        component_type: ComponentType = ComponentType.SERVICE,
        settings: Optional[Settings] = None,
    ) -> None:
        super().__init__()
        self.settings = settings or get_settings()
        self.simulation = Simulation(
            artifact,
            scenario=scenario,
            component_type=component_type,
            scheduler=AsyncioScheduler(),
            time_scale=self.settings.time_scale,
        )

    def on_mount(self) -> None:
        self.push_screen(SimulationScreen(self.simulation, self.settings))


def load_artifact(path: Path, language: Language) -> GeneratedArtifact:
    """Read a generation service response (JSON or bare code) from disk."""
    return GeneratedArtifact.from_response(path.read_text(encoding="utf-8"), language)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Visualize a simulated validation run")
    parser.add_argument("artifact", nargs="?", type=Path, help="Generated code (JSON response or source file)")
    parser.add_argument(
        "--scenario",
        default=ScenarioId.FULL.value,
        choices=[scenario.value for scenario in ScenarioId],
        help="Scenario to run",
    )
    parser.add_argument(
        "--language",
        default=Language.CPP.value,
        choices=[language.value for language in Language],
        help="Language of a bare source file",
    )
    parser.add_argument(
        "--component-type",
        default=ComponentType.SERVICE.value,
        choices=[component.value for component in ComponentType],
        help="Component kind shown in reports",
    )
    parser.add_argument("--time-scale", type=float, default=None, help="Step speed-up factor")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the CLI application."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    if args.time_scale is not None:
        if args.time_scale <= 0:
            raise SystemExit("--time-scale must be positive")
        settings = Settings(
            export_dir=settings.export_dir,
            report_prefix=settings.report_prefix,
            time_scale=args.time_scale,
            log_level=settings.log_level,
        )
    configure_logging(settings.log_level, handlers=[TextualHandler()])

    artifact = load_artifact(args.artifact, Language(args.language)) if args.artifact else None
    app = SimulatorApp(
        artifact=artifact,
        scenario=parse_scenario_id(args.scenario),
        component_type=ComponentType(args.component_type),
        settings=settings,
    )
    app.run()


if __name__ == "__main__":
    main()
