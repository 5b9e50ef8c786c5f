"""Settings control panel for the TUI."""

from __future__ import annotations

from dataclasses import replace

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import (
    Button,
    Checkbox,
    Input,
    Label,
    Select,
    Static,
)

from dither_studio.core.dither import ALGORITHM_NAMES, Algorithm
from dither_studio.core.geometry import clamp_display_zoom, clamp_processing_scale
from dither_studio.core.palette import InvalidPalette, Palette, parse_palette_arg
from dither_studio.core.processor import Settings

# key -> (label, step, input type)
NUMERIC_FIELDS = {
    "scale": ("Scale %", 5, "integer"),
    "zoom": ("Zoom %", 25, "integer"),
    "black": ("Black", 5, "integer"),
    "mid": ("Gamma", 0.1, "number"),
    "white": ("White", 5, "integer"),
}


def numeric_value(settings: Settings, key: str) -> float:
    if key == "scale":
        return settings.processing_scale
    if key == "zoom":
        return settings.display_zoom
    if key == "black":
        return settings.levels.black_point
    if key == "mid":
        return settings.levels.mid_point
    return settings.levels.white_point


def with_numeric_value(settings: Settings, key: str, value: float) -> Settings:
    """Return settings with ``key`` set to ``value`` clamped to its range."""
    levels = settings.levels
    if key == "scale":
        return replace(settings, processing_scale=clamp_processing_scale(round(value)))
    if key == "zoom":
        return replace(settings, display_zoom=clamp_display_zoom(round(value)))
    if key == "black":
        levels = replace(levels, black_point=max(0, min(255, round(value))))
    elif key == "mid":
        levels = replace(levels, mid_point=round(max(0.1, min(10.0, value)), 1))
    elif key == "white":
        levels = replace(levels, white_point=max(0, min(255, round(value))))
    return replace(settings, levels=levels)


class ControlPanel(Widget):
    """Settings panel with controls for the preview parameters."""

    DEFAULT_CSS = """
    ControlPanel {
        width: 34;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
        margin-bottom: 0;
    }

    ControlPanel Checkbox {
        margin-top: 1;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    ControlPanel .num-row {
        height: 3;
        margin-top: 1;
    }

    ControlPanel .num-row Label {
        width: 9;
        margin-top: 0;
        padding-top: 1;
    }

    ControlPanel .num-row Button {
        min-width: 3;
        margin: 0;
    }

    ControlPanel .num-row Input {
        width: 1fr;
        margin: 0;
    }

    ControlPanel #btn-process {
        width: 100%;
        margin-top: 1;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes."""
        def __init__(self, settings: Settings) -> None:
            super().__init__()
            self.settings = settings

    class ProcessRequested(Message):
        """Posted when the Process button is pressed."""

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._settings = settings or Settings()

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("Settings", id="panel-title")

            for key, (label, _, input_type) in NUMERIC_FIELDS.items():
                with Horizontal(classes="num-row"):
                    yield Label(label)
                    yield Button("-", id=f"{key}-dec")
                    yield Input(
                        value=self._format(key),
                        id=f"{key}-input",
                        type=input_type,
                    )
                    yield Button("+", id=f"{key}-inc")

            yield Label("Algorithm")
            yield Select(
                [(ALGORITHM_NAMES[a], a.value) for a in Algorithm],
                value=Algorithm(self._settings.algorithm).value,
                allow_blank=False,
                id="algorithm-select",
            )

            yield Label("Palette")
            yield Input(
                value=", ".join(self._settings.palette),
                placeholder="#000000, #FFFFFF",
                id="palette-input",
            )

            yield Checkbox(
                "Live preview", value=self._settings.live_preview, id="live-check"
            )
            yield Button("Process", variant="primary", id="btn-process")

    @property
    def settings(self) -> Settings:
        return self._settings

    def _format(self, key: str) -> str:
        value = numeric_value(self._settings, key)
        return f"{value:.1f}" if key == "mid" else str(int(value))

    def _set_settings(self, settings: Settings) -> None:
        if settings == self._settings:
            return
        self._settings = settings
        self.post_message(self.SettingsChanged(settings))

    def _set_numeric(self, key: str, value: float) -> None:
        self._set_settings(with_numeric_value(self._settings, key, value))
        self.query_one(f"#{key}-input", Input).value = self._format(key)

    def nudge(self, key: str, direction: int) -> None:
        """Step a numeric setting up (+1) or down (-1)."""
        _, step, _ = NUMERIC_FIELDS[key]
        self._set_numeric(key, numeric_value(self._settings, key) + direction * step)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn = event.button.id or ""
        if btn == "btn-process":
            self.post_message(self.ProcessRequested())
            return
        key, _, action = btn.partition("-")
        if key in NUMERIC_FIELDS and action in ("dec", "inc"):
            self.nudge(key, 1 if action == "inc" else -1)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        input_id = event.input.id or ""
        if input_id == "palette-input":
            try:
                palette = Palette.from_hex(parse_palette_arg(event.value))
            except InvalidPalette as e:
                self.notify(str(e), severity="error")
                return
            self._set_settings(replace(self._settings, palette=palette.hex))
            return

        key = input_id.removesuffix("-input")
        if key not in NUMERIC_FIELDS:
            return
        try:
            value = float(event.value)
        except ValueError:
            return
        self._set_numeric(key, value)

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "algorithm-select" and event.value is not Select.BLANK:
            self._set_settings(replace(self._settings, algorithm=Algorithm(event.value)))

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "live-check":
            self._set_settings(replace(self._settings, live_preview=event.value))
