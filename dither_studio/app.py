"""Main Textual application for the dither-studio TUI."""

from __future__ import annotations

import logging
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Static,
)

from dither_studio.config import CONFIG, configure_logging
from dither_studio.core.palette import InvalidPalette
from dither_studio.core.pipeline import PreviewPipeline
from dither_studio.core.processor import ProcessedImage, Settings
from dither_studio.core.source import DocumentError, ImageDocumentSource, NoActiveDocument
from dither_studio.tui.controls import ControlPanel
from dither_studio.tui.preview import DitherPreview
from dither_studio.utils.debounce import Debouncer

logger = logging.getLogger(__name__)

# Changing only these never needs the pixels to be processed again.
DISPLAY_ONLY_FIELDS = frozenset({"display_zoom", "live_preview"})


class PathScreen(ModalScreen[str | None]):
    """Modal screen asking for a file path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    DEFAULT_CSS = """
    PathScreen {
        align: center middle;
    }

    PathScreen #path-dialog {
        width: 60;
        height: 11;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    PathScreen #path-title {
        text-style: bold;
        margin-bottom: 1;
    }

    PathScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    PathScreen Button {
        margin: 0 1;
    }
    """

    def __init__(
        self, title: str, action: str, default_path: str = "", **kwargs
    ) -> None:
        super().__init__(**kwargs)
        self._title = title
        self._action = action
        self._default_path = default_path

    def action_cancel(self) -> None:
        self.dismiss(None)

    def compose(self) -> ComposeResult:
        with Vertical(id="path-dialog"):
            yield Static(self._title, id="path-title")
            yield Label("File path:")
            yield Input(value=self._default_path, placeholder="image.png", id="path-input")
            with Horizontal(classes="button-row"):
                yield Button(self._action, variant="primary", id="btn-ok")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-ok":
            value = self.query_one("#path-input", Input).value
            self.dismiss(value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class DitherStudioApp(App):
    """Interactive levels + dithering preview."""

    TITLE = "dither-studio"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("p", "process", "Process", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("plus", "zoom(1)", "Zoom In"),
        Binding("minus", "zoom(-1)", "Zoom Out"),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(
        self,
        input_path: str | None = None,
        settings: Settings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._settings = settings or Settings()
        self._source = ImageDocumentSource()
        self._pipeline = PreviewPipeline(self._source)
        self._debouncer = Debouncer(self._on_debounce_elapsed)
        self._result: ProcessedImage | None = None
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield DitherPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)

    def _load_file(self, path: str) -> None:
        try:
            info = self._source.open(path)
        except DocumentError as e:
            self._update_status(f"Error: {e}")
            return

        self._debouncer.cancel()
        self._pipeline.cache.invalidate()
        self._result = None
        self.query_one(DitherPreview).clear()
        self.title = f"dither-studio - {Path(path).name}"

        if not info.is_valid:
            self._update_status(f"Error: {info.error_message}")
            return
        self._update_status(f"Loaded {Path(path).name} ({info.size}, {info.mode})")
        self._process(use_cache=False)

    def _update_status(self, text: str) -> None:
        try:
            self.query_one("#status-bar", Static).update(text)
        except NoMatches:
            logger.debug("Status bar not mounted: %s", text)

    @work(exclusive=True, group="preview")
    async def _process(self, use_cache: bool = False) -> None:
        """Capture (or reuse the cached capture) and process it.

        The worker is exclusive: starting a new run cancels the previous
        one, and a result that is no longer the latest is dropped.
        """
        settings = self._settings
        self._update_status("Processing...")
        try:
            result = await self._pipeline.reprocess(settings, use_cache=use_cache)
        except NoActiveDocument:
            self._update_status("No image open. Press 'o' to open a file.")
            return
        except (DocumentError, InvalidPalette) as e:
            self._update_status(f"Error: {e}")
            return

        if not self._pipeline.is_current(result):
            return
        self._display_result(result)

    def _display_result(self, result: ProcessedImage) -> None:
        self._result = result
        self.query_one(DitherPreview).update_image(result, self._settings.display_zoom)
        source = "cached" if result.from_cache else "fresh capture"
        self._update_status(
            f"{result.size} at {result.processing_scale}% | "
            f"levels {result.levels_ms:.0f}ms, dither {result.dither_ms:.0f}ms | {source}"
        )

    def _on_debounce_elapsed(self) -> None:
        self._process(use_cache=True)

    # --- Actions ---

    def action_process(self) -> None:
        self._debouncer.cancel()
        self._process(use_cache=False)

    def action_zoom(self, direction: int) -> None:
        self.query_one(ControlPanel).nudge("zoom", direction)

    def action_open_file(self) -> None:
        self.push_screen(PathScreen("Open Image", "Open"), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_save(self) -> None:
        if self._result is None or self._source.path is None:
            self._update_status("Nothing to save")
            return
        src = self._source.path
        default_path = str(src.parent / f"{src.stem}_dithered.png")
        self.push_screen(PathScreen("Save Output", "Save", default_path), self._on_save_path)

    def _on_save_path(self, path: str | None) -> None:
        if path is not None and self._result is not None:
            self._do_save(self._result, path, self._settings.display_zoom)

    @work(thread=True, group="save")
    def _do_save(self, result: ProcessedImage, output_path: str, display_zoom: int) -> None:
        from dither_studio.core.writer import save_output

        try:
            saved = save_output(result.buffer, Path(output_path), display_zoom=display_zoom)
        except OSError as e:
            self.call_from_thread(self._update_status, f"Save error: {e}")
            return
        self.call_from_thread(self._update_status, f"Saved to {saved}")

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        old, new = self._settings, event.settings
        changed = self._pipeline.apply_settings_change(old, new)
        self._settings = new

        if "display_zoom" in changed:
            self.query_one(DitherPreview).set_zoom(new.display_zoom)

        # Live updates start after the first successful run.
        if not changed - DISPLAY_ONLY_FIELDS or not new.live_preview or self._result is None:
            return
        if "processing_scale" in changed:
            self._debouncer.schedule(CONFIG.scale_debounce)
        else:
            self._debouncer.schedule(CONFIG.tone_debounce)

    def on_control_panel_process_requested(
        self, event: ControlPanel.ProcessRequested
    ) -> None:
        self.action_process()


def run_app(input_path: str | None = None, settings: Settings | None = None) -> None:
    """Launch the TUI application."""
    configure_logging(tui=True)
    app = DitherStudioApp(input_path=input_path, settings=settings)
    app.run()
