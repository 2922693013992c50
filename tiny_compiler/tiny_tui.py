#! /usr/bin/env python

from typing import Dict, Optional

from textual.app import App, ComposeResult
from textual.containers import Grid
from textual.widgets import Input, Static

from tiny_ast import format_tree
from tiny_compiler import PipelineResult, describe_error, run_pipeline

PANELS = ("tokens", "tree", "value", "code")


class PipelineApp(App[None]):
    CSS = """
    Input {
        dock: top;
    }
    Grid {
        grid-size: 2 2;
        & .panel {
            width: 1fr;
            height: 1fr;
            border: round $accent;
            padding: 0 1;
        }
        & .error { color: red; }
    }
    """

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, initial: Optional[str] = None):
        super().__init__()
        self.initial = initial
        self.panels: Dict[str, Static] = {}
        self.last_result: Optional[PipelineResult] = None

    def compose(self) -> ComposeResult:
        yield Input(placeholder="sub 2 sum 1 3 4", id="expression")
        with Grid():
            for name in PANELS:
                panel = Static("", classes="panel", markup=False)
                panel.border_title = name
                self.panels[name] = panel
                yield panel

    def on_mount(self) -> None:
        expression = self.query_one("#expression", Input)
        expression.focus()
        if self.initial:
            expression.value = self.initial
            self.show(self.initial)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.value.strip():
            self.show(event.value)

    def show(self, text: str) -> PipelineResult:
        result = run_pipeline(text)
        self.last_result = result
        self.update_panel("tokens", str(result.tokens))

        if "parse" in result.errors:
            self.update_panel("tree", describe_error(result.errors["parse"]), True)
            self.update_panel("value", "skipped")
            self.update_panel("code", "skipped")
            return result

        self.update_panel("tree", format_tree(result.ast))
        if "evaluate" in result.errors:
            self.update_panel("value", describe_error(result.errors["evaluate"]), True)
        else:
            self.update_panel("value", result.value_text)
        if "compile" in result.errors:
            self.update_panel("code", describe_error(result.errors["compile"]), True)
        else:
            self.update_panel("code", result.code)
        return result

    def update_panel(self, name: str, content: str, failed: bool = False) -> None:
        panel = self.panels[name]
        panel.update(content)
        panel.set_class(failed, "error")


if __name__ == "__main__":
    app = PipelineApp()
    app.run()
