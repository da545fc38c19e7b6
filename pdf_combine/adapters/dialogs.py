"""Native file dialogs for desktop runs of the app.

Streamlit has no save-as dialog, so on a desktop the server shows the
platform dialog itself. Tk must own the main thread of its process, and
Streamlit runs scripts on a worker thread, so each dialog is shown by a
short-lived child interpreter that prints the chosen path(s) as JSON.
"""
from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path
from typing import Any, Callable, Protocol

from pdf_combine.domain.errors import OpenError, SaveError

PDF_FILETYPES = [("PDF files", "*.pdf")]

DialogRunner = Callable[[list[str]], "subprocess.CompletedProcess[str]"]

_DIALOG_SCRIPT = """
import json
import sys
import tkinter as tk
from tkinter import filedialog

filetypes = [tuple(item) for item in json.loads(sys.argv[2])]
root = tk.Tk()
root.withdraw()
root.attributes("-topmost", True)
try:
    if sys.argv[1] == "open":
        chosen = filedialog.askopenfilenames(
            parent=root, title="Add PDF files", filetypes=filetypes
        )
        result = list(chosen or ())
    else:
        chosen = filedialog.asksaveasfilename(
            parent=root,
            title="Save combined PDF",
            defaultextension=".pdf",
            initialfile=sys.argv[3],
            filetypes=filetypes,
        )
        result = chosen or None
finally:
    root.destroy()
print(json.dumps(result))
"""


class SavePathPicker(Protocol):
    def choose_save_path(self, suggested_name: str) -> str | None: ...


def run_dialog_process(command: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, text=True, capture_output=True)


class TkFileDialogs:
    def __init__(self, runner: DialogRunner = run_dialog_process) -> None:
        self.runner = runner

    def _run(self, *args: str) -> Any:
        command = [sys.executable, "-c", _DIALOG_SCRIPT, *args]
        try:
            proc = self.runner(command)
        except OSError as exc:
            raise RuntimeError(f"could not start the dialog process: {exc}") from exc
        if proc.returncode != 0:
            lines = proc.stderr.strip().splitlines()
            raise RuntimeError(lines[-1] if lines else f"exit code {proc.returncode}")
        try:
            return json.loads(proc.stdout.strip().splitlines()[-1])
        except (IndexError, ValueError) as exc:
            raise RuntimeError("the dialog process returned no selection") from exc

    def pick_pdf_files(self) -> list[tuple[str, str]]:
        try:
            paths = self._run("open", json.dumps(PDF_FILETYPES))
        except RuntimeError as exc:
            raise OpenError(f"Unable to open the file dialog: {exc}") from exc
        return [(Path(path).name, path) for path in paths or ()]

    def choose_save_path(self, suggested_name: str) -> str | None:
        try:
            save_path = self._run("save", json.dumps(PDF_FILETYPES), suggested_name)
        except RuntimeError as exc:
            raise SaveError(f"Unable to open the save dialog: {exc}") from exc
        return save_path or None
