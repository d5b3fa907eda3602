# rcon_panel/rcon_ui.py
from __future__ import annotations

import asyncio
from typing import Optional

from prompt_toolkit.application import Application
from prompt_toolkit.document import Document
from prompt_toolkit.filters import has_focus
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import HSplit, Layout
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Label, TextArea

from .errors import RconError
from .rcon import Rcon

LOG_TRIM_LIMIT = 2_000_000  # keep last ~2MB in the in-memory text area
QUIT_WORDS = ("/quit", "quit", "exit")


async def run_rcon_ui(session: Rcon, title: str) -> None:
    """Fullscreen RCON console: scrolling output + an input bar, on an already open session."""
    log = TextArea(
        style="class:log",
        focusable=False,
        scrollbar=True,
        wrap_lines=False,
        read_only=False,  # programmatic inserts
    )
    input_field = TextArea(height=1, prompt="> ", multiline=False)
    status = Label(
        text=f"RCON — {title}    (Ctrl-C / Esc / /quit to exit)",
        style="class:status",
    )

    kb = KeyBindings()

    @kb.add("enter", filter=has_focus(input_field))
    async def _(event) -> None:
        line = input_field.text or ""
        input_field.buffer.document = Document(text="")
        out = await asyncio.to_thread(run_line, session, line)
        if out is None:
            event.app.exit()
        elif out:
            _append(app, log, out)

    @kb.add("c-c")
    @kb.add("escape")
    def _(event) -> None:
        event.app.exit()

    root = HSplit([status, log, input_field])
    app = Application(
        layout=Layout(root, focused_element=input_field),
        key_bindings=kb,
        full_screen=True,
        style=Style.from_dict(
            {
                "log": "bg:#0e162b #d1d5db",
                "status": "reverse",
            }
        ),
    )

    _append(app, log, f"[rcon] connected to {title} (request id {session.request_id})\n")
    await app.run_async()


def _append(app: Optional[Application], area: TextArea, text: str) -> None:
    """
    Append text to the TextArea and keep the buffer size bounded.
    """
    buf = area.buffer
    buf.insert_text(text, move_cursor=True)
    if len(buf.text) > LOG_TRIM_LIMIT:
        new_text = buf.text[-LOG_TRIM_LIMIT:]
        buf.document = Document(new_text, cursor_position=len(new_text))
    if app is not None:
        app.invalidate()


def run_line(session: Rcon, line: str) -> Optional[str]:
    """
    Run one line typed into the console and return the text to show.
    None means the user asked to leave; "" means there is nothing to show.
    """
    cmd = line.strip()
    if cmd.lower() in QUIT_WORDS:
        return None
    if not cmd:
        return ""
    if session.closed:
        return "[rcon] connection closed; /quit to leave\n"
    try:
        out = session.command(cmd)
    except (RconError, OSError) as e:
        msg = f"[rcon error] {e}\n"
        if session.closed:
            msg += "[rcon] connection closed; /quit to leave\n"
        return msg
    return f"$ {cmd}\n{out}\n"
