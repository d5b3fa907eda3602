#!/usr/bin/env python3
from __future__ import annotations
import argparse, sys, asyncio, logging
from pathlib import Path
from rcon_panel.errors import RconAuthError, RconError
from rcon_panel.rcon import Rcon
from rcon_panel.util import resolve_target

# --- session helpers ---------------------------------------------------------

def open_session(args) -> Rcon:
    try:
        host, port, password = resolve_target(args.host, args.port, args.password, args.properties)
    except ValueError as e:
        print(f"rconcli.py: error: {e}", file=sys.stderr)
        raise SystemExit(2)
    args.target = f"{host}:{port}"
    try:
        return Rcon.open(host, port, password, timeout=args.timeout)
    except RconAuthError as e:
        # open() leaves the socket up on a rejected password
        e.session.disconnect()
        raise

# --- exec/send/console -------------------------------------------------------

def do_exec(args):
    with open_session(args) as rcon:
        out = rcon.command(" ".join(args.command))
    if out:
        print(out)

def do_send(args):
    with open_session(args) as rcon:
        resp = rcon.send(args.type, args.payload.encode("utf-8"))
    print(f"id={resp.id} type={resp.type} bytes={len(resp.data)}")
    if resp.data:
        print(resp.data.decode("utf-8", "replace"))

def do_console(args):
    """Opens the prompt_toolkit RCON console, or a plain prompt if it can't load."""
    with open_session(args) as rcon:
        try:
            from rcon_panel.rcon_ui import run_rcon_ui
        except ImportError as e:
            print(f"prompt_toolkit UI not available ({e}); falling back to plain RCON.", flush=True)
            return _fallback_console(rcon)
        try:
            asyncio.run(run_rcon_ui(rcon, args.target))
        except KeyboardInterrupt:
            pass

def _fallback_console(rcon: Rcon):
    print("Interactive RCON. Type /quit to exit.")
    while True:
        try:
            cmd = input("> ").strip()
        except EOFError:
            break
        if cmd.lower() in ("/quit","quit","exit"): break
        if not cmd: continue
        try:
            out = rcon.command(cmd)
            print(out)
        except (RconError, OSError) as e:
            print(f"[rcon error] {e}")
            if rcon.closed:
                print("[rcon] connection closed.")
                break

# --- argparse ----------------------------------------------------------------

def build_parser():
    p = argparse.ArgumentParser(prog="rconcli.py", description="Source RCON client.")
    p.add_argument("--host", help="Server host (env RCON_HOST, default 127.0.0.1)")
    p.add_argument("--port", type=int, help="RCON port (env RCON_PORT, default 27015)")
    p.add_argument("--password", help="RCON password (env RCON_PASSWORD)")
    p.add_argument("--properties", type=Path, help="server.properties style file with rcon.* keys")
    p.add_argument("--timeout", type=float, help="Socket timeout in seconds (default: block)")
    p.add_argument("-v","--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    pe = sub.add_parser("exec", help="Run one command and print the reply")
    pe.add_argument("command", nargs="+")
    pe.set_defaults(func=do_exec)

    ps = sub.add_parser("send", help="Send a raw packet of any type")
    ps.add_argument("type", type=int)
    ps.add_argument("payload", nargs="?", default="")
    ps.set_defaults(func=do_send)

    pc = sub.add_parser("console", help="Interactive console (prompt_toolkit)")
    pc.set_defaults(func=do_console)

    return p

def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        args.func(args)
    except (RconError, OSError) as e:
        print(f"[rcon error] {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
