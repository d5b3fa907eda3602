import os
from pathlib import Path
from typing import Optional

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 27015

def useable(s) -> bool:
    """True if `s` is a str holding at least one character above the space character."""
    return isinstance(s, str) and any(ch > " " for ch in s)

def read_properties(path: Path) -> dict:
    props = {}
    if path.exists():
        for line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
            line=line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                k,v = line.split("=",1)
                props[k.strip()]=v.strip()
    return props

def _port(value: str, source: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid port in {source}: {value!r}") from None

def resolve_target(host: Optional[str]=None, port: Optional[int]=None,
                   password: Optional[str]=None, properties: Optional[Path]=None,
                   env: Optional[dict]=None) -> tuple[str, int, str]:
    """
    Work out (host, port, password). First hit wins:
    explicit args, then the properties file, then RCON_HOST/RCON_PORT/RCON_PASSWORD, then defaults.
    """
    env = os.environ if env is None else env
    if properties and not properties.exists():
        raise ValueError(f"Properties file not found: {properties}")
    props = read_properties(properties) if properties else {}

    if host is None:
        host = props.get("rcon.host") or props.get("server-ip") or env.get("RCON_HOST") or DEFAULT_HOST
    if port is None:
        if props.get("rcon.port"):
            port = _port(props["rcon.port"], str(properties))
        elif env.get("RCON_PORT"):
            port = _port(env["RCON_PORT"], "RCON_PORT")
        else:
            port = DEFAULT_PORT
    if password is None:
        password = props.get("rcon.password") or env.get("RCON_PASSWORD") or ""
    return host, port, password
