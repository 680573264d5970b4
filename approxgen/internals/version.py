from __future__ import annotations
import sys, platform, datetime
from importlib.metadata import version as _pkg_version, PackageNotFoundError


def _ensure_utf8_stdout() -> None:
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, ValueError):
        pass

def _get_versions() -> dict[str, str]:
    from approxgen import __version__

    # lark (best-effort; the banner must not fail on odd installs)
    try:
        lark_ver = _pkg_version("lark")
    except PackageNotFoundError:
        lark_ver = "unknown"

    return {
        "app": __version__,
        "python": platform.python_version(),
        "lark": lark_ver,
    }

def banner_text(use_ansi: bool = False) -> str:
    v = _get_versions()
    today = datetime.date.today().isoformat()
    if use_ansi:
        BOLD, DIM, RESET = "\x1b[1m", "\x1b[2m", "\x1b[0m"
    else:
        BOLD, DIM, RESET = "", "", ""
    return (
        f"{BOLD} ≈ approxgen{RESET} • {v['app']}\n"
        f"{DIM}Python {v['python']} • lark {v['lark']} • {today}{RESET}\n"
    )

def print_banner() -> None:
    _ensure_utf8_stdout()
    # Only use ANSI styling if stdout is a TTY; piped output stays plain
    print(banner_text(use_ansi=sys.stdout.isatty()))
