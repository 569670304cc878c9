# unified_cli.py
import importlib
import inspect
import sys
from typing import Callable, List, Optional, Sequence

PROG = "dot-txt"

# command -> (module, one-line summary)
COMMANDS = {
    "font-gen": ("dot_txt.glyph_table", "generate a glyph table file"),
    "render": ("dot_txt.draw", "render a scene as ASCII art"),
}


def usage(file=None) -> None:
    file = file or sys.stdout
    print(f"Usage: {PROG} <command> [args...]", file=file)
    print("Commands:", file=file)
    width = max(len(cmd) for cmd in COMMANDS)
    for cmd in sorted(COMMANDS):
        print(f"  {cmd.ljust(width)}  {COMMANDS[cmd][1]}", file=file)


def _call_entry(entry: Callable, argv: List[str], module_prog: str) -> int:
    """Run a command's main(); commands without an argv parameter read sys.argv."""
    try:
        if inspect.signature(entry).parameters:
            result = entry(argv)
        else:
            saved = sys.argv
            sys.argv = [module_prog] + argv
            try:
                result = entry()
            finally:
                sys.argv = saved
    except SystemExit as se:
        # argparse exits with 2 on bad usage, 0 on --help
        return se.code if isinstance(se.code, int) else 0
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return 1
    return result if isinstance(result, int) else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 0
    if argv[0] == "--version":
        from . import __version__

        print(f"{PROG} {__version__}")
        return 0

    cmd, args = argv[0], argv[1:]
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage()
        return 2

    module_path = COMMANDS[cmd][0]
    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return 3

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return 4

    return _call_entry(entry, args, module_prog=f"{PROG} {cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
