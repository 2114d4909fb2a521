import asyncio
import logging
import os
import sys
from pathlib import Path

from seqrt.seqrt_runtime import CommandRunner
from seqrt import __version__
from seqrt.seqrt_printer import Printer

HELP_MESSAGE = """\
Usage: seqrt [options] [ script ]

Options:
    -                 read the script from stdin
    -v, --version     print version
    -h, --help        print command line options

With no script, start the interactive REPL."""


def setup_logging() -> None:
    """Configure the root logger from SEQRT_LOG_LEVEL (default WARNING), writing to stderr."""
    level_name = os.getenv("SEQRT_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)

def _print_side_effects(result):
    for effect in result.side_effects:
        if effect.get('topics') == ['stdout']:
            print(effect.get('message', ''))

async def run_script_file(file_path: str):
    """Run a script file non-interactively and exit with appropriate status."""
    runner = CommandRunner()
    printer = Printer()
    if file_path == "-":
        source = sys.stdin.read()
        runner.source_dir = str(Path.cwd())
    else:
        p = Path(file_path)
        try:
            source = p.read_text(encoding="utf-8")
        except FileNotFoundError:
            print(f"Error: file not found: {file_path}", file=sys.stderr)
            raise SystemExit(1)
        runner.source_dir = str(p.parent.resolve())
    result = await runner.handle_script(source)
    _print_side_effects(result)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)
        raise SystemExit(1)
    if result.value is not None:
        print(printer.pformat(result.value))

async def main(argv=None):
    """Run a script file when provided, otherwise start the interactive REPL."""
    argv = sys.argv[1:] if argv is None else argv
    # Help and version win over everything else, wherever they appear
    if any(a in ("-h", "--help") for a in argv):
        print(HELP_MESSAGE)
        return
    if any(a in ("-v", "--version") for a in argv):
        print(f"seqrt {__version__}")
        return
    unknown = [a for a in argv if a.startswith("-") and a != "-"]
    if unknown:
        print(f"Error: unknown option: {unknown[0]}", file=sys.stderr)
        print(HELP_MESSAGE, file=sys.stderr)
        raise SystemExit(2)
    if argv:
        await run_script_file(argv[0])
        return

    print(f"seqrt REPL v{__version__}")
    print("Type 'exit' or press Ctrl+D to quit.")

    runner = CommandRunner()
    printer = Printer()
    runner.source_dir = str(Path.cwd())

    while True:
        try:
            raw = await ainput(">> ")
            if raw == "":
                raise EOFError
            line = raw.strip()

            if not line:
                continue
            if line == "exit":
                break

            result = await runner.handle_script(line)

            _print_side_effects(result)
            if result.status == 'error':
                print(result.format_error(), file=sys.stderr)
                continue

            if result.value is not None:
                print(printer.pformat(result.value))

        except EOFError:
            print("\nExiting.")
            break

def run():
    setup_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nExiting.")

if __name__ == "__main__":
    run()
