import asyncio
import sys
from pathlib import Path

from mscri.mscri_config import ConfigError, load_config
from mscri.mscri_runtime import ScriptRunner

BANNER = "Mscri Interpreter v1.0 (Python)"


# A basic awaitable input prompt.
async def ainput(prompt: str) -> str:
    loop = asyncio.get_running_loop()
    sys.stdout.write(prompt)
    sys.stdout.flush()
    return await loop.run_in_executor(None, sys.stdin.readline)


def print_side_effects(result):
    for effect in result.side_effects:
        if effect.get('topics') == ['stdout']:
            print(effect.get('message', ''))
        elif effect.get('topics') == ['stderr']:
            print(effect.get('message', ''), file=sys.stderr)
    if result.status == 'error':
        print(result.format_error(), file=sys.stderr)


def run_script_file(file_path: str, config) -> int:
    """Run a Mscri script file non-interactively; returns the process exit status."""
    try:
        source = Path(file_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        print(f"Error: Cannot open file '{file_path}'")
        return 1
    runner = ScriptRunner(config)
    result = runner.handle_script(source)
    print_side_effects(result)
    return 1 if result.status == 'error' else 0


async def repl(config):
    print(BANNER)
    print("Type 'exit' to quit")
    print()

    runner = ScriptRunner(config)

    while True:
        try:
            raw = await ainput(config.prompt)
            if raw == "":
                raise EOFError
            line = raw.rstrip("\n")

            if line == "exit":
                break
            if not line:
                continue

            # Each line executes a single statement
            result = runner.handle_line(line)
            print_side_effects(result)

        except EOFError:
            print()
            break

    print("Goodbye!")


def parse_args(argv):
    """Returns (config_path, script_path) from the command line."""
    config_path = None
    script_path = None
    args = list(argv)
    while args:
        arg = args.pop(0)
        if arg == "--config":
            if not args:
                raise SystemExit("Error: --config requires a path")
            config_path = args.pop(0)
        elif arg.startswith("--config="):
            config_path = arg.split("=", 1)[1]
        elif script_path is None:
            script_path = arg
    return config_path, script_path


async def main(argv=None):
    """Run a script file when provided, otherwise start the interactive REPL."""
    config_path, script_path = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    if script_path is not None:
        status = run_script_file(script_path, config)
        if status:
            raise SystemExit(status)
        return

    await repl(config)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nGoodbye!")
