"""Command line runner

    python -m soulscript world.soul --ticks 120
    python -m soulscript --example pinger --ticks 180 --seed 7
    python -m soulscript --example atom --dump-ast
"""

import argparse
import logging
import sys

from .errors import ParseError, SoulScriptError
from .examples import EXAMPLES
from .interpreter import SoulScriptInterpreter
from .settings import InterpreterSettings
from .values import format_value


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="soulscript",
                                     description="Run SoulScript components for a number of ticks.")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("file", nargs="?", help="SoulScript source file")
    source.add_argument("--example", choices=sorted(EXAMPLES), help="Run a bundled sample program")
    parser.add_argument("--ticks", type=int, default=60, help="Number of ticks to run (default: 60)")
    parser.add_argument("--dt", type=float, default=None, help="Seconds per tick (default: 1/60)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--dump-ast", action="store_true", help="Print the parsed declarations and exit")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Host logging level (default: WARNING)")
    return parser


def load_source(args) -> str:
    if args.example:
        return EXAMPLES[args.example]
    with open(args.file, encoding="utf-8") as f:
        return f.read()


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        source = load_source(args)
    except OSError as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    overrides = {}
    if args.dt is not None:
        overrides['tick_delta'] = args.dt
    if args.seed is not None:
        overrides['random_seed'] = args.seed
    interpreter = SoulScriptInterpreter(InterpreterSettings.from_env(**overrides))

    if args.dump_ast:
        try:
            declarations = interpreter.parse(source)
        except SoulScriptError as e:
            print(e, file=sys.stderr)
            return 1
        for declaration in declarations:
            print(declaration)
        return 0

    components, errors = interpreter.parse_and_instantiate(source)
    for error in errors:
        print(error, file=sys.stderr)
    if any(isinstance(error, ParseError) for error in errors):
        return 1

    for _ in range(args.ticks):
        interpreter.tick()

    print(f"{len(components)} component(s), {interpreter.tick_count} tick(s), "
          f"t={interpreter.world_time:.3f}s")
    for component in interpreter.get_all_components():
        state = "active" if component.is_active else "inactive"
        fields = ", ".join(f"{k}={format_value(v)}" for k, v in component.fields.items())
        print(f"  {component.name} [{state}] {fields}")
    for entry in interpreter.get_logs():
        print(f"  [{entry.level.value}] {entry.message}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
