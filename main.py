import argparse
import logging
import sys
from typing_extensions import *

from graphviz import ExecutableNotFound

from automaton import InvalidAutomatonError
from io_utils import MalformedInputError, format_automaton, parse_automaton

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mindfa",
        description="Read a DFA description, minimize it and print the minimal DFA.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="File with the DFA description. Default: standard input",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="File to write the minimized DFA to. Default: standard output",
    )
    parser.add_argument(
        "--graph",
        metavar="PATH",
        help="Also render the minimized DFA with Graphviz to PATH.png",
    )
    parser.add_argument(
        "--view",
        action="store_true",
        help="Open the rendered graph (only with --graph)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
    )

    try:
        if args.input:
            logger.info("Reading DFA from %s ...", args.input)
            with open(args.input, "r", encoding="utf-8") as f:
                content = f.read()
        else:
            content = sys.stdin.read()
    except OSError as e:
        logger.error("Cannot read input: %s", e)
        return 1

    try:
        dfa = parse_automaton(content)
    except MalformedInputError as e:
        logger.error("Malformed input: %s", e)
        return 1
    except InvalidAutomatonError as e:
        logger.error("Invalid automaton: %s", e)
        return 1

    logger.info(
        "DFA: |Q| = %d, |Σ| = %d, |F| = %d",
        len(dfa.states),
        len(dfa.alphabet),
        len(dfa.accepting_states),
    )
    minimized = dfa.minimize()
    logger.info("Minimal DFA: |Q| = %d", len(minimized.states))

    # No output is written unless rendering succeeded
    if args.graph:
        try:
            minimized.to_graphviz(filename=args.graph, view=args.view)
        except (ExecutableNotFound, OSError) as e:
            logger.error("Cannot render graph: %s", e)
            return 1
        logger.info("Graph rendered to %s.png", args.graph)

    text = format_automaton(minimized) + "\n"
    try:
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(text)
            logger.info("Minimal DFA saved to %s", args.output)
        else:
            sys.stdout.write(text)
    except OSError as e:
        logger.error("Cannot write output: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
