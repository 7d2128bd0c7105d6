import logging
from typing_extensions import *

from automaton import Automaton

logger = logging.getLogger(__name__)

SYMBOL_SEPARATOR = ","
TRANSITION_SEPARATOR = "->"

HEADER_FIELDS = ("states", "alphabet", "accepting states", "initial state")


class MalformedInputError(ValueError):
    """Raised when text does not decode into a well-formed DFA declaration."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


def _split_names(
    line: str, line_no: int, what: str, required: bool = True
) -> List[str]:
    line = line.strip()
    if not line:
        if required:
            raise MalformedInputError(f"{what} must not be empty", line_no)
        return []

    names = [name.strip() for name in line.split(SYMBOL_SEPARATOR)]
    seen = set()
    for name in names:
        if not name:
            raise MalformedInputError(f"empty name in {what}", line_no)
        if name in seen:
            raise MalformedInputError(f"duplicate name {name!r} in {what}", line_no)
        seen.add(name)
    return names


def _parse_transition(line: str, line_no: int) -> Tuple[str, str, str]:
    parts = line.split(TRANSITION_SEPARATOR)
    if len(parts) != 2:
        raise MalformedInputError(
            f"expected 'state,symbol->target', got {line!r}", line_no
        )

    left, target = parts
    left_parts = [p.strip() for p in left.split(SYMBOL_SEPARATOR)]
    target = target.strip()
    if len(left_parts) != 2:
        raise MalformedInputError(
            f"expected 'state,symbol' before '->', got {left.strip()!r}", line_no
        )

    src, symbol = left_parts
    if not src or not symbol or not target:
        raise MalformedInputError(f"empty field in transition {line!r}", line_no)
    return src, symbol, target


def parse_automaton(content: str) -> Automaton:
    """
    Decode the line-oriented DFA description.

    Lines 1-4 hold the states, the alphabet, the accepting states and the
    initial state. Every following line is a transition 'state,symbol->target'
    until the first blank line or the end of the input.

    Raises MalformedInputError for text that does not follow this layout.
    Invariant violations of the decoded automaton surface as
    InvalidAutomatonError from the Automaton constructor.
    """
    lines = content.splitlines()
    if len(lines) < len(HEADER_FIELDS):
        missing = HEADER_FIELDS[len(lines)]
        raise MalformedInputError(
            f"missing {missing} line", len(lines) + 1
        )

    states = _split_names(lines[0], 1, "states")
    alphabet = _split_names(lines[1], 2, "alphabet", required=False)
    accepting = _split_names(lines[2], 3, "accepting states", required=False)

    start_state = lines[3].strip()
    if not start_state:
        raise MalformedInputError("initial state must not be empty", 4)
    if SYMBOL_SEPARATOR in start_state:
        raise MalformedInputError(
            f"expected exactly one initial state, got {start_state!r}", 4
        )

    transitions = set()
    keys = set()
    for line_no, line in enumerate(lines[4:], start=5):
        line = line.strip()
        if not line:
            break

        src, symbol, target = _parse_transition(line, line_no)
        if (src, symbol) in keys:
            raise MalformedInputError(
                f"duplicate transition for ({src}, {symbol})", line_no
            )
        keys.add((src, symbol))
        transitions.add((src, symbol, target))

    logger.debug(
        "Decoded %d states, %d symbols, %d transitions",
        len(states),
        len(alphabet),
        len(transitions),
    )
    return Automaton(
        states=frozenset(states),
        alphabet=frozenset(alphabet),
        start_state=start_state,
        accepting_states=frozenset(accepting),
        transition_relation=frozenset(transitions),
    )


def format_automaton(automaton: Automaton) -> str:
    """Encode an automaton in the same layout parse_automaton reads."""
    output = [
        SYMBOL_SEPARATOR.join(automaton.ordered_states),
        SYMBOL_SEPARATOR.join(automaton.ordered_alphabet),
        SYMBOL_SEPARATOR.join(sorted(automaton.accepting_states)),
        automaton.start_state,
    ]

    for state, row in automaton.transition_table().items():
        for symbol, target in row.items():
            output.append(
                f"{state}{SYMBOL_SEPARATOR}{symbol}{TRANSITION_SEPARATOR}{target}"
            )

    return "\n".join(output)


def load_from_file(filename: str) -> Automaton:
    with open(filename, "r", encoding="utf-8") as f:
        content = f.read()
    return parse_automaton(content)


def save_to_file(automaton: Automaton, filename: str) -> None:
    with open(filename, "w", encoding="utf-8") as f:
        f.write(format_automaton(automaton) + "\n")
