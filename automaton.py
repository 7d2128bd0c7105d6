import logging
from collections import defaultdict
from dataclasses import dataclass, field
from itertools import combinations
from typing_extensions import *

from graphviz import Digraph

logger = logging.getLogger(__name__)


class InvalidAutomatonError(ValueError):
    """Raised when a DFA declaration violates one of the model invariants."""


class DistinguishabilityTable:
    """
    Symmetric relation over unordered pairs of states.

    Pairs are stored as tuples ordered by the canonical state order, so
    (p, q) and (q, p) always refer to the same entry.
    """

    def __init__(self, states: Iterable[str]):
        self.order: Tuple[str, ...] = tuple(sorted(states))
        self.indices: Dict[str, int] = {s: i for i, s in enumerate(self.order)}
        self._marked: Set[Tuple[str, str]] = set()

    def _key(self, p: str, q: str) -> Tuple[str, str]:
        if self.indices[p] <= self.indices[q]:
            return (p, q)
        return (q, p)

    def mark(self, p: str, q: str) -> bool:
        """Mark (p, q) as distinguishable. Returns True if it was new."""
        if p == q:
            raise ValueError(f"A state is never distinguishable from itself: {p}")
        key = self._key(p, q)
        if key in self._marked:
            return False
        self._marked.add(key)
        return True

    def is_distinguishable(self, p: str, q: str) -> bool:
        if p == q:
            return False
        return self._key(p, q) in self._marked

    def pairs(self) -> Iterator[Tuple[str, str]]:
        """All unordered pairs of distinct states, in canonical order."""
        return combinations(self.order, 2)

    def __contains__(self, pair: Tuple[str, str]) -> bool:
        p, q = pair
        return self.is_distinguishable(p, q)

    def __len__(self) -> int:
        return len(self._marked)


@dataclass(frozen=True)
class Automaton:
    """
    Complete deterministic finite automaton.

    transition_relation holds (source, symbol, target) triples and must define
    exactly one target for every (state, symbol) in states x alphabet.
    """

    states: FrozenSet[str] = field(default_factory=frozenset)
    alphabet: FrozenSet[str] = field(default_factory=frozenset)
    start_state: Optional[str] = None
    accepting_states: FrozenSet[str] = field(default_factory=frozenset)
    transition_relation: FrozenSet[Tuple[str, str, str]] = field(
        default_factory=frozenset
    )
    _delta: Dict[Tuple[str, str], str] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        """Normalize collections and validate the DFA invariants."""
        object.__setattr__(self, "states", frozenset(self.states))
        object.__setattr__(self, "alphabet", frozenset(self.alphabet))
        object.__setattr__(self, "accepting_states", frozenset(self.accepting_states))
        object.__setattr__(
            self, "transition_relation", frozenset(self.transition_relation)
        )

        if not self.states:
            raise InvalidAutomatonError("Automaton must declare at least one state")

        if self.start_state not in self.states:
            raise InvalidAutomatonError(
                f"Initial state {self.start_state!r} is not a declared state"
            )

        undeclared = sorted(self.accepting_states - self.states)
        if undeclared:
            raise InvalidAutomatonError(
                f"Accepting state {undeclared[0]!r} is not a declared state"
            )

        delta = {}
        for src, sym, tgt in sorted(self.transition_relation):
            if src not in self.states:
                raise InvalidAutomatonError(
                    f"Transition {src},{sym}->{tgt}: source {src!r} is not a declared state"
                )
            if sym not in self.alphabet:
                raise InvalidAutomatonError(
                    f"Transition {src},{sym}->{tgt}: symbol {sym!r} is not in the alphabet"
                )
            if tgt not in self.states:
                raise InvalidAutomatonError(
                    f"Transition {src},{sym}->{tgt}: target {tgt!r} is not a declared state"
                )
            if (src, sym) in delta:
                raise InvalidAutomatonError(
                    f"Transition function is not deterministic: ({src}, {sym}) "
                    f"leads to both {delta[(src, sym)]!r} and {tgt!r}"
                )
            delta[(src, sym)] = tgt

        for state in self.ordered_states:
            for symbol in self.ordered_alphabet:
                if (state, symbol) not in delta:
                    raise InvalidAutomatonError(
                        f"Transition function is not total: no transition for "
                        f"({state}, {symbol})"
                    )

        object.__setattr__(self, "_delta", delta)

    # -------------------------------------------------------------------------
    # Transition helpers
    # -------------------------------------------------------------------------

    @property
    def ordered_states(self) -> Tuple[str, ...]:
        return tuple(sorted(self.states))

    @property
    def ordered_alphabet(self) -> Tuple[str, ...]:
        return tuple(sorted(self.alphabet))

    def next_state(self, state: str, symbol: str) -> str:
        return self._delta[(state, symbol)]

    def transition_table(self) -> Dict[str, Dict[str, str]]:
        """Transitions grouped by source state, both levels in canonical order."""
        table: Dict[str, Dict[str, str]] = {}
        for state in self.ordered_states:
            table[state] = {
                symbol: self._delta[(state, symbol)]
                for symbol in self.ordered_alphabet
            }
        return table

    def accepts(self, word: Iterable[str]) -> bool:
        """Check if the DFA accepts a word (a string reads one symbol per character)."""
        state = self.start_state
        for symbol in word:
            if symbol not in self.alphabet:
                raise ValueError(f"Symbol {symbol!r} is not in the alphabet")
            state = self._delta[(state, symbol)]
        return state in self.accepting_states

    def _restrict(self, states: FrozenSet[str]) -> "Automaton":
        return Automaton(
            states=states,
            alphabet=self.alphabet,
            start_state=self.start_state,
            accepting_states=self.accepting_states & states,
            transition_relation=frozenset(
                (src, sym, tgt)
                for (src, sym, tgt) in self.transition_relation
                if src in states
            ),
        )

    # -------------------------------------------------------------------------
    # Reachability
    # -------------------------------------------------------------------------

    def reachable_states(self) -> FrozenSet[str]:
        """States reachable from the start state by any word."""
        reachable = {self.start_state}
        passes = 0
        changed = True
        while changed:
            changed = False
            passes += 1
            for state in list(reachable):
                for symbol in self.alphabet:
                    target = self._delta[(state, symbol)]
                    if target not in reachable:
                        reachable.add(target)
                        changed = True

        logger.debug(
            "Reachability converged after %d passes: %d of %d states",
            passes,
            len(reachable),
            len(self.states),
        )
        return frozenset(reachable)

    def remove_unreachable_states(self) -> "Automaton":
        reachable = self.reachable_states()
        if reachable == self.states:
            return self

        logger.debug(
            "Removing unreachable states: %s", ", ".join(sorted(self.states - reachable))
        )
        return self._restrict(reachable)

    # -------------------------------------------------------------------------
    # Minimization
    # -------------------------------------------------------------------------

    def compute_distinguishable_pairs(self) -> DistinguishabilityTable:
        """
        Table-filling: find every pair of states told apart by some suffix.

        Pairs that differ in acceptance are marked first. Then a pair is marked
        when some symbol leads it to an already marked pair, repeating full
        passes until one marks nothing.
        """
        table = DistinguishabilityTable(self.states)

        for p, q in table.pairs():
            if (p in self.accepting_states) != (q in self.accepting_states):
                table.mark(p, q)

        passes = 0
        changed = True
        while changed:
            changed = False
            passes += 1
            for p, q in table.pairs():
                if (p, q) in table:
                    continue
                for symbol in self.ordered_alphabet:
                    if (self._delta[(p, symbol)], self._delta[(q, symbol)]) in table:
                        table.mark(p, q)
                        changed = True
                        break

        logger.debug(
            "Table-filling converged after %d passes: %d distinguishable pairs",
            passes,
            len(table),
        )
        return table

    def equivalence_classes(self) -> List[FrozenSet[str]]:
        """Myhill-Nerode classes of the reachable part, ordered by representative."""
        pruned = self.remove_unreachable_states()
        table = pruned.compute_distinguishable_pairs()
        classes = defaultdict(set)
        for state, representative in pruned._quotient_map(table).items():
            classes[representative].add(state)
        return [frozenset(classes[rep]) for rep in sorted(classes)]

    def _quotient_map(self, table: DistinguishabilityTable) -> Dict[str, str]:
        """Map each state to the first state (canonical order) equivalent to it."""
        representative = {state: state for state in self.states}
        merged: Set[str] = set()
        for p, q in table.pairs():
            if p in merged or q in merged:
                continue
            if not table.is_distinguishable(p, q):
                representative[q] = p
                merged.add(q)
        return representative

    def merge_equivalent_states(self, table: DistinguishabilityTable) -> "Automaton":
        """Collapse every class of indistinguishable states onto its representative."""
        representative = self._quotient_map(table)
        survivors = frozenset(representative.values())
        if survivors == self.states:
            return self

        logger.debug(
            "Merging states: %s",
            ", ".join(
                f"{state}->{rep}"
                for state, rep in sorted(representative.items())
                if state != rep
            ),
        )
        return Automaton(
            states=survivors,
            alphabet=self.alphabet,
            start_state=representative[self.start_state],
            accepting_states=frozenset(
                representative[s] for s in self.accepting_states
            ),
            transition_relation=frozenset(
                (src, sym, representative[tgt])
                for (src, sym, tgt) in self.transition_relation
                if src in survivors
            ),
        )

    def minimize(self) -> "Automaton":
        """Minimize DFA: drop unreachable states, then merge equivalent ones."""
        pruned = self.remove_unreachable_states()
        table = pruned.compute_distinguishable_pairs()
        minimized = pruned.merge_equivalent_states(table)
        logger.debug(
            "Minimized %d states to %d (%d reachable)",
            len(self.states),
            len(minimized.states),
            len(pruned.states),
        )
        return minimized

    def is_minimal(self) -> bool:
        return len(self.minimize().states) == len(self.states)

    # -------------------------------------------------------------------------
    # Visualization
    # -------------------------------------------------------------------------

    def to_graphviz(self, filename: Optional[str] = None, view: bool = False) -> Digraph:
        """Generate a Graphviz diagram; rendered to <filename>.png when a filename is given."""
        dot = Digraph(
            name="DFA",
            format="png",
            graph_attr={
                "rankdir": "LR",
                "splines": "true",
                "nodesep": "0.8",
                "ranksep": "1.2",
                "fontname": "Arial",
                "bgcolor": "white",
                "pad": "0.5",
            },
            node_attr={
                "shape": "circle",
                "fontname": "Arial",
                "style": "filled",
                "fillcolor": "lightblue",
                "penwidth": "2",
            },
            edge_attr={
                "fontname": "Arial",
                "arrowsize": "0.8",
            },
        )

        state_to_id = {s: f"q{i}" for i, s in enumerate(self.ordered_states)}

        dot.node("__start__", shape="point", width="0.01", style="invis")

        for state in self.ordered_states:
            node_id = state_to_id[state]
            if state in self.accepting_states:
                dot.node(
                    node_id,
                    label=state,
                    shape="doublecircle",
                    fillcolor="lightgreen",
                )
            else:
                dot.node(node_id, label=state)

        dot.edge("__start__", state_to_id[self.start_state], penwidth="2")

        edges = defaultdict(list)
        for src, sym, tgt in self.transition_relation:
            edges[(src, tgt)].append(sym)

        for (src, tgt), symbols in sorted(edges.items()):
            label = ", ".join(sorted(symbols))
            src_id = state_to_id[src]
            tgt_id = state_to_id[tgt]
            if src == tgt:
                dot.edge(src_id, tgt_id, label=label, headport="n", tailport="n")
            else:
                dot.edge(src_id, tgt_id, label=label)

        if filename is not None:
            dot.render(filename, view=view, cleanup=True)
        return dot
