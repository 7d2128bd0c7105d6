import pytest

from automaton import Automaton


def make_dfa(states, alphabet, start, accepting, table):
    """Build a DFA from {state: {symbol: target}}."""
    return Automaton(
        states=frozenset(states),
        alphabet=frozenset(alphabet),
        start_state=start,
        accepting_states=frozenset(accepting),
        transition_relation=frozenset(
            (src, sym, tgt) for src, row in table.items() for sym, tgt in row.items()
        ),
    )


@pytest.fixture
def twin_states_dfa():
    # q1 and q2 behave identically
    return make_dfa(
        ["q0", "q1", "q2", "q3"],
        ["a", "b"],
        "q0",
        ["q3"],
        {
            "q0": {"a": "q1", "b": "q2"},
            "q1": {"a": "q3", "b": "q1"},
            "q2": {"a": "q3", "b": "q2"},
            "q3": {"a": "q3", "b": "q3"},
        },
    )


@pytest.fixture
def unreachable_dfa():
    # q4 can't be reached from q0
    return make_dfa(
        ["q0", "q1", "q4"],
        ["a", "b"],
        "q0",
        ["q1", "q4"],
        {
            "q0": {"a": "q1", "b": "q0"},
            "q1": {"a": "q1", "b": "q0"},
            "q4": {"a": "q0", "b": "q4"},
        },
    )


@pytest.fixture
def minimal_dfa():
    # Accepts words over {a, b} whose number of a's is divisible by 3
    return make_dfa(
        ["s0", "s1", "s2"],
        ["a", "b"],
        "s0",
        ["s0"],
        {
            "s0": {"a": "s1", "b": "s0"},
            "s1": {"a": "s2", "b": "s1"},
            "s2": {"a": "s0", "b": "s2"},
        },
    )


@pytest.fixture
def chained_dfa():
    # p1, p2, p3 all equivalent; p0 unreachable and equivalent to them too
    return make_dfa(
        ["p0", "p1", "p2", "p3", "start", "sink"],
        ["0", "1"],
        "start",
        ["sink"],
        {
            "start": {"0": "p3", "1": "p1"},
            "p0": {"0": "p1", "1": "sink"},
            "p1": {"0": "p2", "1": "sink"},
            "p2": {"0": "p3", "1": "sink"},
            "p3": {"0": "p1", "1": "sink"},
            "sink": {"0": "sink", "1": "sink"},
        },
    )


SCENARIO_TEXT = """q0,q1,q2,q3
a,b
q3
q0
q0,a->q1
q0,b->q2
q1,a->q3
q1,b->q1
q2,a->q3
q2,b->q2
q3,a->q3
q3,b->q3
"""


@pytest.fixture
def scenario_text():
    return SCENARIO_TEXT


@pytest.fixture
def dfa_factory():
    return make_dfa
