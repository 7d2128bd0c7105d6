import os
from typing_extensions import *

from graphviz import ExecutableNotFound

from automaton import Automaton
from io_utils import format_automaton, load_from_file, save_to_file

HELP = """
Commands:
  LOADING:
    load <file> [name]           - Load a DFA from file (name defaults to file stem)
    list                         - List all loaded automata
    save <name> <file>           - Write a DFA to file

  AUTOMATA OPERATIONS:
    show <name>                  - Show DFA description
    graph <name>                 - Visualize DFA
    test <name> <word>           - Test if word is accepted (symbols comma-separated,
                                   or one character per symbol)

    TRANSFORMATIONS:
      prune <name> [result]      - Remove unreachable states
      classes <name>             - Show equivalence classes of reachable states
      minimize <name> [result]   - Minimize DFA

  GENERAL:
    delete <name>                - Delete automaton
    clear                        - Clear all
    exit                         - Exit
"""


def split_word(word: str) -> List[str]:
    """Comma-separated symbols, or one symbol per character."""
    if "," in word:
        return [symbol.strip() for symbol in word.split(",")]
    return list(word)


def main():
    """Simple interactive terminal for DFA operations."""
    automata: Dict[str, Automaton] = {}

    print("DFA Minimization Terminal - Type 'help' for commands\n")

    while True:
        try:
            command = input("> ").strip()
            if not command:
                continue

            parts = command.split()
            cmd = parts[0].lower()

            # Exit
            if cmd in ["exit", "quit"]:
                break

            # Help
            elif cmd == "help":
                print(HELP)

            # Load
            elif cmd == "load":
                if len(parts) < 2:
                    print("Usage: load <file> [name]")
                    continue
                name = (
                    parts[2]
                    if len(parts) > 2
                    else os.path.basename(parts[1]).rsplit(".", 1)[0]
                )
                try:
                    automata[name] = load_from_file(parts[1])
                    print(f"Loaded {name}: {len(automata[name].states)} states")
                except (ValueError, OSError) as e:
                    print(f"Error: {e}")

            # Save
            elif cmd == "save":
                if len(parts) < 3:
                    print("Usage: save <name> <file>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    try:
                        save_to_file(automata[parts[1]], parts[2])
                        print(f"Saved: {parts[2]}")
                    except OSError as e:
                        print(f"Error: {e}")

            # List
            elif cmd == "list":
                if automata:
                    print("Automata:")
                    for name, aut in sorted(automata.items()):
                        print(
                            f"  {name}: {len(aut.states)} states, "
                            f"{len(aut.alphabet)} symbols, "
                            f"{len(aut.accepting_states)} accepting"
                        )
                else:
                    print("Nothing loaded")

            # Delete
            elif cmd == "delete":
                if len(parts) < 2:
                    print("Usage: delete <name>")
                elif parts[1] in automata:
                    del automata[parts[1]]
                    print(f"Deleted: {parts[1]}")
                else:
                    print(f"Automaton not found: {parts[1]}")

            # Clear
            elif cmd == "clear":
                automata.clear()
                print("Cleared all")

            # Show automaton
            elif cmd == "show":
                if len(parts) < 2:
                    print("Usage: show <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    aut = automata[parts[1]]
                    minimal = "yes" if aut.is_minimal() else "no"
                    print(f"\n{parts[1]} (minimal: {minimal}):")
                    print(format_automaton(aut) + "\n")

            # Graph automaton
            elif cmd == "graph":
                if len(parts) < 2:
                    print("Usage: graph <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    try:
                        automata[parts[1]].to_graphviz(filename=parts[1], view=True)
                        print(f"Created: {parts[1]}.png")
                    except (ExecutableNotFound, OSError) as e:
                        print(f"Error: {e}")

            # Test word on automaton
            elif cmd == "test":
                if len(parts) < 3:
                    print("Usage: test <name> <word>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    try:
                        result = automata[parts[1]].accepts(split_word(parts[2]))
                        print("ACCEPTED" if result else "REJECTED")
                    except ValueError as e:
                        print(f"Error: {e}")

            # Remove unreachable states
            elif cmd == "prune":
                if len(parts) < 2:
                    print("Usage: prune <name> [result]")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    result_name = parts[2] if len(parts) > 2 else f"{parts[1]}_reach"
                    automata[result_name] = automata[parts[1]].remove_unreachable_states()
                    print(
                        f"Created: {result_name} "
                        f"({len(automata[result_name].states)} states)"
                    )

            # Equivalence classes
            elif cmd == "classes":
                if len(parts) < 2:
                    print("Usage: classes <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    for eq_class in automata[parts[1]].equivalence_classes():
                        print("  {" + ", ".join(sorted(eq_class)) + "}")

            # Minimize automaton
            elif cmd == "minimize":
                if len(parts) < 2:
                    print("Usage: minimize <name> [result]")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    result_name = parts[2] if len(parts) > 2 else f"{parts[1]}_min"
                    automata[result_name] = automata[parts[1]].minimize()
                    print(
                        f"Created: {result_name} "
                        f"({len(automata[result_name].states)} states)"
                    )

            else:
                print(f"Unknown command: {cmd}")

        except KeyboardInterrupt:
            print("\nUse 'exit' to quit")
        except EOFError:
            break

    print("Goodbye!")


if __name__ == "__main__":
    main()
