import sys
import traceback

import colorama
from colorama import Fore, Style

from errors import ExecutionError, LexicalError, ParseError, WallEError
from interpreter import DEFAULT_CANVAS_SIZE, Interpreter
from lexer import Lexer
from parser import Parser
from visualizer import TraceVisualizer


USAGE = """Usage:
  python cli.py tokens <file.pw>
  python cli.py parse <file.pw>
  python cli.py run <file.pw> [--size N] [--trace] [--max-steps N]
  (optional) --debug to show Python traceback"""


# Simple AST printer (so you can SEE what the parser built)
def ast_to_dict(node):
    if node is None:
        return None

    t = node.__class__.__name__
    d = {"type": t, "line": node.line, "position": node.position}

    if t == "Program":
        d["statements"] = [ast_to_dict(s) for s in node.statements]
    elif t == "Label":
        d["name"] = node.name
    elif t == "Assignment":
        d["name"] = node.name
        d["value"] = ast_to_dict(node.value)
    elif t == "Instruction":
        d["op"] = node.op
        d["args"] = [ast_to_dict(a) for a in node.args]
    elif t == "ConditionalJump":
        d["label"] = node.label
        d["condition"] = ast_to_dict(node.condition)
    elif t == "Binary":
        d["op"] = node.op
        d["left"] = ast_to_dict(node.left)
        d["right"] = ast_to_dict(node.right)
    elif t == "Unary":
        d["op"] = node.op
        d["operand"] = ast_to_dict(node.operand)
    elif t == "FunctionCall":
        d["name"] = node.name
        d["args"] = [ast_to_dict(a) for a in node.args]
    elif t == "Literal":
        d["kind"] = node.kind
        d["value"] = node.value
    elif t == "Variable":
        d["name"] = node.name
    else:
        d["raw"] = str(node)

    return d


def pretty(obj, indent=0):
    sp = "  " * indent
    if isinstance(obj, dict):
        lines = []
        for k, v in obj.items():
            if isinstance(v, (dict, list)):
                lines.append(f"{sp}{k}:")
                lines.append(pretty(v, indent + 1))
            else:
                lines.append(f"{sp}{k}: {v}")
        return "\n".join(lines)
    if isinstance(obj, list):
        lines = []
        for item in obj:
            lines.append(f"{sp}-")
            lines.append(pretty(item, indent + 1))
        return "\n".join(lines)
    return f"{sp}{obj}"


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return Lexer.prepare(f.read())


def describe(e):
    if isinstance(e, ExecutionError):
        return str(e)
    if isinstance(e, LexicalError):
        return f"Lexical error: {e}"
    if isinstance(e, ParseError):
        return f"Parse error: {e}"
    if isinstance(e, OSError):
        return f"File error: {e}"
    return f"Error: {e}"


def report(e, debug):
    if debug:
        traceback.print_exc()
        return
    if sys.stdout.isatty():
        print(f"{Fore.RED}{describe(e)}{Style.RESET_ALL}")
    else:
        print(describe(e))


def cmd_tokens(path, debug=False):
    try:
        tokens = Lexer(read_source(path)).tokenize()
    except (OSError, WallEError) as e:
        report(e, debug)
        sys.exit(1)

    for tok in tokens:
        print(f"{tok.line:4d}:{tok.column:<4d} {tok.type:<16} {tok.text!r}")


def cmd_parse(path, debug=False):
    try:
        tokens = Lexer(read_source(path)).tokenize()
        program = Parser(tokens).parse()
    except (OSError, WallEError) as e:
        report(e, debug)
        sys.exit(1)

    print(pretty(ast_to_dict(program)))


def cmd_run(path, canvas_size=DEFAULT_CANVAS_SIZE, trace=False, max_steps=None, debug=False):
    visualizer = TraceVisualizer()
    try:
        tokens = Lexer(read_source(path)).tokenize()
        program = Parser(tokens).parse()
        interpreter = Interpreter(visualizer, canvas_size=canvas_size, trace=trace, max_steps=max_steps)
        state = interpreter.execute(program)
    except (OSError, WallEError) as e:
        report(e, debug)
        sys.exit(1)

    cursor = f"({state.x}, {state.y})" if state.spawned else "not spawned"
    print(f"done: cursor={cursor} color={state.brush_color} size={state.brush_size} steps={state.steps}")


def take_flag(argv, flag):
    if flag in argv:
        argv.remove(flag)
        return True
    return False


def take_int_option(argv, flag, default):
    if flag not in argv:
        return default
    i = argv.index(flag)
    if i + 1 >= len(argv):
        print(f"{flag} expects a number.")
        sys.exit(1)
    raw = argv[i + 1]
    del argv[i:i + 2]
    try:
        value = int(raw)
    except ValueError:
        print(f"{flag} expects a number, got {raw}")
        sys.exit(1)
    if value <= 0:
        print(f"{flag} must be positive, got {value}")
        sys.exit(1)
    return value


def main(argv=None):
    colorama.just_fix_windows_console()
    argv = list(sys.argv[1:] if argv is None else argv)

    debug = take_flag(argv, "--debug")
    trace = take_flag(argv, "--trace")
    canvas_size = take_int_option(argv, "--size", DEFAULT_CANVAS_SIZE)
    max_steps = take_int_option(argv, "--max-steps", None)

    if len(argv) != 2:
        print(USAGE)
        sys.exit(1)

    cmd, path = argv

    if cmd == "tokens":
        cmd_tokens(path, debug=debug)
    elif cmd == "parse":
        cmd_parse(path, debug=debug)
    elif cmd == "run":
        cmd_run(path, canvas_size=canvas_size, trace=trace, max_steps=max_steps, debug=debug)
    else:
        print(f"Unknown command: {cmd}")
        sys.exit(1)


if __name__ == "__main__":
    main()
