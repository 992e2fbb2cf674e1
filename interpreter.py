from ast_nodes import (
    Program, Label, Assignment, Instruction, ConditionalJump,
    Binary, Unary, FunctionCall, Literal, Variable,
)
from errors import ExecutionError, WallERuntimeError
from lexer import Lexer
from parser import Parser
from visualizer import parse_color


DEFAULT_CANVAS_SIZE = 100
DEFAULT_BRUSH_COLOR = "transparent"
DEFAULT_BRUSH_SIZE = 1

ARITHMETIC_OPS = ("+", "-", "*", "/", "%", "^")
COMPARISON_OPS = ("==", "!=", "<", "<=", ">", ">=")
LOGICAL_OPS = ("and", "or")


def kind_of(value) -> str:
    # bool before int: True is an int to Python, never a number here
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "number"
    if isinstance(value, str):
        return "string"
    raise TypeError(f"not a runtime value: {value!r}")


def int_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def int_mod(a: int, b: int) -> int:
    return a - b * int_div(a, b)


def int_pow(a: int, b: int) -> int:
    if b >= 0:
        return a ** b
    if a == 0:
        raise ZeroDivisionError("0 cannot be raised to a negative power")
    # 1 / a ** -b truncated toward zero
    if a == 1:
        return 1
    if a == -1:
        return 1 if b % 2 == 0 else -1
    return 0


class RunState:
    """Everything one execution owns. A new one is built for every execute()."""

    def __init__(self, statements, canvas_size: int):
        self.statements = statements
        self.canvas_size = canvas_size
        self.variables = {}        # name -> int | bool | str
        self.labels = {}           # name -> statement index
        self.duplicate_labels = []  # (name, line) of every redefinition
        self.pc = 0
        self.steps = 0

        self.x = 0
        self.y = 0
        self.spawned = False
        self.brush_color = DEFAULT_BRUSH_COLOR
        self.brush_size = DEFAULT_BRUSH_SIZE

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.canvas_size and 0 <= y < self.canvas_size


class Interpreter:
    def __init__(self, visualizer, canvas_size: int = DEFAULT_CANVAS_SIZE, trace: bool = False, max_steps=None):
        if isinstance(canvas_size, bool) or not isinstance(canvas_size, int) or canvas_size <= 0:
            raise ValueError(f"canvas size must be a positive integer, got {canvas_size!r}")
        if max_steps is not None and (isinstance(max_steps, bool) or not isinstance(max_steps, int) or max_steps <= 0):
            raise ValueError(f"max_steps must be a positive integer, got {max_steps!r}")

        self.visualizer = visualizer
        self.canvas_size = canvas_size
        self.trace_enabled = trace
        self.max_steps = max_steps  # None means unbounded
        self.state = None           # RunState of the latest execute()

        self.instructions = {
            "SPAWN": self.exec_spawn,
            "COLOR": self.exec_color,
            "SIZE": self.exec_size,
            "DRAW_LINE": self.exec_draw_line,
            "DRAW_CIRCLE": self.exec_draw_circle,
            "DRAW_RECTANGLE": self.exec_draw_rectangle,
            "FILL": self.exec_fill,
        }
        self.functions = {
            "GET_ACTUAL_X": self.call_get_actual_x,
            "GET_ACTUAL_Y": self.call_get_actual_y,
            "GET_CANVAS_SIZE": self.call_get_canvas_size,
            "GET_COLOR_COUNT": self.call_get_color_count,
            "IS_BRUSH_COLOR": self.call_is_brush_color,
            "IS_BRUSH_SIZE": self.call_is_brush_size,
            "IS_CANVAS_COLOR": self.call_is_canvas_color,
        }

    # ---------- RUN LOOP ----------
    def execute(self, program) -> RunState:
        if not isinstance(program, Program):
            raise TypeError("Interpreter expects a Program node at the top")

        state = RunState(program.statements, self.canvas_size)
        self.state = state

        # Pass 1: index labels (a later definition replaces an earlier one)
        for i, stmt in enumerate(state.statements):
            if not isinstance(stmt, Label):
                continue
            if stmt.name in state.labels:
                state.duplicate_labels.append((stmt.name, stmt.line))
                if self.trace_enabled:
                    first = state.statements[state.labels[stmt.name]]
                    print(f"TRACE duplicate label '{stmt.name}' at line {stmt.line} replaces line {first.line}")
            state.labels[stmt.name] = i

        # Pass 2: run
        while state.pc < len(state.statements):
            stmt = state.statements[state.pc]
            try:
                self.step(stmt, state)
            except WallERuntimeError as e:
                raise ExecutionError(e.message, e.line, e.position) from e
            except RecursionError as e:
                raise ExecutionError("Expression nested too deeply", stmt.line, stmt.position) from e
            state.pc += 1

        return state

    def step(self, stmt, state: RunState):
        if self.max_steps is not None and state.steps >= self.max_steps:
            self.fail(stmt, f"Step limit exceeded ({self.max_steps} statements)")
        state.steps += 1

        if self.trace_enabled:
            print(f"TRACE pc={state.pc:04d} {type(stmt).__name__} line={stmt.line}")

        if isinstance(stmt, Assignment):
            state.variables[stmt.name] = self.evaluate(stmt.value, state)
        elif isinstance(stmt, Instruction):
            handler = self.instructions.get(stmt.op)
            if handler is None:
                self.fail(stmt, f"Unknown instruction: {stmt.op}")
            handler(stmt, state)
        elif isinstance(stmt, ConditionalJump):
            self.exec_conditional_jump(stmt, state)
        elif isinstance(stmt, Label):
            pass
        else:
            self.fail(stmt, f"Unknown node type: {type(stmt).__name__}")

    def exec_conditional_jump(self, jump, state: RunState):
        if not self.require_bool(jump.condition, state):
            return
        target = state.labels.get(jump.label)
        if target is None:
            self.fail(jump, f"Label '{jump.label}' not found")
        if self.trace_enabled:
            print(f"TRACE goto {jump.label} -> pc={target:04d}")
        # the run loop adds 1, so execution resumes right after the label
        state.pc = target

    # ---------- CHECKS ----------
    def fail(self, node, message: str):
        raise WallERuntimeError(message, node.line, node.position)

    def check_spawned(self, node, state: RunState):
        if not state.spawned:
            self.fail(node, "Must call Spawn before any other instructions")

    def check_arity(self, node, name: str, expected: int):
        got = len(node.args)
        if got == expected:
            return
        if expected == 0:
            self.fail(node, f"{name} takes no arguments")
        plural = "argument" if expected == 1 else "arguments"
        self.fail(node, f"{name} requires exactly {expected} {plural}, got {got}")

    def check_direction(self, node, dx: int, dy: int):
        if abs(dx) > 1 or abs(dy) > 1 or (dx == 0 and dy == 0):
            self.fail(node, f"Invalid direction vector ({dx}, {dy})")

    def require_number(self, expr, state: RunState) -> int:
        value = self.evaluate(expr, state)
        if kind_of(value) != "number":
            self.fail(expr, f"Expected numeric value, got {kind_of(value)}")
        return value

    def require_bool(self, expr, state: RunState) -> bool:
        value = self.evaluate(expr, state)
        if kind_of(value) != "boolean":
            self.fail(expr, f"Expected boolean value, got {kind_of(value)}")
        return value

    def require_string(self, expr, state: RunState) -> str:
        value = self.evaluate(expr, state)
        if kind_of(value) != "string":
            self.fail(expr, f"Expected string value, got {kind_of(value)}")
        return value

    def require_color(self, expr, state: RunState, node) -> str:
        text = self.require_string(expr, state)
        color = parse_color(text)
        if color is None:
            self.fail(node, f"Invalid color: {text}")
        return color

    # ---------- INSTRUCTIONS ----------
    def exec_spawn(self, node, state: RunState):
        if state.spawned:
            self.fail(node, "Spawn can only be called once at the beginning")
        self.check_arity(node, "Spawn", 2)

        x = self.require_number(node.args[0], state)
        y = self.require_number(node.args[1], state)
        if not state.in_bounds(x, y):
            self.fail(node, f"Spawn coordinates ({x}, {y}) are outside canvas")

        state.x, state.y = x, y
        state.spawned = True
        self.visualizer.notify_spawn(x, y)

    def exec_color(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "Color", 1)

        color = self.require_color(node.args[0], state, node)
        state.brush_color = color
        self.visualizer.notify_color_changed(color)

    def exec_size(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "Size", 1)

        size = self.require_number(node.args[0], state)
        if size <= 0:
            self.fail(node, "Brush size must be positive")

        # brushes are always odd-sized
        state.brush_size = size - 1 if size % 2 == 0 else size
        self.visualizer.notify_brush_size_changed(state.brush_size)

    def exec_draw_line(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "DrawLine", 3)

        dx = self.require_number(node.args[0], state)
        dy = self.require_number(node.args[1], state)
        distance = self.require_number(node.args[2], state)
        self.check_direction(node, dx, dy)
        if distance <= 0:
            self.fail(node, "Distance must be positive")

        end_x = state.x + dx * distance
        end_y = state.y + dy * distance
        if not state.in_bounds(end_x, end_y):
            self.fail(node, f"Drawing would go outside canvas bounds (end point ({end_x}, {end_y}))")

        self.visualizer.notify_draw_line(state.x, state.y, end_x, end_y, state.brush_color, state.brush_size)
        state.x, state.y = end_x, end_y

    def exec_draw_circle(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "DrawCircle", 3)

        dx = self.require_number(node.args[0], state)
        dy = self.require_number(node.args[1], state)
        radius = self.require_number(node.args[2], state)
        self.check_direction(node, dx, dy)
        if radius <= 0:
            self.fail(node, "Radius must be positive")

        center_x = state.x + dx * radius
        center_y = state.y + dy * radius
        if not state.in_bounds(center_x, center_y):
            self.fail(node, f"Circle center ({center_x}, {center_y}) would be outside canvas bounds")

        self.visualizer.notify_draw_circle(center_x, center_y, radius, state.brush_color, state.brush_size)
        state.x, state.y = center_x, center_y

    def exec_draw_rectangle(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "DrawRectangle", 5)

        dx = self.require_number(node.args[0], state)
        dy = self.require_number(node.args[1], state)
        distance = self.require_number(node.args[2], state)
        width = self.require_number(node.args[3], state)
        height = self.require_number(node.args[4], state)
        self.check_direction(node, dx, dy)
        if distance <= 0 or width <= 0 or height <= 0:
            self.fail(node, "Distance, width and height must be positive")

        start_x = state.x + dx * distance
        start_y = state.y + dy * distance
        end_x = start_x + width - 1
        end_y = start_y + height - 1
        if not (state.in_bounds(start_x, start_y) and state.in_bounds(end_x, end_y)):
            self.fail(node, "Rectangle would go outside canvas bounds")

        self.visualizer.notify_draw_rectangle(start_x, start_y, width, height, state.brush_color, state.brush_size)
        state.x, state.y = start_x, start_y

    def exec_fill(self, node, state: RunState):
        self.check_spawned(node, state)
        self.check_arity(node, "Fill", 0)
        self.visualizer.notify_fill(state.x, state.y, state.brush_color)

    # ---------- EXPRESSIONS ----------
    def evaluate(self, node, state: RunState):
        if isinstance(node, Literal):
            return self.eval_literal(node)
        if isinstance(node, Variable):
            if node.name not in state.variables:
                self.fail(node, f"Variable '{node.name}' not defined")
            return state.variables[node.name]
        if isinstance(node, Binary):
            return self.eval_binary(node, state)
        if isinstance(node, Unary):
            return self.eval_unary(node, state)
        if isinstance(node, FunctionCall):
            handler = self.functions.get(node.name)
            if handler is None:
                self.fail(node, f"Unknown function: {node.name}")
            return handler(node, state)
        self.fail(node, f"Unknown expression type: {type(node).__name__}")

    def eval_literal(self, node):
        if node.kind not in ("number", "boolean", "string"):
            self.fail(node, f"Unsupported literal type: {node.kind}")
        if kind_of(node.value) != node.kind:
            self.fail(node, f"Literal {node.value!r} is not a {node.kind}")
        return node.value

    def eval_binary(self, node, state: RunState):
        left = self.evaluate(node.left, state)
        right = self.evaluate(node.right, state)
        lk, rk = kind_of(left), kind_of(right)

        if node.op in LOGICAL_OPS:
            if lk != "boolean" or rk != "boolean":
                self.fail(node, f"Operator '{node.op}' expects boolean operands, got {lk} and {rk}")
            if node.op == "and":
                return left and right
            return left or right

        if node.op not in ARITHMETIC_OPS and node.op not in COMPARISON_OPS:
            self.fail(node, f"Unsupported operator: {node.op}")
        if lk != "number" or rk != "number":
            self.fail(node, f"Operator '{node.op}' expects numeric operands, got {lk} and {rk}")

        op = node.op
        if op == "==":
            return left == right
        if op == "!=":
            return left != right
        if op == "<":
            return left < right
        if op == "<=":
            return left <= right
        if op == ">":
            return left > right
        if op == ">=":
            return left >= right

        try:
            if op == "+":
                return left + right
            if op == "-":
                return left - right
            if op == "*":
                return left * right
            if op == "/":
                return int_div(left, right)
            if op == "%":
                return int_mod(left, right)
            return int_pow(left, right)
        except ZeroDivisionError:
            self.fail(node, "Division by zero")
        except (OverflowError, MemoryError):
            self.fail(node, f"Arithmetic overflow in '{op}'")

    def eval_unary(self, node, state: RunState):
        value = self.evaluate(node.operand, state)
        kind = kind_of(value)
        if node.op == "-":
            if kind != "number":
                self.fail(node, f"Operator '-' expects a numeric operand, got {kind}")
            return -value
        if node.op == "not":
            if kind != "boolean":
                self.fail(node, f"Operator 'not' expects a boolean operand, got {kind}")
            return not value
        self.fail(node, f"Unsupported unary operator: {node.op}")

    # ---------- FUNCTIONS ----------
    def call_get_actual_x(self, node, state: RunState):
        self.check_arity(node, "GetActualX", 0)
        self.check_spawned(node, state)
        return state.x

    def call_get_actual_y(self, node, state: RunState):
        self.check_arity(node, "GetActualY", 0)
        self.check_spawned(node, state)
        return state.y

    def call_get_canvas_size(self, node, state: RunState):
        self.check_arity(node, "GetCanvasSize", 0)
        return state.canvas_size

    def call_get_color_count(self, node, state: RunState):
        self.check_arity(node, "GetColorCount", 5)

        color = self.require_color(node.args[0], state, node)
        x1 = self.require_number(node.args[1], state)
        y1 = self.require_number(node.args[2], state)
        x2 = self.require_number(node.args[3], state)
        y2 = self.require_number(node.args[4], state)

        if not (state.in_bounds(x1, y1) and state.in_bounds(x2, y2)):
            return 0

        count = 0
        for x in range(min(x1, x2), max(x1, x2) + 1):
            for y in range(min(y1, y2), max(y1, y2) + 1):
                if parse_color(self.visualizer.cell_color(x, y)) == color:
                    count += 1
        return count

    def call_is_brush_color(self, node, state: RunState):
        self.check_arity(node, "IsBrushColor", 1)
        color = self.require_color(node.args[0], state, node)
        return 1 if state.brush_color == color else 0

    def call_is_brush_size(self, node, state: RunState):
        self.check_arity(node, "IsBrushSize", 1)
        size = self.require_number(node.args[0], state)
        return 1 if state.brush_size == size else 0

    def call_is_canvas_color(self, node, state: RunState):
        self.check_arity(node, "IsCanvasColor", 3)

        color = self.require_color(node.args[0], state, node)
        vertical = self.require_number(node.args[1], state)
        horizontal = self.require_number(node.args[2], state)

        x = state.x + horizontal
        y = state.y + vertical
        if not state.in_bounds(x, y):
            return 0
        return 1 if parse_color(self.visualizer.cell_color(x, y)) == color else 0


def run_source(source, visualizer, canvas_size: int = DEFAULT_CANVAS_SIZE, trace: bool = False, max_steps=None):
    """Lex, parse and execute a whole program; returns the finished Interpreter."""
    tokens = Lexer(Lexer.prepare(source)).tokenize()
    program = Parser(tokens).parse()
    interpreter = Interpreter(visualizer, canvas_size=canvas_size, trace=trace, max_steps=max_steps)
    interpreter.execute(program)
    return interpreter
