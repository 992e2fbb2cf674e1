class ASTNode:
    # Source location (1-based) of the token that starts the node.
    line: int = 0
    position: int = 0

    def at(self, token):
        self.line = token.line
        self.position = token.column
        return self


class Program(ASTNode):
    def __init__(self, statements):
        self.statements = statements


class Label(ASTNode):
    def __init__(self, name):
        self.name = name


class Assignment(ASTNode):
    def __init__(self, name, value):
        self.name = name      # variable name
        self.value = value    # expression


class Instruction(ASTNode):
    def __init__(self, op, args):
        self.op = op          # SPAWN, COLOR, SIZE, DRAW_LINE, DRAW_CIRCLE, DRAW_RECTANGLE, FILL
        self.args = args      # list[expr], arity is checked at run time


class ConditionalJump(ASTNode):
    def __init__(self, label, condition):
        self.label = label
        self.condition = condition


class Binary(ASTNode):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right


class Unary(ASTNode):
    def __init__(self, op, operand):
        self.op = op
        self.operand = operand


class FunctionCall(ASTNode):
    def __init__(self, name, args):
        self.name = name      # GET_ACTUAL_X, ..., IS_CANVAS_COLOR
        self.args = args


class Literal(ASTNode):
    def __init__(self, value, kind):
        self.value = value
        self.kind = kind      # "number", "boolean" or "string"


class Variable(ASTNode):
    def __init__(self, name):
        self.name = name
