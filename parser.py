from ast_nodes import (
    Program, Label, Assignment, Instruction, ConditionalJump,
    Binary, Unary, FunctionCall, Literal, Variable,
)
from errors import ParseError
from token_stream import TokenStream


INSTRUCTIONS = frozenset({
    "SPAWN", "COLOR", "SIZE", "DRAW_LINE", "DRAW_CIRCLE", "DRAW_RECTANGLE", "FILL",
})

FUNCTIONS = frozenset({
    "GET_ACTUAL_X", "GET_ACTUAL_Y", "GET_CANVAS_SIZE", "GET_COLOR_COUNT",
    "IS_BRUSH_COLOR", "IS_BRUSH_SIZE", "IS_CANVAS_COLOR",
})

# binding power, low -> high
PRECEDENCE = {
    "OR": 1,
    "AND": 2,
    "EQ": 3, "NOT_EQ": 3, "LT": 3, "LTE": 3, "GT": 3, "GTE": 3,
    "PLUS": 4, "MINUS": 4,
    "STAR": 5, "SLASH": 5, "PERCENT": 5,
    "CARET": 6,
}

OP_TEXT = {
    "OR": "or",
    "AND": "and",
    "EQ": "==",
    "NOT_EQ": "!=",
    "LT": "<",
    "LTE": "<=",
    "GT": ">",
    "GTE": ">=",
    "PLUS": "+",
    "MINUS": "-",
    "STAR": "*",
    "SLASH": "/",
    "PERCENT": "%",
    "CARET": "^",
    "NOT": "not",
}


class Parser:
    def __init__(self, tokens):
        if not isinstance(tokens, TokenStream):
            tokens = TokenStream(tokens)
        self.tokens = tokens

    @property
    def current_token(self):
        return self.tokens.peek()

    def error_here(self, message):
        tok = self.current_token
        if tok is None:
            raise ParseError(message, 0, 0)
        raise ParseError(message, tok.line, tok.column)

    # blank lines and comments may sit between statements
    def skip_separators(self):
        while self.tokens.match("EOL") or self.tokens.match("COMMENT"):
            pass

    # ---------- TOP LEVEL ----------
    def parse(self):
        statements = []
        self.skip_separators()

        while self.current_token is not None and self.current_token.type != "EOF":
            try:
                statements.append(self.statement())
            except RecursionError:
                self.error_here("Expression nested too deeply")
            self.skip_separators()

        return Program(statements)

    # ---------- STATEMENTS ----------
    def statement(self):
        tok = self.current_token

        if tok.type == "IDENT":
            return self.ident_start_statement()

        if tok.type in INSTRUCTIONS:
            return self.instruction()

        if tok.type == "GOTO":
            return self.conditional_jump()

        self.error_here(f"Unexpected token: {tok.type}")

    def ident_start_statement(self):
        name_token = self.tokens.advance()

        # label:  name:
        if self.tokens.match("COLON"):
            return Label(name_token.value).at(name_token)

        # assignment:  name <- expr
        if self.tokens.match("ARROW"):
            value = self.parse_expression()
            return Assignment(name_token.value, value).at(name_token)

        raise ParseError("Expected assignment or label", name_token.line, name_token.column)

    def instruction(self):
        tok = self.tokens.advance()
        self.tokens.expect("LPAREN", f"Expected '(' after {tok.text}")
        args = self.arguments(tok)
        return Instruction(tok.type, args).at(tok)

    def conditional_jump(self):
        tok = self.tokens.expect("GOTO", "Expected 'GoTo'")
        self.tokens.expect("LBRACKET", "Expected '[' after GoTo")
        label = self.tokens.expect("IDENT", "Expected label identifier")
        self.tokens.expect("RBRACKET", "Expected ']' after label")
        self.tokens.expect("LPAREN", "Expected '(' before condition")
        condition = self.parse_expression()
        self.tokens.expect("RPAREN", "Expected ')' after condition")
        return ConditionalJump(label.value, condition).at(tok)

    # arg-list ')' -- the opening '(' is already consumed
    def arguments(self, owner):
        args = []
        while self.current_token is not None and self.current_token.type != "RPAREN":
            if self.current_token.type == "EOF":
                self.error_here(f"Expected ')' after {owner.text} arguments")
            args.append(self.parse_expression())

            if self.tokens.match("COMMA"):
                continue
            if self.current_token is None or self.current_token.type != "RPAREN":
                self.error_here(f"Expected ',' or ')' in {owner.text} arguments")

        self.tokens.expect("RPAREN", f"Expected ')' after {owner.text} arguments")
        return args

    # ---------- EXPRESSIONS ----------
    # precedence climbing; every binary operator folds left to right
    def parse_expression(self, floor=0):
        left = self.atom()

        while True:
            op_token = self.current_token
            if op_token is None or op_token.type not in PRECEDENCE:
                break

            prec = PRECEDENCE[op_token.type]
            if prec <= floor:
                break

            self.tokens.advance()
            right = self.parse_expression(prec)
            left = Binary(left, OP_TEXT[op_token.type], right).at(op_token)

        return left

    # atom -> function call | NUMBER | BOOLEAN | STRING | IDENT | (expr) | (not|-) atom
    def atom(self):
        tok = self.current_token
        if tok is None:
            raise ParseError("Unexpected end of input", 0, 0)

        if tok.type in FUNCTIONS:
            return self.function_call()

        if tok.type == "NUMBER":
            self.tokens.advance()
            return Literal(tok.value, "number").at(tok)

        if tok.type == "BOOLEAN":
            self.tokens.advance()
            return Literal(tok.value, "boolean").at(tok)

        if tok.type == "STRING":
            self.tokens.advance()
            return Literal(tok.value, "string").at(tok)

        if tok.type == "IDENT":
            self.tokens.advance()
            return Variable(tok.value).at(tok)

        if tok.type == "LPAREN":
            self.tokens.advance()
            node = self.parse_expression()
            self.tokens.expect("RPAREN", "Expected ')' after expression")
            return node

        if tok.type in ("NOT", "MINUS"):
            self.tokens.advance()
            return Unary(OP_TEXT[tok.type], self.atom()).at(tok)

        self.error_here(f"Unexpected token: {tok.type}")

    def function_call(self):
        tok = self.tokens.advance()
        self.tokens.expect("LPAREN", "Expected '(' after function name")
        args = self.arguments(tok)
        return FunctionCall(tok.type, args).at(tok)


def parse(tokens):
    return Parser(tokens).parse()
