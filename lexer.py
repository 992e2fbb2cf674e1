from errors import LexicalError


KEYWORDS = {
    "spawn": "SPAWN",
    "color": "COLOR",
    "size": "SIZE",
    "drawline": "DRAW_LINE",
    "drawcircle": "DRAW_CIRCLE",
    "drawrectangle": "DRAW_RECTANGLE",
    "fill": "FILL",
    "goto": "GOTO",
    "getactualx": "GET_ACTUAL_X",
    "getactualy": "GET_ACTUAL_Y",
    "getcanvassize": "GET_CANVAS_SIZE",
    "getcolorcount": "GET_COLOR_COUNT",
    "isbrushcolor": "IS_BRUSH_COLOR",
    "isbrushsize": "IS_BRUSH_SIZE",
    "iscanvascolor": "IS_CANVAS_COLOR",
    "true": "BOOLEAN",
    "false": "BOOLEAN",
    "and": "AND",
    "or": "OR",
    "not": "NOT",
}

# two-character operators are tried before one-character ones
OPERATORS = {
    "<-": "ARROW",
    "==": "EQ",
    "!=": "NOT_EQ",
    ">=": "GTE",
    "<=": "LTE",
    "&&": "AND",
    "||": "OR",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "%": "PERCENT",
    "^": "CARET",
    ">": "GT",
    "<": "LT",
    ":": "COLON",
    "(": "LPAREN",
    ")": "RPAREN",
    "[": "LBRACKET",
    "]": "RBRACKET",
    ",": "COMMA",
}


class Token:
    def __init__(self, type, text, value=None, line=1, column=1):
        self.type = type
        self.text = text
        self.value = value
        self.line = line
        self.column = column

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.text, self.value, self.line, self.column) == (
            other.type, other.text, other.value, other.line, other.column
        )

    def __hash__(self):
        return hash((self.type, self.text, self.line, self.column))

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value!r})@{self.line}:{self.column}"
        return f"{self.type}@{self.line}:{self.column}"


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    @staticmethod
    def prepare(source):
        # the editor always submits the program with a trailing newline
        return source + "\n"

    def advance(self):
        self.pos += 1
        self.column += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    def new_line(self):
        self.line += 1
        self.column = 1

    def make(self, type, start, start_line, start_col, value=None):
        return Token(type, self.text[start:self.pos], value, line=start_line, column=start_col)

    def read_comment(self):
        start, start_line, start_col = self.pos, self.line, self.column
        while self.current_char is not None and self.current_char not in "\r\n":
            self.advance()
        return self.make("COMMENT", start, start_line, start_col)

    def read_number(self):
        start, start_line, start_col = self.pos, self.line, self.column
        while self.current_char is not None and self.current_char.isdecimal():
            self.advance()
        return self.make("NUMBER", start, start_line, start_col, value=int(self.text[start:self.pos]))

    def read_identifier(self):
        start, start_line, start_col = self.pos, self.line, self.column
        while self.current_char is not None and (self.current_char.isalnum() or self.current_char == "_"):
            self.advance()
        word = self.text[start:self.pos]
        kind = KEYWORDS.get(word.lower())
        if kind is None:
            return self.make("IDENT", start, start_line, start_col, value=word)
        if kind == "BOOLEAN":
            return self.make(kind, start, start_line, start_col, value=(word.lower() == "true"))
        return self.make(kind, start, start_line, start_col)

    def read_string(self):
        start, start_line, start_col = self.pos, self.line, self.column
        self.advance()  # opening quote
        while self.current_char is not None and self.current_char != '"':
            if self.current_char in "\r\n":
                # keep line bookkeeping right for strings spanning lines
                if self.current_char == "\r" and self.peek() == "\n":
                    self.advance()
                self.advance()
                self.new_line()
                continue
            self.advance()
        if self.current_char is None:
            raise LexicalError("Unterminated string literal", start_line, start_col)
        self.advance()  # closing quote
        token = self.make("STRING", start, start_line, start_col)
        token.value = token.text[1:-1]
        return token

    def read_operator(self):
        start, start_line, start_col = self.pos, self.line, self.column
        pair = self.text[self.pos:self.pos + 2]
        if len(pair) == 2 and pair in OPERATORS:
            self.advance()
            self.advance()
            return self.make(OPERATORS[pair], start, start_line, start_col)
        if self.current_char in OPERATORS:
            self.advance()
            return self.make(OPERATORS[self.text[start]], start, start_line, start_col)
        return None

    def get_next_token(self):
        while self.current_char is not None:

            # carriage returns (alone or as \r\n) end the line without a token
            if self.current_char == "\r":
                self.advance()
                if self.current_char == "\n":
                    self.advance()
                self.new_line()
                continue

            # EOL is a real token (statement terminator)
            if self.current_char == "\n":
                token = Token("EOL", "\n", line=self.line, column=self.column)
                self.advance()
                self.new_line()
                return token

            if self.current_char.isspace():
                self.advance()
                continue

            if self.current_char == "/" and self.peek() == "/":
                return self.read_comment()

            if self.current_char.isdecimal():
                return self.read_number()

            if self.current_char.isalpha() or self.current_char == "_":
                return self.read_identifier()

            if self.current_char == '"':
                return self.read_string()

            token = self.read_operator()
            if token is not None:
                return token

            raise LexicalError(f"Unrecognized character: '{self.current_char}'", self.line, self.column)

        return Token("EOF", "", line=self.line, column=self.column)

    def tokenize(self):
        tokens = []
        while True:
            token = self.get_next_token()
            tokens.append(token)
            if token.type == "EOF":
                return tokens


def tokenize(source):
    return Lexer(source).tokenize()
