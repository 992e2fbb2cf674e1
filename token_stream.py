from errors import ParseError


class TokenStream:
    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.index = 0

    def peek(self, offset=0):
        i = self.index + offset
        if i >= len(self.tokens):
            return None
        return self.tokens[i]

    def peek_type(self, offset=0):
        tok = self.peek(offset)
        return tok.type if tok is not None else None

    def advance(self):
        if self.index >= len(self.tokens):
            return None
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def match(self, token_type):
        if self.peek_type() == token_type:
            self.index += 1
            return True
        return False

    # consume the current token, but only if it is what we expect
    def expect(self, token_type, message):
        tok = self.peek()
        if tok is None:
            raise ParseError(message, 0, 0)
        if tok.type != token_type:
            raise ParseError(message, tok.line, tok.column)
        self.index += 1
        return tok

    def at_end(self):
        return self.peek() is None
