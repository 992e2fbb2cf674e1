class WallEError(Exception):
    def __init__(self, message: str, line: int = 0, position: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line
        self.position = position

    def __str__(self) -> str:
        return f"{self.message} at line {self.line}, position {self.position}"


class LexicalError(WallEError):
    pass


class ParseError(WallEError):
    pass


class WallERuntimeError(WallEError):
    pass


class ExecutionError(WallEError):
    """Raised by Interpreter.execute once a runtime error stops the program."""

    def format(self, indent: str = "") -> str:
        return f"{indent}Runtime error at line {self.line}, position {self.position}: {self.message}"

    def __str__(self) -> str:
        return self.format()
