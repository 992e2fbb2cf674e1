import pytest

from errors import LexicalError
from lexer import Lexer, Token, tokenize


def types(source):
    return [t.type for t in tokenize(source)]


def test_empty_source_is_just_eof():
    tokens = tokenize("")
    assert tokens == [Token("EOF", "", line=1, column=1)]


def test_spawn_statement():
    assert types("Spawn(0, 5)\n") == [
        "SPAWN", "LPAREN", "NUMBER", "COMMA", "NUMBER", "RPAREN", "EOL", "EOF",
    ]


def test_keywords_are_case_insensitive():
    assert types("SPAWN spawn SpAwN DrawLine drawline GETACTUALX goto GoTo") == [
        "SPAWN", "SPAWN", "SPAWN", "DRAW_LINE", "DRAW_LINE", "GET_ACTUAL_X", "GOTO", "GOTO", "EOF",
    ]


def test_every_query_function_has_its_own_kind():
    src = "GetActualX GetActualY GetCanvasSize GetColorCount IsBrushColor IsBrushSize IsCanvasColor"
    assert types(src)[:-1] == [
        "GET_ACTUAL_X", "GET_ACTUAL_Y", "GET_CANVAS_SIZE", "GET_COLOR_COUNT",
        "IS_BRUSH_COLOR", "IS_BRUSH_SIZE", "IS_CANVAS_COLOR",
    ]


def test_identifier_keeps_original_spelling():
    tok = tokenize("my_Var2")[0]
    assert tok.type == "IDENT"
    assert tok.value == "my_Var2"


def test_identifier_may_start_with_underscore_but_not_digit():
    tokens = tokenize("_x 2x")
    assert [(t.type, t.text) for t in tokens[:-1]] == [
        ("IDENT", "_x"), ("NUMBER", "2"), ("IDENT", "x"),
    ]


def test_boolean_literals():
    tokens = tokenize("true FALSE True")
    assert [(t.type, t.value) for t in tokens[:-1]] == [
        ("BOOLEAN", True), ("BOOLEAN", False), ("BOOLEAN", True),
    ]


def test_number_literal_value():
    tok = tokenize("00123")[0]
    assert tok.type == "NUMBER"
    assert tok.value == 123
    assert tok.text == "00123"


def test_two_char_operators_win_over_prefixes():
    assert types("<- == != >= <= && ||")[:-1] == [
        "ARROW", "EQ", "NOT_EQ", "GTE", "LTE", "AND", "OR",
    ]


def test_single_char_operators():
    assert types("+ - * / % ^ > < : ( ) [ ] ,")[:-1] == [
        "PLUS", "MINUS", "STAR", "SLASH", "PERCENT", "CARET", "GT", "LT",
        "COLON", "LPAREN", "RPAREN", "LBRACKET", "RBRACKET", "COMMA",
    ]


def test_arrow_without_spaces():
    # x<-1 is an assignment, not a comparison with -1
    assert types("x<-1")[:-1] == ["IDENT", "ARROW", "NUMBER"]


def test_word_operators():
    assert types("a and b or not c")[:-1] == ["IDENT", "AND", "IDENT", "OR", "NOT", "IDENT"]


def test_string_literal_has_no_escapes():
    tok = tokenize('"Red\\n"')[0]
    assert tok.type == "STRING"
    assert tok.value == "Red\\n"
    assert tok.text == '"Red\\n"'


def test_unterminated_string():
    with pytest.raises(LexicalError) as info:
        tokenize('Color("Red)\n')
    assert "Unterminated string" in info.value.message
    assert info.value.line == 1
    assert info.value.position == 7


def test_carriage_return_inside_string_counts_as_line_break():
    tokens = tokenize('Color("a\rb")\rFill()')
    fill = [t for t in tokens if t.type == "FILL"][0]
    assert fill.line == 3
    tokens = tokenize('Color("a\r\nb")\nFill()')
    fill = [t for t in tokens if t.type == "FILL"][0]
    assert fill.line == 3


def test_unrecognized_character_reports_location():
    with pytest.raises(LexicalError) as info:
        tokenize("a <- 1\nb <- 2 $ 3")
    err = info.value
    assert "'$'" in err.message
    assert (err.line, err.position) == (2, 8)
    assert "at line 2, position 8" in str(err)


def test_lone_bang_and_equals_are_errors():
    with pytest.raises(LexicalError):
        tokenize("a ! b")
    with pytest.raises(LexicalError):
        tokenize("a = b")


def test_comment_runs_to_end_of_line():
    tokens = tokenize("Fill() // paint it\nx <- 1")
    comment = [t for t in tokens if t.type == "COMMENT"][0]
    assert comment.text == "// paint it"
    assert [t.type for t in tokens] == [
        "FILL", "LPAREN", "RPAREN", "COMMENT", "EOL", "IDENT", "ARROW", "NUMBER", "EOF",
    ]


def test_single_slash_is_division():
    assert types("6 / 3")[:-1] == ["NUMBER", "SLASH", "NUMBER"]


def test_line_and_column_tracking():
    tokens = tokenize("a <- 1\n  b <- 22\n")
    located = [(t.type, t.line, t.column) for t in tokens]
    assert located == [
        ("IDENT", 1, 1), ("ARROW", 1, 3), ("NUMBER", 1, 6), ("EOL", 1, 7),
        ("IDENT", 2, 3), ("ARROW", 2, 5), ("NUMBER", 2, 8), ("EOL", 2, 10),
        ("EOF", 3, 1),
    ]


def test_carriage_returns_advance_line_without_token():
    tokens = tokenize("a\r\nb\rc\n")
    assert [(t.type, t.line) for t in tokens] == [
        ("IDENT", 1), ("IDENT", 2), ("IDENT", 3), ("EOL", 3), ("EOF", 4),
    ]


def test_tabs_and_other_whitespace_are_skipped():
    assert types("\tSize( \t3 )")[:-1] == ["SIZE", "LPAREN", "NUMBER", "RPAREN"]


def test_lexing_is_deterministic():
    src = 'Spawn(1, 2)\nColor("Blue")\nloop:\nn <- n + 1\nGoTo [loop] (n < 10)\n'
    assert tokenize(src) == tokenize(src)


def test_token_texts_rebuild_the_source():
    src = 'Spawn(1,2)\nColor("Blue")\n// done\nk<-3^2\n'
    rebuilt = "".join(t.text for t in tokenize(src))
    assert rebuilt == src


def test_prepare_appends_newline():
    tokens = Lexer(Lexer.prepare("Fill()")).tokenize()
    assert [t.type for t in tokens][-2:] == ["EOL", "EOF"]
