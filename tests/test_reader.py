import pytest
from hypothesis import given, strategies as st

from sable.errors import SableSyntaxError
from sable.reader.parser import _tokens, lex, parse
from sable.types.symbol import Annotation, Symbol


def _to_source(expr):
    if isinstance(expr, list):
        return f"({' '.join(_to_source(e) for e in expr)})"
    if isinstance(expr, bool):
        return "true" if expr else "false"
    return str(expr)


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [("symbol", "a")]),
        ("'a", [("quote", "'"), ("symbol", "a")]),
        ("(a b c)", [("lparen", "("), ("symbol", "a"), ("symbol", "b"), ("symbol", "c"), ("rparen", ")")]),
        ('"hello"', [("string", '"hello"')]),
        ('"say \\"hi\\""', [("string", '"say \\"hi\\""')]),
        (" ; comment\n a b", [("symbol", "a"), ("symbol", "b")]),
        ("(def' f)", [("lparen", "("), ("symbol", "def'"), ("symbol", "f"), ("rparen", ")")]),
        ("x:list[int] :func[int,int]", [("symbol", "x:list[int]"), ("symbol", ":func[int,int]")]),
    ]
)
def test_lexer_basic(source, expected):
    assert list(lex(source)) == expected


def test_tokens_carry_kind_and_line():
    source = "(def f (x:int) :int\n  ; body\n  \"two\nlines\" x)\n"
    tokens = list(_tokens(source))
    assert tokens[:3] == [("lparen", "(", 1), ("symbol", "def", 1), ("symbol", "f", 1)]
    assert ("symbol", ":int", 1) in tokens
    assert tokens[-3:] == [("string", "\"two\nlines\"", 3), ("symbol", "x", 4), ("rparen", ")", 4)]


def test_syntax_errors_report_the_line():
    with pytest.raises(SableSyntaxError, match="line 3: unmatched"):
        list(parse("(a)\n\n(b (c)\n"))


@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", 123),
        ("-45", -45),
        ("true", True),
        ("false", False),
        ('"a\\nb"', "a\nb"),
        ('"tab\\there"', "tab\there"),
        ("foo", Symbol("foo")),
        ("empty?", Symbol("empty?")),
        ("'a", [Symbol("quote"), Symbol("a")]),
        ("'()", [Symbol("quote"), []]),
        ("'(1 2)", [Symbol("quote"), [1, 2]]),
        (":int", Annotation("int")),
        (":list[a]", Annotation("list[a]")),
        ("(f (g 1) \"s\")", [Symbol("f"), [Symbol("g"), 1], "s"]),
    ]
)
def test_parse_single_form(source, expected):
    assert list(parse(source)) == [expected]


def test_annotated_identifier_keeps_type_text():
    [sym] = list(parse("n:list[int]"))
    assert sym == Symbol("n")
    assert sym.annotation == "list[int]"
    assert str(sym) == "n:list[int]"


def test_definition_form_shape():
    [form] = list(parse("(def fact (0) :int 1)"))
    assert form == [Symbol("def"), Symbol("fact"), [0], Annotation("int"), 1]


def test_parse_multiple_forms_with_comments():
    source = """
    ; leading comment
    (set x 1) ; trailing
    (print x)
    """
    assert list(parse(source)) == [
        [Symbol("set"), Symbol("x"), 1],
        [Symbol("print"), Symbol("x")],
    ]


@pytest.mark.parametrize("source", ["(a b", "(a (b c)", "a)", ")", "'", '"\\q"', "x:"])
def test_malformed_source_is_a_syntax_error(source):
    with pytest.raises(SableSyntaxError):
        list(parse(source))


identifiers = st.from_regex(r"[a-z][a-z0-9\-]{0,8}", fullmatch=True).filter(
    lambda s: s not in ("true", "false")
)
atoms = st.one_of(st.integers(), st.booleans(), identifiers.map(Symbol))
forms = st.recursive(atoms, lambda children: st.lists(children, max_size=5), max_leaves=20)


@given(forms)
def test_printed_forms_read_back_unchanged(form):
    assert list(parse(_to_source(form))) == [form]


@given(st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=30))
def test_string_literals_round_trip(text):
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    assert list(parse(f'"{escaped}"')) == [text]
