import logging

import pytest

from cssbuilder import *


builder = css_selector_builder


@pytest.mark.parametrize(
    "expression,expected",
    [
        (builder.element("div"), "div"),
        (builder.id("main"), "#main"),
        (builder.class_("ad"), ".ad"),
        (builder.attr("title"), "[title]"),
        (builder.pseudo_class("hover"), ":hover"),
        (builder.pseudo_element("before"), "::before"),
        (builder.element("div").id("main"), "div#main"),
        (
            builder.id("main").class_("container").class_("editable"),
            "#main.container.editable",
        ),
        (
            builder.element("a").attr('href$=".png"').pseudo_class("focus"),
            'a[href$=".png"]:focus',
        ),
        (
            builder.element("p").pseudo_class("first-child").pseudo_class("hover"),
            "p:first-child:hover",
        ),
        (
            builder.element("input")
            .id("name")
            .class_("wide")
            .class_("required")
            .attr("type=text")
            .pseudo_class("focus")
            .pseudo_element("placeholder"),
            "input#name.wide.required[type=text]:focus::placeholder",
        ),
        (builder.element("li").pseudo_element("marker"), "li::marker"),
        (
            builder.class_("a").pseudo_class("hover").pseudo_class("focus"),
            ".a:hover:focus",
        ),
        (builder, ""),
    ],
)
def test_stringify(expression, expected):
    repr(expression)
    assert expression.stringify() == expected
    assert str(expression) == expected


@pytest.mark.parametrize(
    "build",
    [
        lambda: builder.element("a").element("div"),
        lambda: builder.id("a").id("b"),
        lambda: builder.element("p").id("a").class_("x").id("b"),
        lambda: builder.pseudo_element("before").pseudo_element("after"),
        lambda: builder.element("p").pseudo_element("a").pseudo_element("b"),
    ],
)
def test_duplicate_fragment(build):
    with pytest.raises(DuplicateFragmentError):
        build()


@pytest.mark.parametrize(
    "build",
    [
        lambda: builder.class_("x").id("y"),
        lambda: builder.id("main").element("div"),
        lambda: builder.class_("x").element("div"),
        lambda: builder.attr("href").class_("x"),
        lambda: builder.pseudo_class("hover").attr("href"),
        lambda: builder.pseudo_element("after").pseudo_class("hover"),
        lambda: builder.pseudo_element("after").class_("x"),
        lambda: builder.element("a").pseudo_class("hover").id("x"),
    ],
)
def test_out_of_order_fragment(build):
    with pytest.raises(OutOfOrderFragmentError):
        build()


def test_duplicate_checked_before_order():
    with pytest.raises(DuplicateFragmentError):
        builder.element("a").class_("x").element("div")


def test_error_details():
    with pytest.raises(SelectorBuilderException) as excinfo:
        builder.element("a").class_("x").id("y")
    e = excinfo.value
    assert isinstance(e, OutOfOrderFragmentError)
    assert e.part == SelectorPart.ID
    assert e.selector == "a.x"
    assert str(e).startswith(
        "Selector parts should be arranged in the following order: "
        "element, id, class, attribute, pseudo-class, pseudo-element."
    )

    with pytest.raises(DuplicateFragmentError) as excinfo:
        builder.pseudo_element("before").pseudo_element("after")
    assert excinfo.value.part == SelectorPart.PSEUDO_ELEMENT
    assert str(excinfo.value).startswith(
        "Element, id and pseudo-element should not occur more than one time "
        "inside the selector."
    )


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="cssbuilder"):
        with pytest.raises(OutOfOrderFragmentError):
            builder.class_("x").id("y")
    assert "rejecting ID on '.x': Selector parts should be arranged" in caplog.text


def test_empty_fragments():
    # Empty element, id and pseudo-element count as absent.
    assert builder.element("").element("b").stringify() == "b"
    assert builder.id("").id("main").stringify() == "#main"
    assert builder.pseudo_element("").pseudo_element("after").stringify() == "::after"
    # An empty class is still a class.
    assert builder.class_("").stringify() == "."
    with pytest.raises(OutOfOrderFragmentError):
        builder.class_("").id("main")


def test_attr_overwrites():
    assert builder.element("a").attr("href").attr("title").stringify() == "a[title]"


def test_immutability():
    base = builder.element("div").class_("a")
    first = base.class_("b")
    assert base.stringify() == "div.a"
    assert first.stringify() == "div.a.b"
    assert first is not base
    assert base.pseudo_class("hover").stringify() == "div.a:hover"
    assert base.stringify() == "div.a"
    assert base.class_names == ("a",)
    assert builder.stringify() == ""
    assert builder.parts() == []


def test_failed_call_leaves_receiver_valid():
    expr = builder.element("a").pseudo_class("hover")
    with pytest.raises(OutOfOrderFragmentError):
        expr.class_("x")
    assert expr.pseudo_element("after").stringify() == "a:hover::after"


def test_independent_chains():
    a = builder.element("a")
    b = builder.element("b")
    assert a.id("x").stringify() == "a#x"
    assert b.id("y").stringify() == "b#y"
    assert builder.element("i").stringify() == "i"


def test_parts():
    expr = builder.element("a").class_("x").class_("y").pseudo_class("hover")
    assert expr.parts() == [
        SelectorPart.ELEMENT,
        SelectorPart.CLASS,
        SelectorPart.PSEUDO_CLASS,
    ]


def test_combine():
    expr = builder.combine(
        builder.element("div").id("main").class_("container").class_("draggable"),
        "+",
        builder.combine(
            builder.element("table").id("data"),
            "~",
            builder.combine(
                builder.element("tr").pseudo_class("nth-of-type(even)"),
                " ",
                builder.element("td").pseudo_class("nth-of-type(even)"),
            ),
        ),
    )
    assert isinstance(expr, CombinedExpression)
    assert expr.stringify() == (
        "div#main.container.draggable + table#data ~ "
        "tr:nth-of-type(even)   td:nth-of-type(even)"
    )


@pytest.mark.parametrize(
    "combinator,glyph,expected",
    [
        (Combinator.DESCENDANT, " ", "div   p"),
        (Combinator.CHILD, ">", "div > p"),
        (Combinator.NEXT_SIBLING, "+", "div + p"),
        (Combinator.SUBSEQUENT_SIBLING, "~", "div ~ p"),
        (">", ">", "div > p"),
        # Unrecognized combinators pass through.
        ("||", "||", "div || p"),
    ],
)
def test_combinators(combinator, glyph, expected):
    expr = builder.combine(builder.element("div"), combinator, builder.element("p"))
    assert expr.combinator == glyph
    assert str(expr) == expected


def test_combine_snapshot():
    left = builder.element("div")
    expr = left.combine(left, ">", "p.note")
    left.class_("late")
    assert expr.left == "div"
    assert expr.right == "p.note"
    assert repr(expr) == "<CombinedExpression 'div > p.note'>"


def test_combine_bad_operand():
    with pytest.raises(ValueError):
        builder.combine(builder.element("div"), ">", 42)


def test_combinator_glyphs():
    assert Combinator.glyphs() == (" ", ">", "+", "~")


def test_rectangle():
    r = Rectangle(10, 20)
    assert r.width == 10
    assert r.height == 20
    assert r.area() == 200
    assert r.get_area() == 200
    assert make_rectangle(3, 4).area() == 12
    assert make_rectangle(3, 4) == Rectangle(3, 4)
    assert Rectangle(3, 4) != Rectangle(4, 3)
    assert repr(r) == "<Rectangle width=10 height=20>"


@pytest.mark.parametrize(
    "value,expected",
    [
        ([1, 2, 3], "[1,2,3]"),
        ({"width": 10, "height": 20}, '{"width":10,"height":20}'),
        (Rectangle(10, 20), '{"width":10,"height":20}'),
        ("text", '"text"'),
        (None, "null"),
    ],
)
def test_encode_record(value, expected):
    assert encode_record(value) == expected


def test_encode_record_skips_private_fields():
    r = Rectangle(1, 2)
    r._cache = 2
    assert encode_record(r) == '{"width":1,"height":2}'


def test_encode_record_non_record():
    with pytest.raises(TypeError):
        encode_record(object())


class Circle:
    def __init__(self, radius):
        self.radius = radius

    def area(self):
        return 3 * self.radius ** 2


class Lookup:
    def __init__(self, key):
        self.value = {"a": 1}[key]


def test_decode_record_constructor_error():
    assert decode_record(Lookup, '{"key":"a"}').value == 1
    with pytest.raises(KeyError):
        decode_record(Lookup, '{"key":"b"}')


def test_decode_record_builtin():
    assert decode_record(dict, '[[["a", 1]]]') == {"a": 1}
    with pytest.raises(RecordDecodeError) as excinfo:
        decode_record(dict, "[1]")
    assert excinfo.value.text == "[1]"


def test_decode_record():
    r = decode_record(Rectangle, encode_record(Rectangle(10, 20)))
    assert isinstance(r, Rectangle)
    assert r == Rectangle(10, 20)
    assert r.area() == 200

    r = decode_record(Rectangle, encode_record({"width": 10, "height": 20}))
    assert r == Rectangle(10, 20)

    c = decode_record(Circle(1), '{"radius":10}')
    assert isinstance(c, Circle)
    assert c.radius == 10

    assert decode_record(Rectangle, "[5, 6]") == Rectangle(5, 6)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "{",
        "10",
        '"width"',
        '{"width":10}',
        '{"width":10,"height":20,"depth":30}',
    ],
)
def test_bad_record(text):
    with pytest.raises(RecordDecodeError) as excinfo:
        decode_record(Rectangle, text)
    assert excinfo.value.text == text
    str(excinfo.value)
