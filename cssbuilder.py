"""
:mod:`cssbuilder` is a CSS selector builder, bundled with a tiny
rectangle value object and JSON record helpers. It only assembles
selector text; nothing is parsed or matched against a document.

Selectors are assembled through chained calls on
:data:`css_selector_builder`. Each call returns a new expression, and
the selector grammar (ordering and single occurrence of some parts) is
enforced at the offending call:

.. doctest::

   >>> from cssbuilder import css_selector_builder as builder
   >>> builder.id('main').class_('container').class_('editable').stringify()
   '#main.container.editable'
   >>> builder.element('a').attr('href$=".png"').pseudo_class('focus').stringify()
   'a[href$=".png"]:focus'
   >>> builder.combine(
   ...     builder.element('div').id('main').class_('container').class_('draggable'),
   ...     '+',
   ...     builder.combine(
   ...         builder.element('table').id('data'),
   ...         '~',
   ...         builder.combine(
   ...             builder.element('tr').pseudo_class('nth-of-type(even)'),
   ...             ' ',
   ...             builder.element('td').pseudo_class('nth-of-type(even)'),
   ...         ),
   ...     ),
   ... ).stringify()
   'div#main.container.draggable + table#data ~ tr:nth-of-type(even)   td:nth-of-type(even)'
"""

import inspect
import json
import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ExpressionLike = Union[str, "Expression"]
CombinatorLike = Union[str, "Combinator"]


class Rectangle(object):
    """
    Represents a rectangle.

    Attributes:
        width  (:class:`float`)
        height (:class:`float`)
    """

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height

    def __repr__(self) -> str:
        return "<Rectangle width=%r height=%r>" % (self.width, self.height)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rectangle):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height)

    def area(self) -> float:
        return self.width * self.height

    def get_area(self) -> float:
        """Alias of :meth:`area`."""
        return self.area()


def make_rectangle(width: float, height: float) -> Rectangle:
    return Rectangle(width, height)


class RecordDecodeError(Exception):
    """
    Exception raised when :func:`decode_record` cannot turn its input
    into an instance of the target type.

    Attributes:
        text (:class:`str`):
            The JSON text being decoded.
        why (:class:`str`):
            Reason of the exception.
    """

    def __init__(self, text: str, why: str) -> None:
        self.text = text
        self.why = why

    def __str__(self) -> str:
        return "cannot decode record %s: %s" % (repr(self.text), self.why)


# Fallback for json.dumps: encode arbitrary objects as their public
# instance attributes.
def _record_fields(value: Any) -> Any:
    try:
        fields = vars(value)
    except TypeError:
        raise TypeError(
            "object of type %s is not a record" % type(value).__name__
        ) from None
    return {name: val for name, val in fields.items() if not name.startswith("_")}


def encode_record(value: Any) -> str:
    """
    Returns the compact JSON representation of `value`.

    Plain JSON values are encoded as is; other objects are encoded as
    their public instance attributes, in definition order.

    .. doctest::

       >>> from cssbuilder import Rectangle, encode_record
       >>> encode_record([1, 2, 3])
       '[1,2,3]'
       >>> encode_record(Rectangle(10, 20))
       '{"width":10,"height":20}'
    """
    return json.dumps(value, separators=(",", ":"), default=_record_fields)


def decode_record(prototype: Any, text: str) -> Any:
    """
    Reconstructs an object of the type of `prototype` from JSON text.

    The field values found in `text` (object values or array items, in
    order of appearance) are passed positionally to the constructor.
    `prototype` may be a class or an instance of that class.

    :class:`RecordDecodeError` is raised if `text` is not valid JSON, if
    it does not hold an object or an array, or if its values do not fit
    the constructor's signature. Errors raised by the constructor itself
    propagate, except for builtins without an introspectable signature,
    whose :class:`TypeError` is taken as a bad argument list.

    Args:
        prototype: target class, or an instance of it
        text:      JSON text, e.g. as produced by :func:`encode_record`

    Returns:
        The reconstructed object.
    """
    cls = prototype if isinstance(prototype, type) else type(prototype)
    try:
        obj = json.loads(text)
    except ValueError as e:
        logger.debug("rejecting record text %r: %s", text, e)
        raise RecordDecodeError(text, "invalid JSON: %s" % e) from e
    if isinstance(obj, dict):
        values = list(obj.values())  # type: List[Any]
    elif isinstance(obj, list):
        values = obj
    else:
        logger.debug("rejecting record text %r: not an object or array", text)
        raise RecordDecodeError(text, "expecting an object or an array")
    try:
        signature = inspect.signature(cls)
    except ValueError:
        # Builtins without an introspectable signature report a bad
        # argument list only when called.
        signature = None
    try:
        if signature is not None:
            signature.bind(*values)
        else:
            return cls(*values)
    except TypeError as e:
        logger.debug("rejecting record text %r for %s: %s", text, cls.__name__, e)
        raise RecordDecodeError(
            text, "%d value(s) do not fit %s(): %s" % (len(values), cls.__name__, e)
        ) from e
    return cls(*values)


class SelectorBuilderException(Exception):
    """
    Exception raised when a selector part is appended in violation of
    the selector grammar.

    Attributes:
        part (:class:`SelectorPart`):
            The part being appended.
        selector (:class:`str`):
            Rendering of the expression the part was appended to.
    """

    MESSAGE = ""

    def __init__(self, part: "SelectorPart", selector: str) -> None:
        self.part = part
        self.selector = selector

    def __str__(self) -> str:
        return "%s (appending %s to %s)" % (
            self.MESSAGE,
            self.part.name.lower().replace("_", "-"),
            repr(self.selector),
        )


class DuplicateFragmentError(SelectorBuilderException):
    """Element, id or pseudo-element appended a second time."""

    MESSAGE = (
        "Element, id and pseudo-element should not occur more than one time "
        "inside the selector."
    )


class OutOfOrderFragmentError(SelectorBuilderException):
    """A part appended after a part that should follow it."""

    MESSAGE = (
        "Selector parts should be arranged in the following order: "
        "element, id, class, attribute, pseudo-class, pseudo-element."
    )


class Expression(object):
    """
    Base of selector expressions.

    Both variants render to text through :meth:`stringify`, which is
    also what :func:`str` returns.
    """

    # Meant to be implemented by subclasses.
    def stringify(self) -> str:  # pragma: no cover
        raise NotImplementedError

    def __str__(self) -> str:
        return self.stringify()

    def __repr__(self) -> str:
        return "<%s %s>" % (type(self).__name__, repr(self.stringify()))

    @staticmethod
    def combine(
        left: ExpressionLike, combinator: CombinatorLike, right: ExpressionLike
    ) -> "CombinedExpression":
        """
        Joins two expressions with a combinator.

        Both operands are rendered right away; later calls on them (which
        return new expressions anyway) have no effect on the result.
        Plain strings are taken as already rendered selectors.

        `combinator` is either a :class:`Combinator` or any string; the
        latter is used verbatim.
        """
        if isinstance(combinator, Combinator):
            glyph = combinator.value
        else:
            glyph = combinator
            if glyph not in Combinator.glyphs():
                logger.debug("unrecognized combinator %r used verbatim", glyph)
        return CombinedExpression(_render(left), glyph, _render(right))


def _render(expression: ExpressionLike) -> str:
    if isinstance(expression, str):
        return expression
    if isinstance(expression, Expression):
        return expression.stringify()
    raise ValueError("not a selector expression: %s" % repr(expression))


class SelectorExpression(Expression):
    """
    Represents a (possibly partial) compound selector.

    A compound selector is made of the following parts, in this
    order::

        element#id.class[attr]:pseudo-class::pseudo-element
                  \\----/      \\----------/
                  Can be several occurrences

    Element, id and pseudo-element occur at most once. Expressions are
    immutable: every builder method returns a new expression and leaves
    the receiver untouched, so a partial expression can be shared and
    extended in different directions.

    :class:`DuplicateFragmentError` is raised when element, id or
    pseudo-element is appended a second time;
    :class:`OutOfOrderFragmentError` is raised when a part is appended
    after a part that should follow it. The attribute part may be
    appended more than once; the last value wins.

    Attributes:
        element_name        (:class:`Optional`\\[:class:`str`])
        id_name             (:class:`Optional`\\[:class:`str`])
        class_names         (:class:`Tuple`\\[:class:`str`, ...])
        attribute           (:class:`Optional`\\[:class:`str`])
        pseudo_classes      (:class:`Tuple`\\[:class:`str`, ...])
        pseudo_element_name (:class:`Optional`\\[:class:`str`])
    """

    def __init__(
        self,
        *,
        element_name: Optional[str] = None,
        id_name: Optional[str] = None,
        class_names: Iterable[str] = (),
        attribute: Optional[str] = None,
        pseudo_classes: Iterable[str] = (),
        pseudo_element_name: Optional[str] = None
    ) -> None:
        self.element_name = element_name
        self.id_name = id_name
        self.class_names = tuple(class_names)  # type: Tuple[str, ...]
        self.attribute = attribute
        self.pseudo_classes = tuple(pseudo_classes)  # type: Tuple[str, ...]
        self.pseudo_element_name = pseudo_element_name

    def stringify(self) -> str:
        s = ""
        if self.element_name:
            s += self.element_name
        if self.id_name:
            s += "#%s" % self.id_name
        s += "".join(".%s" % class_ for class_ in self.class_names)
        if self.attribute:
            s += "[%s]" % self.attribute
        s += "".join(":%s" % pseudo for pseudo in self.pseudo_classes)
        if self.pseudo_element_name:
            s += "::%s" % self.pseudo_element_name
        return s

    def element(self, name: str) -> "SelectorExpression":
        """Type selector, e.g. ``div``."""
        self._check(SelectorPart.ELEMENT)
        return SelectorExpression(element_name=name)

    def id(self, name: str) -> "SelectorExpression":
        """ID selector, e.g. ``#main``."""
        self._check(SelectorPart.ID)
        return self._derive(id_name=name)

    def class_(self, name: str) -> "SelectorExpression":
        """Class selector, e.g. ``.container``. May be repeated."""
        self._check(SelectorPart.CLASS)
        return self._derive(class_names=self.class_names + (name,))

    def attr(self, value: str) -> "SelectorExpression":
        """
        Attribute selector; `value` is the text between the brackets,
        e.g. ``href$=".png"``. Appending again replaces the value.
        """
        self._check(SelectorPart.ATTRIBUTE)
        return self._derive(attribute=value)

    def pseudo_class(self, name: str) -> "SelectorExpression":
        """Pseudo-class, e.g. ``:focus``. May be repeated."""
        self._check(SelectorPart.PSEUDO_CLASS)
        return self._derive(pseudo_classes=self.pseudo_classes + (name,))

    def pseudo_element(self, name: str) -> "SelectorExpression":
        """Pseudo-element, e.g. ``::before``."""
        self._check(SelectorPart.PSEUDO_ELEMENT)
        return self._derive(pseudo_element_name=name)

    def parts(self) -> List["SelectorPart"]:
        """Parts present in the expression, in grammar order."""
        present = [
            (SelectorPart.ELEMENT, self.element_name),
            (SelectorPart.ID, self.id_name),
            (SelectorPart.CLASS, self.class_names),
            (SelectorPart.ATTRIBUTE, self.attribute),
            (SelectorPart.PSEUDO_CLASS, self.pseudo_classes),
            (SelectorPart.PSEUDO_ELEMENT, self.pseudo_element_name),
        ]
        return [part for part, value in present if value]

    def _check(self, part: "SelectorPart") -> None:
        parts = self.parts()
        if part.unique and part in parts:
            error = DuplicateFragmentError(part, self.stringify())
        elif any(present.value > part.value for present in parts):
            error = OutOfOrderFragmentError(part, self.stringify())
        else:
            return
        logger.debug(
            "rejecting %s on %r: %s", part.name, error.selector, error.MESSAGE
        )
        raise error

    def _derive(self, **changes: Any) -> "SelectorExpression":
        fields = dict(
            element_name=self.element_name,
            id_name=self.id_name,
            class_names=self.class_names,
            attribute=self.attribute,
            pseudo_classes=self.pseudo_classes,
            pseudo_element_name=self.pseudo_element_name,
        )
        fields.update(changes)
        return SelectorExpression(**fields)


class CombinedExpression(Expression):
    """
    Represents two selectors joined by a combinator.

    Operands are held in rendered form. Usually constructed through
    :meth:`Expression.combine`.

    Attributes:
        left       (:class:`str`)
        combinator (:class:`str`)
        right      (:class:`str`)
    """

    def __init__(self, left: str, combinator: str, right: str) -> None:
        self.left = left
        self.combinator = combinator
        self.right = right

    def stringify(self) -> str:
        return "%s %s %s" % (self.left, self.combinator, self.right)


# Enum: basis for poor man's algebraic data type.
class SelectorPart(Enum):
    """
    Parts of a compound selector, valued in grammar order.

    - :attr:`ELEMENT`: ``div``;
    - :attr:`ID`: ``#main``;
    - :attr:`CLASS`: ``.container``;
    - :attr:`ATTRIBUTE`: ``[href]``;
    - :attr:`PSEUDO_CLASS`: ``:focus``;
    - :attr:`PSEUDO_ELEMENT`: ``::before``.
    """

    ELEMENT = 1
    ID = 2
    CLASS = 3
    ATTRIBUTE = 4
    PSEUDO_CLASS = 5
    PSEUDO_ELEMENT = 6

    @property
    def unique(self) -> bool:
        """Whether the part may occur at most once."""
        return self in (
            SelectorPart.ELEMENT,
            SelectorPart.ID,
            SelectorPart.PSEUDO_ELEMENT,
        )


class Combinator(Enum):
    """
    Combinator types, valued by their glyphs.

    Members correspond to the following combinators:

    - :attr:`DESCENDANT`: ``A B``;
    - :attr:`CHILD`: ``A > B``;
    - :attr:`NEXT_SIBLING`: ``A + B``;
    - :attr:`SUBSEQUENT_SIBLING`: ``A ~ B``.
    """

    DESCENDANT = " "
    CHILD = ">"
    NEXT_SIBLING = "+"
    SUBSEQUENT_SIBLING = "~"

    @classmethod
    def glyphs(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


css_selector_builder = SelectorExpression()
