"""
Type Mapper - Literal to Python value mapping.

This module converts rdflib literals found in bundle documents into the
Python values stored on the typed model (integers, numbers and
localized text) and converts those values back into literals.
"""

import logging
import math
from decimal import Decimal
from typing import Dict, Optional, Union

from rdflib import Literal, XSD
from rdflib.term import Node

from ..common.errors import SerializationError
from ..shared.models.bundle import LocalizedText

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal]

# XSD datatypes accepted for numeric fields
NUMERIC_TYPES = frozenset({
    XSD.integer, XSD.int, XSD.long, XSD.short, XSD.byte,
    XSD.nonNegativeInteger, XSD.positiveInteger, XSD.negativeInteger,
    XSD.nonPositiveInteger, XSD.unsignedInt, XSD.unsignedLong,
    XSD.unsignedShort, XSD.unsignedByte,
    XSD.decimal, XSD.double, XSD.float,
})

# XSD datatypes accepted for text fields besides plain literals
TEXT_TYPES = frozenset({XSD.string, XSD.normalizedString, XSD.token})

# Lexical forms for non-finite doubles
_NON_FINITE: Dict[str, str] = {"inf": "INF", "-inf": "-INF", "nan": "NaN"}


class TypeMapper:
    """
    Maps literals to model values and back.

    Interpretation methods return None when a term cannot be read as the
    requested type; callers decide whether that is worth a warning.

    Example:
        >>> TypeMapper.to_integer(Literal(3))
        3
        >>> TypeMapper.to_literal(0.5)
        rdflib.term.Literal('0.5', datatype=rdflib.term.URIRef('http://www.w3.org/2001/XMLSchema#decimal'))
    """

    @staticmethod
    def to_integer(term: Node) -> Optional[int]:
        """Read an integer literal; decimals with no fraction are accepted."""
        value = TypeMapper.to_number(term)
        if isinstance(value, bool) or value is None:
            return None
        if isinstance(value, float):
            if not value.is_integer():
                return None
            return int(value)
        if isinstance(value, Decimal):
            if value != value.to_integral_value():
                return None
            return int(value)
        return value

    @staticmethod
    def to_number(term: Node) -> Optional[Number]:
        """
        Read a numeric literal.

        Returns:
            int for integer types, float for decimal/double/float, else None.
            Decimals beyond the range of a float stay Decimal.
        """
        if not isinstance(term, Literal) or term.datatype not in NUMERIC_TYPES:
            return None
        value = term.toPython()
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, Decimal):
            number = float(value)
            if value.is_finite() and not math.isfinite(number):
                return value
            return number
        if isinstance(value, float):
            return value
        return None

    @staticmethod
    def to_text(term: Node) -> Optional[LocalizedText]:
        """Read a plain, language-tagged or xsd:string literal."""
        if not isinstance(term, Literal):
            return None
        if term.datatype is not None and term.datatype not in TEXT_TYPES:
            return None
        return LocalizedText(str(term), term.language)

    @staticmethod
    def to_string(term: Node) -> Optional[str]:
        """Read a literal as a bare string, ignoring any language tag."""
        text = TypeMapper.to_text(term)
        return text.value if text is not None else None

    @staticmethod
    def to_literal(value: object, field_name: Optional[str] = None) -> Literal:
        """
        Convert a model value into a literal.

        Integers become xsd:integer, finite floats xsd:decimal and
        non-finite floats xsd:double.

        Raises:
            SerializationError: If the value has no literal representation
        """
        if isinstance(value, LocalizedText):
            return Literal(value.value, lang=value.lang)
        if isinstance(value, bool):
            return Literal(value)
        if isinstance(value, int):
            return Literal(value)
        if isinstance(value, float):
            if math.isfinite(value):
                lexical = format(Decimal(repr(value)), "f")
                if "." not in lexical:
                    lexical += ".0"
                return Literal(lexical, datatype=XSD.decimal)
            return Literal(_NON_FINITE[repr(value)], datatype=XSD.double)
        if isinstance(value, Decimal):
            return Literal(value)
        if isinstance(value, str):
            return Literal(value)
        raise SerializationError(
            f"Cannot represent {type(value).__name__} value {value!r} as a Turtle literal",
            field_name=field_name,
            value=value,
        )
