"""
Unit tests for literal conversion.

Run with: python -m pytest tests/converters/test_type_mapper.py -v
"""

import math
from decimal import Decimal

import pytest
from rdflib import Literal, URIRef, XSD

from lv2bundle.common.errors import SerializationError
from lv2bundle.converters.type_mapper import TypeMapper
from lv2bundle.shared.models.bundle import LocalizedText


HUGE_DECIMAL = "1" + "0" * 400 + ".0"


@pytest.mark.unit
class TestLiteralReading:
    """Test literal to value conversion."""

    def test_integer(self):
        assert TypeMapper.to_integer(Literal("3", datatype=XSD.integer)) == 3

    def test_integral_decimal_accepted_as_integer(self):
        assert TypeMapper.to_integer(Literal("2.0", datatype=XSD.decimal)) == 2

    def test_fractional_decimal_rejected_as_integer(self):
        assert TypeMapper.to_integer(Literal("2.5", datatype=XSD.decimal)) is None

    def test_number_types(self):
        assert TypeMapper.to_number(Literal("7", datatype=XSD.integer)) == 7
        assert isinstance(TypeMapper.to_number(Literal("0.5", datatype=XSD.decimal)), float)
        assert TypeMapper.to_number(Literal("1e3", datatype=XSD.double)) == 1000.0

    def test_non_finite_double(self):
        assert math.isinf(TypeMapper.to_number(Literal("INF", datatype=XSD.double)))

    def test_decimal_beyond_float_range_kept_exact(self):
        value = TypeMapper.to_number(Literal(HUGE_DECIMAL, datatype=XSD.decimal))
        assert value == Decimal("1E+400")
        assert isinstance(value, Decimal)

    def test_large_integral_decimal_as_integer(self):
        assert TypeMapper.to_integer(Literal(HUGE_DECIMAL, datatype=XSD.decimal)) == 10 ** 400

    def test_non_numeric_rejected(self):
        assert TypeMapper.to_number(Literal("loud")) is None
        assert TypeMapper.to_number(URIRef("http://example.org/x")) is None
        assert TypeMapper.to_number(Literal("true", datatype=XSD.boolean)) is None

    def test_text(self):
        assert TypeMapper.to_text(Literal("Gain")) == LocalizedText("Gain")
        assert TypeMapper.to_text(Literal("Gain", lang="en")) == LocalizedText("Gain", "en")
        assert TypeMapper.to_text(Literal("Gain", datatype=XSD.string)) == LocalizedText("Gain")

    def test_text_rejects_numbers_and_iris(self):
        assert TypeMapper.to_text(Literal(3)) is None
        assert TypeMapper.to_text(URIRef("http://example.org/x")) is None

    def test_string_drops_language(self):
        assert TypeMapper.to_string(Literal("gain", lang="en")) == "gain"


@pytest.mark.unit
class TestLiteralWriting:
    """Test value to literal conversion."""

    def test_integer_is_xsd_integer(self):
        literal = TypeMapper.to_literal(5)
        assert literal.datatype == XSD.integer
        assert str(literal) == "5"

    def test_finite_float_is_xsd_decimal(self):
        literal = TypeMapper.to_literal(0.5)
        assert literal.datatype == XSD.decimal
        assert str(literal) == "0.5"

    def test_whole_float_keeps_fraction(self):
        assert str(TypeMapper.to_literal(24.0)) == "24.0"
        assert str(TypeMapper.to_literal(-90.0)) == "-90.0"

    def test_small_float_not_in_exponent_form(self):
        assert str(TypeMapper.to_literal(1e-7)) == "0.0000001"

    def test_non_finite_float_is_xsd_double(self):
        assert TypeMapper.to_literal(float("inf")) == Literal("INF", datatype=XSD.double)
        assert TypeMapper.to_literal(float("-inf")) == Literal("-INF", datatype=XSD.double)
        assert math.isnan(TypeMapper.to_literal(float("nan")).toPython())

    def test_localized_text(self):
        assert TypeMapper.to_literal(LocalizedText("Gain", "en")) == Literal("Gain", lang="en")

    def test_unsupported_value_raises(self):
        with pytest.raises(SerializationError) as exc_info:
            TypeMapper.to_literal(object(), "Port.default")
        assert exc_info.value.field_name == "Port.default"

    def test_decimal_round_trip(self):
        for value in (0.1, 0.25, 3.0, -1.5, 1234.5678):
            assert TypeMapper.to_number(TypeMapper.to_literal(value)) == value

    def test_large_decimal_written_as_decimal(self):
        literal = TypeMapper.to_literal(Decimal("1E+400"))
        assert literal.datatype == XSD.decimal
        assert literal.toPython() == Decimal("1E+400")
