import pytest

from lightfits.card import Card
from lightfits.verify import InvalidOperationError

from lightfits.tests import FitsTestCase


class TestCardFunctions(FitsTestCase):
    def test_integer_card(self):
        c = Card('NAXIS', 2, 'number of axes')
        assert c.image == ('NAXIS   =                    2 / number of axes'
                           .ljust(80))

    def test_boolean_card(self):
        c = Card('SIMPLE', True)
        assert c.image == 'SIMPLE  =                    T'.ljust(80)
        c = Card('EXTEND', False)
        assert c.image == 'EXTEND  =                    F'.ljust(80)

    def test_float_card(self):
        c = Card('BSCALE', 1.5)
        assert c.image == 'BSCALE  =         1.500000E+00'.ljust(80)

    def test_string_card(self):
        c = Card('OBJECT', 'M31', 'target')
        assert c.image == "OBJECT  = 'M31'                / target".ljust(80)

    def test_quote_escaping(self):
        c = Card('OBSERVER', "O'Reilly")
        assert c.image.startswith("OBSERVER= 'O''Reilly'")
        assert Card.fromstring(c.image).value == "O'Reilly"

    def test_long_string_is_truncated(self):
        c = Card('LONG', 'x' * 100)
        assert c.image == "LONG    = '" + 'x' * 68 + "'"

    def test_truncation_keeps_escaped_quotes_whole(self):
        c = Card('LONG', 'x' * 67 + "'abc")
        assert Card.fromstring(c.image).value == 'x' * 67

    def test_undefined_value(self):
        assert Card('BLANK', None).image == 'BLANK   ='.ljust(80)

    def test_long_comment_is_truncated(self):
        c = Card('A', 'v', 'c' * 100)
        assert len(c.image) == 80
        assert c.image.endswith('c')

    def test_commentary_card(self):
        assert Card('COMMENT', 'hello').image == 'COMMENT hello'.ljust(80)
        assert Card('HISTORY', 'h' * 80).image == 'HISTORY ' + 'h' * 72

    def test_end_card(self):
        assert Card('END').image == 'END' + ' ' * 77

    def test_keyword_is_upper_case(self):
        assert Card('naxis', 0).keyword == 'NAXIS'

    def test_keyword_too_long(self):
        with pytest.raises(InvalidOperationError):
            Card('TOOLONGKEY', 1)

    def test_parse_integer(self):
        c = Card.fromstring(
            'NAXIS1  =                  100 / length of axis 1')
        assert c.keyword == 'NAXIS1'
        assert c.value == 100
        assert isinstance(c.value, int)
        assert c.comment == 'length of axis 1'

    def test_parse_float(self):
        assert Card.fromstring('EXPTIME =              1.5D+02').value == 150.0
        assert Card.fromstring('CRVAL1  =                 -0.5').value == -0.5
        value = Card.fromstring('GAIN    =                  1E3').value
        assert isinstance(value, float)

    def test_parse_boolean(self):
        assert Card.fromstring('SIMPLE  =                    T').value is True
        assert Card.fromstring('EXTEND  =                    F').value is False

    def test_parse_string_with_slash(self):
        c = Card.fromstring("DATE    = '2020/01/01'         / observed")
        assert c.value == '2020/01/01'
        assert c.comment == 'observed'

    def test_parse_undefined(self):
        c = Card.fromstring('BLANK   =                      / no value')
        assert c.value is None
        assert c.comment == 'no value'

    def test_parse_commentary(self):
        c = Card.fromstring('HISTORY processed = yes / really'.ljust(80))
        assert c.keyword == 'HISTORY'
        assert c.value == 'processed = yes / really'
        assert c.comment is None

    def test_parse_unparsable_value(self):
        with pytest.warns(UserWarning):
            c = Card.fromstring('BAD     = garbage')
        assert c.value == 'garbage'

    def test_round_trip(self):
        for value in (42, -7, True, False, 'text', "it's", None, 2.5e-10):
            c = Card('KEY', value, 'comment')
            parsed = Card.fromstring(c.image)
            assert parsed.value == value
            assert parsed.comment == 'comment'
