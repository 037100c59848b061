"""Tests for identifier normalization."""

import pytest

from oapigen.codegen.naming import (
    DIGIT_PREFIX,
    article_for,
    depunct,
    fix_name,
    is_vowel,
    normalize,
    sentence,
    to_snake_case,
)


class TestNormalize:
    """Test the normalize function."""

    def test_punctuation_and_single_underscore(self):
        """Test that '-' and a single '_' are elided and capitalize the next letter."""
        assert normalize('foo-bar_baz', True) == 'FooBarBaz'

    def test_double_underscore_preserved(self):
        """Test that a leading double underscore run survives unchanged."""
        assert normalize('__id', False) == '__id'

    def test_initialism_upper_cased(self):
        """Test that a lone initialism becomes upper case when exported."""
        assert normalize('id', True) == 'ID'

    def test_initialism_lower_cased_at_start(self):
        """Test that an initialism at the start of an unexported name stays lower case."""
        assert normalize('id', False) == 'id'
        assert normalize('urlPath', False) == 'urlPath'

    def test_camel_case_initialism(self):
        """Test initialisms inside camelCase names."""
        assert normalize('userId', False) == 'userID'
        assert normalize('userId', True) == 'UserID'
        assert normalize('getPetById', True) == 'GetPetByID'

    def test_consecutive_initialisms(self):
        """Test a name made of two initialisms."""
        assert normalize('api-url', True) == 'APIURL'

    def test_dots_and_slashes(self):
        """Test that '.', '/' and '$' are punctuation."""
        assert normalize('pet.name', True) == 'PetName'
        assert normalize('store/order', True) == 'StoreOrder'
        assert normalize('$count', False) == 'Count'

    def test_other_characters_elided(self):
        """Test that characters invalid in identifiers are elided."""
        assert normalize('pet name', True) == 'PetName'
        assert normalize('a+b', False) == 'aB'

    def test_bracket_prefix_stripped(self):
        """Test that everything through the last ']' is dropped."""
        assert normalize('items[].id', True) == 'ID'

    def test_underscore_run_inside_name(self):
        """Test that an interior underscore run is kept verbatim."""
        assert normalize('snake__case', False) == 'snake__case'

    def test_type_keyword(self):
        """Test that the reserved word 'type' is not emitted as-is."""
        assert normalize('type', False) == 'typ'
        assert normalize('typ', True) == 'Type'

    def test_leading_digit_prefixed(self):
        """Test that identifiers starting with a digit get the reserved prefix."""
        assert normalize('2fa', True) == DIGIT_PREFIX + '2fa'
        assert normalize('404', False) == DIGIT_PREFIX + '404'

    def test_leading_digit_with_underscore_run(self):
        """Test that words after an underscore run are cased together with the prefix."""
        assert normalize('1__abc', False) == 'X__1__Abc'
        assert normalize('2__x', True) == 'X__2__X'

    def test_empty(self):
        """Test that empty input yields an empty identifier."""
        assert normalize('', True) == ''

    @pytest.mark.parametrize(
        'raw',
        [
            'foo-bar_baz',
            '__id',
            'id',
            'userId',
            'api-url',
            'pet.name',
            '2fa',
            'snake__case',
            '1__abc',
            '2__x',
        ],
    )
    @pytest.mark.parametrize('capitalize_first', [True, False])
    def test_idempotent(self, raw, capitalize_first):
        """Test that normalizing a normalized identifier changes nothing."""
        once = normalize(raw, capitalize_first)
        assert normalize(once, capitalize_first) == once

    def test_deterministic(self):
        """Test that normalization is a pure function of its inputs."""
        assert normalize('foo-bar', True) == normalize('foo-bar', True)
        assert normalize('foo-bar', True) != normalize('foo-bar', False)


class TestDepunct:
    """Test the depunct helper."""

    def test_need_cap_applies_to_first_character(self):
        """Test that need_cap upper-cases the first retained character."""
        assert depunct('pet', True) == 'Pet'
        assert depunct('pet', False) == 'pet'

    def test_punctuation_only(self):
        """Test that a name made only of punctuation becomes empty."""
        assert depunct('-./$', True) == ''


class TestFixName:
    """Test the fix_name helper."""

    def test_lowercase_fast_path(self):
        """Test that all-lowercase names are returned unchanged."""
        assert fix_name('pets') == 'pets'

    def test_single_underscore(self):
        """Test that a lone underscore is returned unchanged."""
        assert fix_name('_') == '_'

    def test_words_capitalized_after_first(self):
        """Test that later lowercase words are capitalized across underscore runs."""
        assert fix_name('Pet__name') == 'Pet__Name'


class TestSnakeCase:
    """Test to_snake_case."""

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('PetStore', 'pet_store'),
            ('APIKey', 'api_key'),
            ('UserID', 'user_id'),
            ('Default', 'default'),
            ('X__2fa', 'x_2fa'),
        ],
    )
    def test_to_snake_case(self, name, expected):
        """Test conversion of identifiers to file-name stems."""
        assert to_snake_case(name) == expected


class TestDocHelpers:
    """Test the doc comment helpers."""

    def test_is_vowel(self):
        """Test vowel detection."""
        assert is_vowel('a')
        assert is_vowel('u')
        assert not is_vowel('b')

    def test_article_for(self):
        """Test the indefinite article choice."""
        assert article_for('owner of a pet') == 'an'
        assert article_for('pet') == 'a'
        assert article_for('') == 'a'

    def test_sentence(self):
        """Test that text is collapsed, lower-cased and terminated."""
        assert sentence('List  all\nPets') == 'list all pets.'
        assert sentence('Done.') == 'done.'
        assert sentence('') == ''
