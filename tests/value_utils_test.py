import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.utils.value_utils import (
    StyleValueKind, camel_case, classify_style_value, coerce_css_value, convert_to_px,
    generate_id, is_empty, kebab_case, normalize_value, parse_unit, values_equal,
)

def test_case_conversion():
    assert camel_case('background-color') == 'backgroundColor'
    assert camel_case('border-top-left-radius') == 'borderTopLeftRadius'
    assert kebab_case('backgroundColor') == 'background-color'
    assert camel_case('color') == 'color'

def test_parse_unit():
    assert parse_unit('16px') == (16, 'px')
    assert parse_unit('1.5rem') == (1.5, 'rem')
    assert parse_unit('-4') == (-4, '')
    assert parse_unit('.5em') == (0.5, 'em')
    assert parse_unit('auto') is None
    assert parse_unit('10px 20px') is None
    assert parse_unit(12) is None

def test_convert_to_px():
    assert convert_to_px(1.5, 'rem') == 24
    assert convert_to_px(2, 'em', root_font_size=10) == 20
    assert convert_to_px(50, '%') == 8
    assert convert_to_px(12, 'px') == 12

def test_coerce_css_value():
    assert coerce_css_value('16px') == 16
    assert isinstance(coerce_css_value('16px'), int)
    assert coerce_css_value('1.5px') == 1.5
    assert coerce_css_value('0') == 0
    assert coerce_css_value(' 2rem ') == '2rem'
    assert coerce_css_value('50%') == '50%'
    assert coerce_css_value('#FFF') == '#FFF'
    assert coerce_css_value(8) == 8

def test_normalize_value():
    assert normalize_value('#abc', 'color') == '#aabbcc'
    assert normalize_value('#aabbcc', 'color') == '#aabbcc'
    assert normalize_value('12', 'number') == 12.0
    assert normalize_value('x', 'number') == 0
    assert normalize_value(5, 'string') == '5'
    assert normalize_value(None, 'number') is None

def test_classify_style_value():
    assert classify_style_value(16).kind == StyleValueKind.NUMBER
    assert classify_style_value('16px') == (StyleValueKind.NUMBER, 16, 'px')
    assert classify_style_value('2rem') == (StyleValueKind.DIMENSION, 2, 'rem')
    assert classify_style_value('#fff').kind == StyleValueKind.COLOR
    assert classify_style_value('rgba(0, 0, 0, 0.5)').kind == StyleValueKind.COLOR
    assert classify_style_value('flex').kind == StyleValueKind.TEXT

def test_values_equal_numbers_with_tolerance():
    assert values_equal(16, 17, tolerance=1)
    assert not values_equal(16, 18, tolerance=1)
    assert values_equal(0, 0)
    assert values_equal(1.5, 2, tolerance=0.5)

def test_values_equal_none():
    assert values_equal(None, None)
    assert not values_equal(None, 0)
    assert not values_equal('', None)

def test_values_equal_strings():
    assert values_equal('Flex', 'flex')
    assert not values_equal('row', 'column')
    assert values_equal('1rem', '1.5rem', tolerance=0.5)
    assert not values_equal('1rem', '16px', tolerance=100)
    assert not values_equal(16, '16')

def test_values_equal_font_weight():
    assert values_equal('bold', 700, property_hint='fontWeight')
    assert values_equal('normal', '400', property_hint='fontWeight')
    assert values_equal('600', 600, property_hint='fontWeight')
    assert not values_equal('normal', 'bold', property_hint='fontWeight')
    assert not values_equal('bold', 700)

def test_is_empty():
    assert is_empty(None)
    assert is_empty('   ')
    assert is_empty([])
    assert is_empty({})
    assert not is_empty(0)
    assert not is_empty('x')

def test_generate_id_unique():
    first = generate_id('el')
    second = generate_id('el')
    assert first.startswith('el_')
    assert first != second
