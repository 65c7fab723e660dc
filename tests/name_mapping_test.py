import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.config.name_mapping import (
    DEFAULT_STROKE_OVERRIDES, NameMapping, match_by_prefix, strip_numeric_suffix,
)

def mapping():
    return NameMapping(
        design_to_code={'welcomeMsg': 'welcomeMessage', 'divider': 'separator'},
        code_class_to_design={'welcomeMessage': 'welcomeMsg'},
        independent_components={'settingsButton': 'SettingsDropdown'},
    )

def test_strip_numeric_suffix():
    assert strip_numeric_suffix('divider1') == 'divider'
    assert strip_numeric_suffix('divider12') == 'divider'
    assert strip_numeric_suffix('h1Title') == 'h1Title'
    assert strip_numeric_suffix('divider') == 'divider'

def test_match_by_prefix():
    assert match_by_prefix('divider1', 'divider')
    assert not match_by_prefix('divider', 'divider')
    assert not match_by_prefix('header', 'divider')

def test_name_lookups():
    m = mapping()
    assert m.map_design_name_to_code('welcomeMsg') == 'welcomeMessage'
    assert m.map_design_name_to_code('title') == 'title'
    assert m.map_code_name_to_design('welcomeMessage') == 'welcomeMsg'
    assert m.map_code_class_to_design('welcomeMessage') == 'welcomeMsg'
    assert m.map_code_class_to_design('other') == 'other'
    assert m.are_names_equivalent('welcomeMsg', 'welcomeMessage')
    assert m.are_names_equivalent('title', 'title')
    assert not m.are_names_equivalent('title', 'subtitle')

def test_path_alias_strips_suffix_before_lookup():
    m = mapping()
    assert m.path_alias('welcomeMsg') == 'welcomeMessage'
    assert m.path_alias('divider2') == 'separator'
    assert m.path_alias('title3') == 'title'
    assert m.path_alias('title') == 'title'

def test_independent_registry():
    m = mapping()
    assert m.is_independent_component('settingsButton')
    assert not m.is_independent_component('header')
    assert not m.is_independent_component(None)
    assert m.independent_counterpart('settingsButton') == 'SettingsDropdown'
    assert m.is_independent_code_name('SettingsDropdown')
    assert m.is_independent_code_name('settingsButton')
    assert not m.is_independent_code_name('Button')
    assert m.independent_code_names() == ['SettingsDropdown']

def test_default_stroke_override():
    m = NameMapping()
    assert m.stroke_overrides == DEFAULT_STROKE_OVERRIDES
    assert m.is_stroke_override('settingsButton', 'rgba(0, 188, 212, 0.1)', '#00BCD4')
    assert not m.is_stroke_override('settingsButton', '#ffffff', '#00BCD4')
    assert not m.is_stroke_override('header', 'rgba(0, 188, 212, 0.1)', '#00BCD4')

def test_from_dict_accepts_both_key_styles():
    camel = NameMapping.from_dict({
        'designToCode': {'a': 'b'},
        'independentComponents': {'x': 'X'},
        'strokeOverrides': [],
    })
    snake = NameMapping.from_dict({'design_to_code': {'a': 'b'}, 'independent_components': {'x': 'X'}})
    assert camel.design_to_code == snake.design_to_code == {'a': 'b'}
    assert camel.independent_code_names() == ['X']
    assert camel.stroke_overrides == ()
    assert snake.stroke_overrides == DEFAULT_STROKE_OVERRIDES
    assert NameMapping.from_dict(None).design_to_code == {}
