import sys
import os
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.core.models import CanonicalElement, ElementKind, Origin, Provenance
from structural_compare.utils.path_utils import (
    are_paths_equivalent_by_name, build_path, extract_all_names, get_name_from_path,
    get_parent_path, get_path_depth, index_by_path, match_path_pattern, sort_paths,
)

def test_build_path():
    assert build_path('', 'HomeView', 0) == 'HomeView'
    assert build_path('HomeView', 'header', 0) == 'HomeView > header[0]'
    assert build_path('HomeView > header[0]', 'title', 2) == 'HomeView > header[0] > title[2]'

def test_path_inspection():
    path = 'HomeView > header[0] > settingsButton[1]'
    assert get_parent_path(path) == 'HomeView > header[0]'
    assert get_parent_path('HomeView') == ''
    assert get_name_from_path(path) == 'settingsButton'
    assert get_name_from_path('HomeView') == 'HomeView'
    assert extract_all_names(path) == ['HomeView', 'header', 'settingsButton']
    assert get_path_depth(path) == 3
    assert get_path_depth('HomeView') == 1

def test_sort_paths_by_depth_then_name():
    paths = ['A > b[0] > c[0]', 'A > z[0]', 'A', 'A > a[1]']
    assert sort_paths(paths) == ['A', 'A > a[1]', 'A > z[0]', 'A > b[0] > c[0]']

def test_match_path_pattern():
    assert match_path_pattern('HomeView > header[0]', 'HomeView > *')
    assert match_path_pattern('HomeView > header[0]', '* > header[0]')
    assert not match_path_pattern('HomeView > header[0] > title[0]', 'HomeView > *')

def test_index_by_path_includes_containers():
    design = Provenance(Origin.DESIGN)
    leaf = CanonicalElement(id='2', kind=ElementKind.TEXT, path='Root > title[0]', provenance=design)
    root = CanonicalElement(id='1', kind=ElementKind.CONTAINER, path='Root', provenance=design, children=(leaf,))
    index = index_by_path([root])
    assert list(index) == ['Root', 'Root > title[0]']
    assert index['Root > title[0]'] is leaf

def test_paths_equivalent_by_root_and_leaf():
    assert are_paths_equivalent_by_name('Root > title[0]', 'Root > wrapper[0] > title[0]')
    assert are_paths_equivalent_by_name('Root > title[0]', 'Root > title[3]')
    assert not are_paths_equivalent_by_name('Root > title[0]', 'Other > title[0]')
    assert not are_paths_equivalent_by_name('Root > title[0]', 'Root > subtitle[0]')

def test_paths_equivalent_with_alias():
    alias = {'welcomeMsg': 'welcomeMessage'}.get
    assert are_paths_equivalent_by_name(
        'Root > welcomeMsg[0]', 'Root > welcomeMessage[0]',
        lambda name: alias(name, name),
    )
    assert not are_paths_equivalent_by_name('Root > welcomeMsg[0]', 'Root > welcomeMessage[0]')
