import sys
import os
import pytest
from dataclasses import FrozenInstanceError
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from structural_compare.core.models import (
    CanonicalElement, ElementKind, LayoutAttributes, Origin, Provenance, count_elements, iter_elements,
)
from structural_compare.exceptions import ConfigError

def test_opaque_element_cannot_have_children():
    provenance = Provenance(Origin.DESIGN, is_opaque_component=True, opaque_component_counterpart_name='Dropdown')
    with pytest.raises(ValueError):
        CanonicalElement(id='1', kind=ElementKind.CONTAINER, path='Root', provenance=provenance, children=())
    element = CanonicalElement(id='1', kind=ElementKind.CONTAINER, path='Root', provenance=provenance)
    assert element.children is None

def test_element_is_immutable():
    element = CanonicalElement(id='1', kind=ElementKind.TEXT, path='Root', provenance=Provenance(Origin.DESIGN))
    with pytest.raises(FrozenInstanceError):
        element.path = 'Other'

def test_pre_order_iteration_and_to_dict():
    design = Provenance(Origin.DESIGN)
    leaf = CanonicalElement(id='3', kind=ElementKind.TEXT, path='Root > box[0] > label[0]', provenance=design, text_content='Hi')
    box = CanonicalElement(id='2', kind=ElementKind.CONTAINER, path='Root > box[0]', provenance=design, children=(leaf,))
    root = CanonicalElement(
        id='1', kind=ElementKind.CONTAINER, path='Root', provenance=design, children=(box,),
        layout=LayoutAttributes(arrangement='flex', direction='column'),
    )
    assert [e.id for e in iter_elements([root])] == ['1', '2', '3']
    assert count_elements([root]) == 3
    assert leaf.name == 'label'

    data = root.to_dict()
    assert data['kind'] == 'container'
    assert data['layout']['direction'] == 'column'
    assert data['provenance'] == {
        'origin': 'design', 'is_opaque_component': False, 'opaque_component_counterpart_name': None,
    }
    assert data['children'][0]['children'][0]['text_content'] == 'Hi'
    assert 'children' not in root.to_dict(include_children=False)

def test_layout_is_empty():
    assert LayoutAttributes().is_empty()
    assert not LayoutAttributes(direction='row').is_empty()

def test_config_error_lists_details():
    error = ConfigError('Invalid configuration', ['screens: Field required'])
    assert str(error) == 'Invalid configuration\n  - screens: Field required'
    assert error.errors == ['screens: Field required']

def test_styles_are_read_only_copies():
    source = {'gap': 8}
    element = CanonicalElement(
        id='1', kind=ElementKind.CONTAINER, path='Root', provenance=Provenance(Origin.DESIGN), styles=source,
    )
    with pytest.raises(TypeError):
        element.styles['gap'] = 16
    source['gap'] = 4
    assert element.styles == {'gap': 8}
    assert element.to_dict()['styles'] == {'gap': 8}
