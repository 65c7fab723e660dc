"""
Configuration Schema Module
Pydantic models for the config file and the comparison options.
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from structural_compare.config.name_mapping import NameMapping, StrokeOverride

DEFAULT_OUTPUT_DIR = './docs/structural-comparison'


class Severity(str, Enum):
    STRICT = 'strict'
    NORMAL = 'normal'
    LENIENT = 'lenient'


class CamelModel(BaseModel):
    """JSON keys are camelCase; snake_case field names are accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComparisonOptions(CamelModel):
    tolerance: float = Field(1, ge=0)
    color_tolerance: float = Field(10, ge=0, le=255)
    severity: Severity = Severity.NORMAL
    ignore_properties: List[str] = Field(default_factory=list)


class ScreenConfig(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    frame_id: str = Field(min_length=1)
    tsx_file: str = Field(min_length=1)
    css_file: str = Field(min_length=1)


class StrokeOverrideConfig(CamelModel):
    node_names: List[str] = Field(min_length=1)
    background_contains: str = Field(min_length=1)
    stroke_color: str = Field(min_length=1)


class NameMappingConfig(CamelModel):
    design_to_code: Dict[str, str] = Field(default_factory=dict)
    code_class_to_design: Dict[str, str] = Field(default_factory=dict)
    independent_components: Dict[str, str] = Field(default_factory=dict)
    stroke_overrides: Optional[List[StrokeOverrideConfig]] = None

    def to_name_mapping(self) -> NameMapping:
        kwargs = {}
        if self.stroke_overrides is not None:
            kwargs['stroke_overrides'] = tuple(
                StrokeOverride(tuple(o.node_names), o.background_contains, o.stroke_color)
                for o in self.stroke_overrides
            )
        return NameMapping(
            design_to_code=dict(self.design_to_code),
            code_class_to_design=dict(self.code_class_to_design),
            independent_components=dict(self.independent_components),
            **kwargs,
        )


class StructuralCompareConfig(CamelModel):
    design_file: str = Field(min_length=1)
    output_dir: str = DEFAULT_OUTPUT_DIR
    screens: List[ScreenConfig] = Field(min_length=1)
    options: ComparisonOptions = Field(default_factory=ComparisonOptions)
    name_mapping: NameMappingConfig = Field(default_factory=NameMappingConfig)


def format_validation_errors(error: ValidationError) -> List[str]:
    """`screens.0.tsxFile: Field required` style lines."""
    lines = []
    for err in error.errors():
        location = '.'.join(str(part) for part in err['loc']) or '<root>'
        lines.append(f"{location}: {err['msg']}")
    return lines
