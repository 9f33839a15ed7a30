"""Tests for the parameter surface."""
import pytest

from brickgen.contracts import BottomType, BrickParameters, BrickType, StudType
from brickgen.errors import InvalidParameter
from brickgen.parameters import (
    PARAMETER_DEFINITIONS,
    coerce_height,
    default_parameters,
    parameters_from_mapping,
    parameters_to_dict,
)


class TestDefinitions:
    def test_every_field_has_a_control(self):
        names = {d.name for d in PARAMETER_DEFINITIONS}
        assert names == set(parameters_to_dict(BrickParameters()))

    def test_defaults_match_the_record(self):
        assert default_parameters() == BrickParameters()

    def test_choice_captions_line_up(self):
        for definition in PARAMETER_DEFINITIONS:
            if definition.kind == "choice":
                assert len(definition.choices) == len(definition.captions)
                assert definition.default in definition.choices


class TestParametersFromMapping:
    def test_camel_case_keys(self):
        params = parameters_from_mapping({
            "width": 3,
            "length": 6,
            "studType": "hollow",
            "bottomType": "closed",
            "horizontalHoles": True,
            "studRescale": 1.05,
        })
        assert params.width == 3
        assert params.length == 6
        assert params.stud_type is StudType.HOLLOW
        assert params.bottom_type is BottomType.CLOSED
        assert params.horizontal_holes is True
        assert params.stud_rescale == pytest.approx(1.05)

    def test_snake_case_keys_and_strings(self):
        params = parameters_from_mapping({
            "width": "2",
            "type": "Tile",
            "use_reinforcement": "yes",
            "include_splines": "false",
            "height": "1/3",
        })
        assert params.width == 2
        assert params.type is BrickType.TILE
        assert params.use_reinforcement is True
        assert params.include_splines is False
        assert params.height == pytest.approx(1 / 3)

    def test_none_values_fall_back_to_defaults(self):
        assert parameters_from_mapping({"width": None}).width == 2

    @pytest.mark.parametrize(
        "values, field",
        [
            ({"width": 0}, "width"),
            ({"length": 33}, "length"),
            ({"width": 1.5}, "width"),
            ({"width": "two"}, "width"),
            ({"studRescale": 1.5}, "stud_rescale"),
            ({"studTopRoundness": -0.1}, "stud_top_roundness"),
            ({"segments": 8}, "segments"),
            ({"type": "duplo"}, "type"),
            ({"withPosts": "maybe"}, "with_posts"),
            ({"height": 0.7}, "height"),
            ({"colour": "red"}, "colour"),
        ],
    )
    def test_rejects_out_of_bounds(self, values, field):
        with pytest.raises(InvalidParameter) as excinfo:
            parameters_from_mapping(values)
        assert excinfo.value.parameter == field


class TestCoerceHeight:
    @pytest.mark.parametrize(
        "raw, expected",
        [("1/3", 1 / 3), (0.3333, 1 / 3), ("0.5", 0.5), (1, 1.0), ("4", 4.0), (2.0004, 2.0)],
    )
    def test_quantizes(self, raw, expected):
        assert coerce_height(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [0, -1, "abc", "1/0", True, float("inf")])
    def test_rejects(self, raw):
        with pytest.raises(InvalidParameter):
            coerce_height(raw)


class TestParametersToDict:
    def test_enums_become_strings(self):
        payload = parameters_to_dict(BrickParameters(type=BrickType.BASEPLATE))
        assert payload["type"] == "baseplate"
        assert payload["stud_type"] == "solid"
        assert payload["width"] == 2
