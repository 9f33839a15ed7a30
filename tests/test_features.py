"""Tests for the individual feature builders."""
from dataclasses import replace

import pytest

from brick_specs import BrickConstants
from brickgen.contracts import BottomType, BrickParameters, BrickType, FeatureRole, StudType
from brickgen.dimensions import derive_dimensions
from brickgen.errors import DegenerateGeometry
from brickgen.features import (
    build_axle_cutouts,
    build_pins,
    build_posts,
    build_reinforcement,
    build_shell,
    build_splines,
    build_studs,
    build_technic_holes,
    build_technic_supports,
    make_stud,
    stud_fillet_radius,
)

SEGMENTS = 16


def _dims(params, constants=None):
    if constants is None:
        return derive_dimensions(params)
    return derive_dimensions(params, constants)


class TestShell:
    def test_open_shell_is_hollow(self, classic_params, classic_dims):
        shell = build_shell(classic_dims, classic_params)
        solid = shell.parts[0].solid
        full = classic_dims.overall_length * classic_dims.overall_width * classic_dims.overall_height
        assert shell.count == 1
        assert solid.is_watertight
        assert solid.volume < full * 0.6
        assert solid.bounds[0] == pytest.approx([0.0, 0.0, 0.0])
        assert solid.bounds[1] == pytest.approx([31.8, 15.8, 9.6])

    def test_closed_shell_is_solid_box(self, classic_params, classic_dims):
        params = replace(classic_params, bottom_type=BottomType.CLOSED)
        solid = build_shell(classic_dims, params).parts[0].solid
        assert solid.volume == pytest.approx(31.8 * 15.8 * 9.6)

    def test_baseplate_is_always_closed(self, classic_params, classic_dims):
        params = replace(classic_params, type=BrickType.BASEPLATE, bottom_type=BottomType.OPEN)
        solid = build_shell(classic_dims, params).parts[0].solid
        assert solid.volume == pytest.approx(31.8 * 15.8 * 9.6)

    def test_walls_filling_footprint_fall_back_to_solid(self):
        constants = BrickConstants(wall_thickness=5.0)
        params = BrickParameters(width=1, length=1, segments=SEGMENTS)
        dims = _dims(params, constants)
        solid = build_shell(dims, params).parts[0].solid
        assert solid.volume == pytest.approx(7.8 * 7.8 * 9.6)


class TestStuds:
    def test_one_stud_per_grid_cell(self, classic_params, classic_dims):
        studs = build_studs(classic_dims, classic_params)
        assert studs.count == 8
        assert studs.role is FeatureRole.ADDITIVE
        for part in studs.parts:
            assert part.solid.bounds[0][2] == pytest.approx(9.6)
            assert part.solid.bounds[1][2] == pytest.approx(11.4)

    def test_tile_has_no_studs(self, classic_params, classic_dims):
        assert build_studs(classic_dims, replace(classic_params, type=BrickType.TILE)) is None

    def test_hollow_stud_is_lighter(self, classic_params, classic_dims):
        solid = make_stud(classic_dims, classic_params)
        hollow = make_stud(classic_dims, replace(classic_params, stud_type=StudType.HOLLOW))
        assert hollow.is_watertight
        assert hollow.volume < solid.volume

    def test_rounded_stud_keeps_height(self, classic_params, classic_dims):
        params = replace(classic_params, stud_top_roundness=1.0)
        stud = make_stud(classic_dims, params)
        flat = make_stud(classic_dims, classic_params)
        assert stud.is_watertight
        assert stud.bounds[1][2] == pytest.approx(1.8)
        assert stud.volume < flat.volume


class TestStudFillet:
    """Roundness is clamped so the fillet never degenerates."""

    def test_flat_top_by_default(self, classic_params, classic_dims):
        assert stud_fillet_radius(classic_dims, classic_params) == 0.0

    def test_out_of_range_roundness_is_clamped(self, classic_params, classic_dims):
        high = stud_fillet_radius(classic_dims, replace(classic_params, stud_top_roundness=5.0))
        full = stud_fillet_radius(classic_dims, replace(classic_params, stud_top_roundness=1.0))
        low = stud_fillet_radius(classic_dims, replace(classic_params, stud_top_roundness=-2.0))
        assert high == pytest.approx(full)
        assert low == 0.0

    @pytest.mark.parametrize("rescale", [0.9, 1.1])
    def test_extreme_rescale_with_full_roundness(self, rescale):
        params = BrickParameters(stud_rescale=rescale, stud_top_roundness=1.0, segments=SEGMENTS)
        dims = _dims(params)
        curve = stud_fillet_radius(dims, params)
        radius = dims.stud_diameter / 2
        assert 0 < curve < radius / 2
        assert dims.constants.stud_height - curve > 0
        stud = make_stud(dims, params)
        assert stud.is_watertight
        assert stud.volume > 0
        assert stud.extents[0] == pytest.approx(dims.stud_diameter, rel=0.02)

    def test_extreme_rescale_hollow_rounded(self):
        params = BrickParameters(
            stud_rescale=0.9, stud_top_roundness=1.0, stud_type=StudType.HOLLOW, segments=SEGMENTS
        )
        stud = make_stud(_dims(params), params)
        assert stud.is_watertight

    def test_short_stud_with_fillet_is_degenerate(self):
        params = BrickParameters(stud_top_roundness=1.0, segments=SEGMENTS)
        dims = _dims(params, BrickConstants(stud_height=0.5))
        with pytest.raises(DegenerateGeometry):
            make_stud(dims, params)

    def test_hollow_hole_wider_than_stud_is_degenerate(self):
        params = BrickParameters(stud_type=StudType.HOLLOW, segments=SEGMENTS)
        dims = _dims(params, BrickConstants(hollow_stud_inner_diameter=6.0))
        with pytest.raises(DegenerateGeometry):
            make_stud(dims, params)


class TestSplines:
    def test_two_per_column_and_row(self, classic_params, classic_dims):
        splines = build_splines(classic_dims, classic_params)
        assert splines.count == 2 * 4 + 2 * 2

    def test_splines_stay_inside_the_walls(self, classic_params, classic_dims):
        splines = build_splines(classic_dims, classic_params)
        for solid in splines.solids():
            lo, hi = solid.bounds
            assert lo[0] >= 0 and lo[1] >= 0
            assert hi[0] <= 31.8 and hi[1] <= 15.8


class TestPostsAndPins:
    def test_posts_at_interior_intersections(self, classic_params, classic_dims):
        posts = build_posts(classic_dims, classic_params)
        assert posts.count == 3
        centers = [tuple(part.solid.bounds.mean(axis=0)[:2]) for part in posts.parts]
        assert [c[0] for c in centers] == pytest.approx([7.9, 15.9, 23.9], abs=0.05)

    def test_no_posts_without_interior(self, single_row_params, single_row_dims):
        assert build_posts(single_row_dims, single_row_params) is None

    def test_axle_slotted_posts(self, classic_params, classic_dims):
        params = replace(classic_params, vertical_axle_holes=True)
        round_post = build_posts(classic_dims, classic_params).parts[0].solid
        axle_post = build_posts(classic_dims, params).parts[0].solid
        assert axle_post.is_watertight
        assert axle_post.volume != pytest.approx(round_post.volume)

    def test_post_wall_thicker_than_radius_is_degenerate(self, classic_params):
        dims = _dims(classic_params, BrickConstants(post_wall_thickness=4.0))
        with pytest.raises(DegenerateGeometry):
            build_posts(dims, classic_params)

    def test_pins_for_single_row(self, single_row_params, single_row_dims):
        pins = build_pins(single_row_dims, single_row_params)
        assert pins.count == 3
        for part in pins.parts:
            assert part.solid.extents[0] == pytest.approx(3.0, rel=0.02)

    def test_no_pins_for_wide_or_single_stud(self, classic_params, classic_dims):
        assert build_pins(classic_dims, classic_params) is None
        one = BrickParameters(width=1, length=1, segments=SEGMENTS)
        assert build_pins(_dims(one), one) is None


class TestReinforcement:
    def test_single_merged_part(self, classic_params, classic_dims):
        params = replace(classic_params, use_reinforcement=True)
        reinforcement = build_reinforcement(classic_dims, params)
        assert reinforcement.count == 1
        solid = reinforcement.parts[0].solid
        assert solid.is_volume
        assert solid.bounds[1][2] == pytest.approx(9.6)
        assert solid.bounds[0][0] >= 0
        assert solid.bounds[1][0] <= 31.8

    def test_not_for_tiles_or_single_rows(self, classic_params, classic_dims, single_row_params, single_row_dims):
        assert build_reinforcement(classic_dims, replace(classic_params, type=BrickType.TILE)) is None
        assert build_reinforcement(single_row_dims, single_row_params) is None


class TestTechnic:
    def test_supports_and_holes_pair_up(self, classic_params, classic_dims):
        supports = build_technic_supports(classic_dims, classic_params)
        holes = build_technic_holes(classic_dims, classic_params)
        assert supports.count == holes.count == 3
        assert supports.role is FeatureRole.ADDITIVE
        assert holes.role is FeatureRole.SUBTRACTIVE

    def test_holes_run_through_the_width(self, classic_params, classic_dims):
        holes = build_technic_holes(classic_dims, classic_params)
        for solid in holes.solids():
            assert solid.bounds[0][1] < 0
            assert solid.bounds[1][1] > classic_dims.overall_width
            assert solid.bounds.mean(axis=0)[2] == pytest.approx(5.8, abs=0.05)

    def test_one_row_of_holes_per_block(self, classic_params):
        params = replace(classic_params, height=2)
        holes = build_technic_holes(_dims(params), params)
        assert holes.count == 6

    def test_no_holes_in_plates(self, classic_params):
        params = replace(classic_params, height=1 / 3)
        dims = _dims(params)
        assert build_technic_holes(dims, params) is None
        assert build_technic_supports(dims, params) is None


class TestAxleCutouts:
    def test_one_per_interior_intersection(self, classic_params, classic_dims):
        cutouts = build_axle_cutouts(classic_dims, classic_params)
        assert cutouts.count == 3
        assert cutouts.role is FeatureRole.SUBTRACTIVE
        for solid in cutouts.solids():
            assert solid.bounds[0][2] < 0
            assert solid.bounds[1][2] > classic_dims.overall_height

    def test_none_without_interior(self, single_row_params, single_row_dims):
        assert build_axle_cutouts(single_row_dims, single_row_params) is None
