import math

import pytest

from fittransfer.core.bike_setup import calculate_bike_setup, seatpost_extension, seatpost_offset
from fittransfer.core.constants import FORWARD_SADDLE_NOTE
from fittransfer.core.models import FitPosition, FitReportData, FrameGeometry, SetupConfig
from fittransfer.core.solver import calculate_stem_requirements


def make_report(**position_overrides) -> FitReportData:
    position = {
        "saddle_height": 750,
        "saddle_setback": -65,
        "saddle_angle": -2,
        "handlebar_stack": 560,
        "handlebar_reach": 400,
    }
    position.update(position_overrides)
    return FitReportData(frame_stack=550, frame_reach=385, fit_position=FitPosition(**position))


def test_setup_embeds_stem_solution(fit_report, frame):
    setup = calculate_bike_setup(fit_report, frame)

    assert setup.stem == calculate_stem_requirements(fit_report.fit_position, frame)
    assert setup.notes[: len(setup.stem.notes)] == setup.stem.notes


def test_saddle_position_carries_over(fit_report, frame):
    setup = calculate_bike_setup(fit_report, frame)

    assert setup.saddle_height == 750
    assert setup.saddle_setback == -65
    assert setup.saddle_angle == -2


def test_provenance_is_kept(fit_report, frame):
    setup = calculate_bike_setup(fit_report, frame)

    assert setup.original_fit_bike == "Specialized Tarmac SL7 54"
    assert setup.original_fit_date == "2023-05-12"


def test_provenance_is_optional(frame):
    setup = calculate_bike_setup(make_report(), frame)

    assert setup.original_fit_bike is None
    assert setup.original_fit_date is None


def test_seatpost_extension_projects_along_seat_tube(fit_report, frame):
    setup = calculate_bike_setup(fit_report, frame)

    expected = round(750 / math.sin(math.radians(73)) - 520)
    assert setup.seatpost_extension == expected
    assert expected > 200
    assert f"High seatpost extension ({expected}mm) - consider a longer seat tube" in setup.warnings


def test_low_seatpost_extension_warns():
    extension, warnings = seatpost_extension(750, 760, 73.0, SetupConfig())

    assert extension == round(750 / math.sin(math.radians(73)) - 760)
    assert extension < 50
    assert warnings == [f"Low seatpost extension ({extension}mm) - check minimum insertion depth"]


def test_seatpost_extension_in_range_has_no_warning():
    extension, warnings = seatpost_extension(750, 650, 73.0, SetupConfig())

    assert 50 <= extension <= 200
    assert warnings == []


def test_seatpost_extension_without_seat_tube_length(fit_report):
    frame = FrameGeometry(stack_mm=530, reach_mm=390, head_tube_angle=73.0, seat_tube_angle=73.0)

    setup = calculate_bike_setup(fit_report, frame)

    assert setup.seatpost_extension is None
    assert setup.warnings == ()


def test_seatpost_extension_uses_effective_angle(frame):
    setup = calculate_bike_setup(make_report(effective_seat_tube_angle=75.0), frame)

    assert setup.effective_seat_tube_angle == 75.0
    assert setup.seatpost_extension == round(750 / math.sin(math.radians(75)) - 520)


def test_shallow_seat_tube_angle_is_not_projected(frame):
    setup = calculate_bike_setup(make_report(effective_seat_tube_angle=3.0), frame)

    assert setup.seatpost_extension is None
    assert any("could not be calculated" in warning for warning in setup.warnings)
    assert all(math.isfinite(value) for value in (setup.stem.stack_delta, setup.stem.reach_delta))


def test_effective_angle_defaults():
    frame = FrameGeometry(stack_mm=530, reach_mm=390, head_tube_angle=73.0)

    setup = calculate_bike_setup(make_report(), frame)

    assert setup.effective_seat_tube_angle == 73.0
    assert setup.seatpost_offset_needed == 0


def test_effective_angle_falls_back_to_frame():
    frame = FrameGeometry(stack_mm=530, reach_mm=390, head_tube_angle=73.0, seat_tube_angle=74.5)

    setup = calculate_bike_setup(make_report(), frame)

    assert setup.effective_seat_tube_angle == 74.5


def test_steep_fit_needs_25mm_offset(frame):
    setup = calculate_bike_setup(make_report(effective_seat_tube_angle=76.0), frame)

    # 3° * 750mm * tan(1°) is about 39mm of setback
    assert setup.seatpost_offset_needed == 25
    assert "Frame STA (73°) is steeper than fit (76°) - use 25mm setback seatpost" in setup.notes


@pytest.mark.parametrize(
    "effective_sta, expected_offset, note_fragment",
    [
        (74.0, 20, "use 20mm setback seatpost"),
        (71.0, 0, "is slacker than fit (71°)"),
        (73.4, 0, None),
        (73.6, 0, None),
    ],
)
def test_seatpost_offset(effective_sta, expected_offset, note_fragment):
    offset, note = seatpost_offset(750, effective_sta, 73.0, SetupConfig())

    assert offset == expected_offset
    if note_fragment is None:
        assert note is None
    else:
        assert note_fragment in note


def test_forward_saddle_note(frame):
    setup = calculate_bike_setup(make_report(saddle_setback=-30), frame)

    assert FORWARD_SADDLE_NOTE in setup.notes


def test_setback_saddle_has_no_forward_note(fit_report, frame):
    setup = calculate_bike_setup(fit_report, frame)

    assert FORWARD_SADDLE_NOTE not in setup.notes


def test_custom_setup_config(fit_report, frame):
    config = SetupConfig(max_seatpost_extension=300)

    setup = calculate_bike_setup(fit_report, frame, setup_config=config)

    assert setup.warnings == ()


def test_setup_is_deterministic(fit_report, frame):
    assert calculate_bike_setup(fit_report, frame) == calculate_bike_setup(fit_report, frame)


def test_seatpost_extension_rounds_half_up():
    extension, _ = seatpost_extension(750.5, 500, 90.0, SetupConfig())

    assert extension == 251
