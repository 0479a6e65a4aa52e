import math

from loguru import logger

from fittransfer.core.constants import FORWARD_SADDLE_NOTE
from fittransfer.core.models import BikeSetupCalculation, FitReportData, FrameGeometry, SetupConfig, SolverConfig
from fittransfer.core.solver import calculate_stem_requirements
from fittransfer.core.utils import round_half_up


def seatpost_extension(
    saddle_height: float,
    seat_tube_length_mm: float,
    seat_tube_angle: float,
    config: SetupConfig,
) -> tuple[int | None, list[str]]:
    """
    Seatpost showing above the seat tube when the saddle is at `saddle_height`.

    The saddle height is projected along the seat tube angle. Returns the extension
    and any warnings; the extension is None when the angle is too shallow to project.
    """
    sin_sta = math.sin(math.radians(seat_tube_angle))
    if abs(sin_sta) < config.min_projection_sine:
        return None, [
            f"Seatpost extension could not be calculated - seat tube angle ({seat_tube_angle:g}°) is too shallow"
        ]

    extension = round_half_up(saddle_height / sin_sta - seat_tube_length_mm)

    warnings = []
    if extension < config.min_seatpost_extension:
        warnings.append(f"Low seatpost extension ({extension}mm) - check minimum insertion depth")
    if extension > config.max_seatpost_extension:
        warnings.append(f"High seatpost extension ({extension}mm) - consider a longer seat tube")
    return extension, warnings


def seatpost_offset(
    saddle_height: float,
    effective_sta: float,
    frame_sta: float,
    config: SetupConfig,
) -> tuple[int, str | None]:
    """Recommended seatpost setback (mm) to recover the fit's effective seat tube angle."""
    sta_difference = effective_sta - frame_sta
    if abs(sta_difference) <= config.sta_tolerance:
        return 0, None

    # Horizontal saddle shift per degree of seat tube angle at this saddle height
    setback_change_per_degree = saddle_height * math.tan(math.radians(1))
    setback_difference = sta_difference * setback_change_per_degree

    if setback_difference > config.large_offset_threshold:
        offset = config.large_offset
        note = f"Frame STA ({frame_sta:g}°) is steeper than fit ({effective_sta:g}°) - use {offset}mm setback seatpost"
    elif setback_difference > config.small_offset_threshold:
        offset = config.small_offset
        note = f"Frame STA ({frame_sta:g}°) is steeper than fit ({effective_sta:g}°) - use {offset}mm setback seatpost"
    elif setback_difference < -config.large_offset_threshold:
        offset = 0
        note = (
            f"Frame STA ({frame_sta:g}°) is slacker than fit ({effective_sta:g}°) - use 0mm offset seatpost, "
            "may need forward saddle position"
        )
    else:
        return 0, None
    return offset, note


def calculate_bike_setup(
    fit: FitReportData,
    frame: FrameGeometry,
    solver_config: SolverConfig | None = None,
    setup_config: SetupConfig | None = None,
) -> BikeSetupCalculation:
    """
    Complete setup of `frame` that reproduces the position recorded in `fit`: cockpit from the stem solver,
    saddle height/setback/angle carried over unchanged, and seatpost extension and offset derived from the
    frame's seat tube.
    """
    setup_config = setup_config or SetupConfig()
    position = fit.fit_position

    stem = calculate_stem_requirements(position, frame, solver_config)

    notes: list[str] = []
    warnings: list[str] = []

    frame_sta = frame.seat_tube_angle or setup_config.default_seat_tube_angle
    effective_sta = position.effective_seat_tube_angle or frame_sta

    extension = None
    if frame.seat_tube_length_mm:
        extension, extension_warnings = seatpost_extension(
            position.saddle_height, frame.seat_tube_length_mm, effective_sta, setup_config
        )
        warnings.extend(extension_warnings)

    offset, offset_note = seatpost_offset(position.saddle_height, effective_sta, frame_sta, setup_config)
    if offset_note:
        notes.append(offset_note)

    if abs(position.saddle_setback) < setup_config.forward_saddle_setback:
        notes.append(FORWARD_SADDLE_NOTE)

    setup = BikeSetupCalculation(
        stem=stem,
        saddle_height=position.saddle_height,
        seatpost_extension=extension,
        saddle_setback=position.saddle_setback,
        saddle_angle=position.saddle_angle,
        effective_seat_tube_angle=effective_sta,
        seatpost_offset_needed=offset,
        original_fit_bike=fit.original_fit_bike,
        original_fit_date=fit.fit_date,
        notes=(*stem.notes, *notes),
        warnings=tuple(warnings),
    )
    if warnings:
        logger.info("Bike setup produced {} warning(s): {}", len(warnings), warnings)
    logger.debug("Bike setup: {}", setup)
    return setup
