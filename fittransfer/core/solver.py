import math
from dataclasses import dataclass

from loguru import logger

from fittransfer.core.constants import NOT_ACHIEVABLE_NOTE
from fittransfer.core.models import FitPosition, FrameGeometry, SolverConfig, StemSolution
from fittransfer.core.utils import round_half_up


@dataclass(frozen=True)
class Candidate:
    spacers: int
    stem_length: float
    stem_angle: int
    error: float


def effective_stem_angle(head_tube_angle: float, stem_angle: float) -> float:
    """Stem angle from horizontal once installed on the steerer, in radians."""
    return math.radians(head_tube_angle - 90 + stem_angle)


def cockpit_gain(head_tube_angle: float, spacers: float, stem_length: float, stem_angle: float) -> tuple[float, float]:
    """
    Stack and reach added on top of the frame's head tube by a spacer stack and a stem.

    Spacers follow the steerer axis, the stem follows its effective angle.
    Returns (stack_gain, reach_gain) in mm.
    """
    hta = math.radians(head_tube_angle)
    eff = effective_stem_angle(head_tube_angle, stem_angle)
    stack_gain = spacers * math.sin(hta) + stem_length * math.sin(eff)
    reach_gain = spacers * math.cos(hta) + stem_length * math.cos(eff)
    return stack_gain, reach_gain


def _nearest_common_length(stem_length: float, common_lengths: tuple[int, ...]) -> int:
    # min() keeps the first of equally distant lengths
    return min(common_lengths, key=lambda length: abs(length - stem_length))


def _find_best_candidate(
    required_stack_gain: float,
    required_reach_gain: float,
    head_tube_angle: float,
    config: SolverConfig,
) -> Candidate | None:
    hta = math.radians(head_tube_angle)
    best: Candidate | None = None

    # Order matters: spacers ascending, then angles ascending. Ties keep the first candidate.
    for spacers in range(0, config.max_spacers + 1, config.spacer_step):
        spacer_stack = spacers * math.sin(hta)
        spacer_reach = spacers * math.cos(hta)

        stem_stack_needed = required_stack_gain - spacer_stack
        stem_reach_needed = required_reach_gain - spacer_reach

        for stem_angle in range(config.min_stem_angle, config.max_stem_angle + 1):
            eff = effective_stem_angle(head_tube_angle, stem_angle)
            cos_eff = math.cos(eff)
            sin_eff = math.sin(eff)

            if abs(cos_eff) < config.singular_threshold:
                continue

            length_from_reach = stem_reach_needed / cos_eff
            if abs(sin_eff) > config.singular_threshold:
                length_from_stack = stem_stack_needed / sin_eff
            else:
                length_from_stack = length_from_reach
            stem_length = (length_from_reach + length_from_stack) / 2

            if not config.min_stem_length <= stem_length <= config.max_stem_length:
                continue

            achieved_stack = spacer_stack + stem_length * sin_eff
            achieved_reach = spacer_reach + stem_length * cos_eff
            total_error = abs(achieved_reach - required_reach_gain) + abs(achieved_stack - required_stack_gain)
            scored_error = total_error + config.angle_penalty_weight * abs(stem_angle - config.preferred_stem_angle)

            if best is None or scored_error < best.error:
                best = Candidate(spacers=spacers, stem_length=stem_length, stem_angle=stem_angle, error=scored_error)

    return best


def _fallback_solution(fit_position: FitPosition, frame: FrameGeometry, config: SolverConfig) -> StemSolution:
    stack_gain, reach_gain = cockpit_gain(
        frame.head_tube_angle, config.max_spacers, config.fallback_stem_length, config.preferred_stem_angle
    )
    return StemSolution(
        stem_length=config.fallback_stem_length,
        stem_angle=config.preferred_stem_angle,
        spacer_stack=config.max_spacers,
        stack_delta=frame.stack_mm + stack_gain - fit_position.handlebar_stack,
        reach_delta=frame.reach_mm + reach_gain - fit_position.handlebar_reach,
        is_achievable=False,
        notes=(NOT_ACHIEVABLE_NOTE,),
    )


def calculate_stem_requirements(
    fit_position: FitPosition,
    frame: FrameGeometry,
    config: SolverConfig | None = None,
) -> StemSolution:
    """
    Find the stem length, stem angle and spacer stack that put the handlebar of `frame`
    as close as possible to the handlebar position recorded in `fit_position`.

    The search is a brute-force sweep over spacer heights and whole-degree stem angles. For each pair,
    the stem length is estimated from both the missing reach and the missing stack and the two estimates
    are averaged. Candidates within the configured stem length bounds are scored by their absolute
    position error plus a penalty for straying from the preferred stem angle.

    Never raises: when no combination fits the component bounds, a fallback configuration
    flagged as not achievable is returned.
    """
    config = config or SolverConfig()

    required_stack_gain = fit_position.handlebar_stack - frame.stack_mm
    required_reach_gain = fit_position.handlebar_reach - frame.reach_mm

    best = _find_best_candidate(required_stack_gain, required_reach_gain, frame.head_tube_angle, config)

    if best is None:
        logger.warning(
            "No stem/spacer combination within bounds for stack gain {:.1f}mm, reach gain {:.1f}mm",
            required_stack_gain,
            required_reach_gain,
        )
        return _fallback_solution(fit_position, frame, config)

    # whole millimetres, kept inside the bounds when those are fractional
    stem_length = min(max(float(round_half_up(best.stem_length)), config.min_stem_length), config.max_stem_length)
    stack_gain, reach_gain = cockpit_gain(frame.head_tube_angle, best.spacers, stem_length, best.stem_angle)
    stack_delta = frame.stack_mm + stack_gain - fit_position.handlebar_stack
    reach_delta = frame.reach_mm + reach_gain - fit_position.handlebar_reach

    is_achievable = abs(stack_delta) <= config.achievable_tolerance and abs(reach_delta) <= config.achievable_tolerance

    notes = []
    if not is_achievable:
        notes.append(NOT_ACHIEVABLE_NOTE)
    if abs(stack_delta) > config.note_threshold:
        direction = "higher" if stack_delta > 0 else "lower"
        notes.append(f"Handlebar will be {abs(stack_delta):.0f}mm {direction} than original fit")
    if abs(reach_delta) > config.note_threshold:
        direction = "further" if reach_delta > 0 else "closer"
        notes.append(f"Handlebar will be {abs(reach_delta):.0f}mm {direction} than original fit")

    nearest = _nearest_common_length(stem_length, config.common_stem_lengths)
    if nearest != stem_length:
        notes.append(f"Nearest common stem length: {nearest}mm")

    solution = StemSolution(
        stem_length=stem_length,
        stem_angle=best.stem_angle,
        spacer_stack=best.spacers,
        stack_delta=stack_delta,
        reach_delta=reach_delta,
        is_achievable=is_achievable,
        notes=tuple(notes),
    )
    logger.debug("Stem solution: {}", solution)
    return solution
