from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, model_validator

from fittransfer.core import constants


class FitPosition(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, populate_by_name=True, from_attributes=True)

    saddle_height: PositiveFloat = Field(description="BB center to the center of the saddle, in mm.")
    saddle_setback: float = Field(
        description="Horizontal distance from the BB to the saddle tip. Negative means behind the BB.",
    )
    saddle_angle: float = Field(default=0.0, description="Saddle tilt in degrees. Negative is nose down.")
    handlebar_stack: float = Field(description="Vertical distance from the BB to the handlebar center, in mm.")
    handlebar_reach: float = Field(description="Horizontal distance from the BB to the handlebar center, in mm.")

    effective_seat_tube_angle: float | None = Field(
        default=None,
        gt=0.0,
        lt=180.0,
        description="Seat tube angle implied by the saddle position, as measured during the fit.",
    )
    handlebar_drop: float | None = Field(default=None, description="Saddle to bar top. Negative is bar below saddle.")
    grip_reach: float | None = Field(default=None, description="Saddle tip to grip trough.")
    grip_drop: float | None = Field(default=None, description="Saddle to grip. Negative is below.")
    bar_reach: float | None = Field(default=None, description="Bar center to grip.")
    grip_width: float | None = None
    grip_angle: float | None = None


class FrameGeometry(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, populate_by_name=True, from_attributes=True)

    stack_mm: PositiveFloat = Field(
        description=(
            "The vertical distance from the center of the Bottom Bracket to the center of the top of the head tube. "
            "Determines the minimum handlebar height."
        ),
    )
    reach_mm: PositiveFloat = Field(
        description="The horizontal distance from the center of the Bottom Bracket to the center of the top of the head tube.",
    )
    head_tube_angle: float = Field(gt=0.0, lt=180.0, description="Angle relative to horizontal, in degrees.")

    head_tube_length_mm: PositiveFloat | None = None
    seat_tube_angle: float | None = Field(default=None, gt=0.0, lt=180.0)
    seat_tube_length_mm: PositiveFloat | None = Field(
        default=None,
        description="Measured center-to-top. Limits seatpost insertion.",
    )
    bb_drop_mm: float | None = None


class SolverConfig(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    min_stem_length: PositiveFloat = constants.MIN_STEM_LENGTH_MM
    max_stem_length: PositiveFloat = constants.MAX_STEM_LENGTH_MM
    max_spacers: int = Field(default=constants.MAX_SPACERS_MM, ge=0)
    preferred_stem_angle: int = constants.PREFERRED_STEM_ANGLE

    spacer_step: PositiveInt = constants.SPACER_STEP_MM
    min_stem_angle: int = constants.MIN_STEM_ANGLE
    max_stem_angle: int = constants.MAX_STEM_ANGLE
    angle_penalty_weight: float = Field(default=constants.ANGLE_PENALTY_WEIGHT, ge=0.0)
    singular_threshold: float = Field(default=constants.SINGULAR_THRESHOLD, ge=0.0, lt=1.0)
    achievable_tolerance: float = Field(default=constants.ACHIEVABLE_TOLERANCE_MM, ge=0.0)
    note_threshold: float = Field(default=constants.DELTA_NOTE_THRESHOLD_MM, ge=0.0)
    fallback_stem_length: PositiveFloat = constants.FALLBACK_STEM_LENGTH_MM
    common_stem_lengths: tuple[PositiveInt, ...] = Field(default=constants.COMMON_STEM_LENGTHS_MM, min_length=1)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_stem_length > self.max_stem_length:
            raise ValueError("min_stem_length must not exceed max_stem_length")
        if self.min_stem_angle > self.max_stem_angle:
            raise ValueError("min_stem_angle must not exceed max_stem_angle")
        return self


class SetupConfig(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    default_seat_tube_angle: float = Field(default=constants.DEFAULT_SEAT_TUBE_ANGLE, gt=0.0, lt=180.0)
    min_seatpost_extension: float = constants.MIN_SEATPOST_EXTENSION_MM
    max_seatpost_extension: float = constants.MAX_SEATPOST_EXTENSION_MM
    sta_tolerance: float = Field(default=constants.STA_TOLERANCE_DEG, ge=0.0)
    large_offset_threshold: float = constants.LARGE_OFFSET_THRESHOLD_MM
    small_offset_threshold: float = constants.SMALL_OFFSET_THRESHOLD_MM
    large_offset: int = constants.LARGE_SEATPOST_OFFSET_MM
    small_offset: int = constants.SMALL_SEATPOST_OFFSET_MM
    forward_saddle_setback: float = Field(default=constants.FORWARD_SADDLE_SETBACK_MM, ge=0.0)
    min_projection_sine: float = Field(default=constants.SINGULAR_THRESHOLD, ge=0.0, lt=1.0)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.min_seatpost_extension > self.max_seatpost_extension:
            raise ValueError("min_seatpost_extension must not exceed max_seatpost_extension")
        if self.small_offset_threshold > self.large_offset_threshold:
            raise ValueError("small_offset_threshold must not exceed large_offset_threshold")
        return self


class OriginalBike(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    make: str
    model: str
    size: str = ""
    year: int | None = None
    type: str = "Road"


class FitComponents(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, from_attributes=True)

    stem: str | None = None  # e.g. "-6° x 120mm"
    stem_angle: float | None = None
    stem_length: PositiveFloat | None = None
    spacer_stack: float = Field(default=0.0, ge=0.0)
    crank_length: PositiveFloat = 170.0
    saddle: str | None = None
    bars: str | None = None


class Fitter(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    name: str
    site: str
    notes: str | None = None


class FitReportData(BaseModel):
    """
    Structured result of a professional fit report.

    This is the only input the setup calculator accepts, so whatever extracts it from a document
    must deliver the frame stack/reach and the handlebar position or fail on its own side.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False, populate_by_name=True, from_attributes=True)

    frame_stack: PositiveFloat
    frame_reach: PositiveFloat
    fit_position: FitPosition

    rider_name: str | None = None
    fit_date: str | None = None
    original_bike: OriginalBike | None = None
    components: FitComponents | None = None
    fitter: Fitter | None = None

    @property
    def original_fit_bike(self) -> str | None:
        if not self.original_bike:
            return None
        bike = self.original_bike
        return f"{bike.make} {bike.model} {bike.size}".strip()


class StemSolution(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, from_attributes=True)

    stem_length: float
    stem_angle: int
    spacer_stack: int
    stack_delta: float = Field(description="Achieved minus target handlebar stack. Positive means higher.")
    reach_delta: float = Field(description="Achieved minus target handlebar reach. Positive means further.")
    is_achievable: bool
    notes: tuple[str, ...] = ()


class BikeSetupCalculation(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, from_attributes=True)

    stem: StemSolution

    saddle_height: float
    seatpost_extension: int | None = Field(description="Seatpost showing above the seat tube, if calculable.")
    saddle_setback: float
    saddle_angle: float

    effective_seat_tube_angle: float
    seatpost_offset_needed: int

    original_fit_bike: str | None = None
    original_fit_date: str | None = None

    notes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
