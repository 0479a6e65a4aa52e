from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger

from fittransfer.api.schemas import SetupRequestSchema, StemRequestSchema
from fittransfer.config import SetupSettings, SolverSettings, get_setup_settings, get_solver_settings
from fittransfer.core.bike_setup import calculate_bike_setup
from fittransfer.core.models import BikeSetupCalculation, StemSolution
from fittransfer.core.solver import calculate_stem_requirements

router = APIRouter()


@router.post("/stem", response_model=StemSolution)
def calculate_stem(
    data: StemRequestSchema,
    solver_settings: Annotated[SolverSettings, Depends(get_solver_settings)],
):
    config = data.config or solver_settings.solver_config()
    solution = calculate_stem_requirements(data.fit_position, data.frame, config)
    logger.info(
        "Stem for stack {} / reach {}: {}mm @ {}° with {}mm spacers (achievable: {})",
        data.frame.stack_mm,
        data.frame.reach_mm,
        solution.stem_length,
        solution.stem_angle,
        solution.spacer_stack,
        solution.is_achievable,
    )
    return solution


@router.post("/setup", response_model=BikeSetupCalculation)
def calculate_setup(
    data: SetupRequestSchema,
    solver_settings: Annotated[SolverSettings, Depends(get_solver_settings)],
    setup_settings: Annotated[SetupSettings, Depends(get_setup_settings)],
):
    solver_config = data.solver_config or solver_settings.solver_config()
    setup_config = data.setup_config or setup_settings.setup_config()
    setup = calculate_bike_setup(data.fit, data.frame, solver_config, setup_config)
    logger.info(
        "Setup for {}: {} note(s), {} warning(s)",
        data.fit.original_fit_bike or "unknown bike",
        len(setup.notes),
        len(setup.warnings),
    )
    return setup
