from pydantic import BaseModel, ConfigDict

from fittransfer.core.models import FitPosition, FitReportData, FrameGeometry, SetupConfig, SolverConfig


class StemRequestSchema(BaseModel):
    fit_position: FitPosition
    frame: FrameGeometry
    config: SolverConfig | None = None

    model_config = ConfigDict(from_attributes=True)


class SetupRequestSchema(BaseModel):
    fit: FitReportData
    frame: FrameGeometry
    solver_config: SolverConfig | None = None
    setup_config: SetupConfig | None = None

    model_config = ConfigDict(from_attributes=True)
