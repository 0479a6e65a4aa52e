import pytest
from fastapi.testclient import TestClient

from fittransfer.config import SetupSettings, SolverSettings, get_setup_settings, get_solver_settings
from fittransfer.core.models import FitPosition, FitReportData, FrameGeometry, OriginalBike
from fittransfer.main import app


@pytest.fixture
def frame():
    return FrameGeometry(
        stack_mm=530,
        reach_mm=390,
        head_tube_angle=73.0,
        head_tube_length_mm=140,
        seat_tube_angle=73.0,
        seat_tube_length_mm=520,
        bb_drop_mm=72,
    )


@pytest.fixture
def fit_position():
    return FitPosition(
        saddle_height=750,
        saddle_setback=-65,
        saddle_angle=-2,
        handlebar_stack=560,
        handlebar_reach=400,
    )


@pytest.fixture
def fit_report(fit_position):
    return FitReportData(
        frame_stack=550,
        frame_reach=385,
        fit_position=fit_position,
        rider_name="JANE RIDER",
        fit_date="2023-05-12",
        original_bike=OriginalBike(make="Specialized", model="Tarmac SL7", size="54", year=2022),
    )


@pytest.fixture
def client():
    app.dependency_overrides[get_solver_settings] = lambda: SolverSettings(_env_file=None)
    app.dependency_overrides[get_setup_settings] = lambda: SetupSettings(_env_file=None)

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
