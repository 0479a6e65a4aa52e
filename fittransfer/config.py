from pathlib import Path

from loguru import logger
from pydantic import PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from fittransfer.core import constants
from fittransfer.core.models import SetupConfig, SolverConfig

ENV_FILE = Path(__file__).parent.parent / ".env"


class SolverSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIT_SOLVER_", env_file=ENV_FILE, extra="ignore")

    min_stem_length: float = constants.MIN_STEM_LENGTH_MM
    max_stem_length: float = constants.MAX_STEM_LENGTH_MM
    max_spacers: int = constants.MAX_SPACERS_MM
    preferred_stem_angle: int = constants.PREFERRED_STEM_ANGLE
    angle_penalty_weight: float = constants.ANGLE_PENALTY_WEIGHT
    achievable_tolerance: float = constants.ACHIEVABLE_TOLERANCE_MM
    common_stem_lengths: tuple[int, ...] = constants.COMMON_STEM_LENGTHS_MM

    _solver_config: SolverConfig | None = PrivateAttr(default=None)

    def model_post_init(self, __context):
        # invalid env combinations fail when the settings load, not on the first request
        self._solver_config = SolverConfig(**self.model_dump())

    def __repr__(self):
        return f"SolverSettings({self})"

    def solver_config(self) -> SolverConfig:
        return self._solver_config


class SetupSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIT_SETUP_", env_file=ENV_FILE, extra="ignore")

    default_seat_tube_angle: float = constants.DEFAULT_SEAT_TUBE_ANGLE
    min_seatpost_extension: float = constants.MIN_SEATPOST_EXTENSION_MM
    max_seatpost_extension: float = constants.MAX_SEATPOST_EXTENSION_MM
    large_offset_threshold: float = constants.LARGE_OFFSET_THRESHOLD_MM
    small_offset_threshold: float = constants.SMALL_OFFSET_THRESHOLD_MM

    _setup_config: SetupConfig | None = PrivateAttr(default=None)

    def model_post_init(self, __context):
        self._setup_config = SetupConfig(**self.model_dump())

    def __repr__(self):
        return f"SetupSettings({self})"

    def setup_config(self) -> SetupConfig:
        return self._setup_config


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIT_SERVER_", env_file=ENV_FILE, extra="ignore")

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    def __repr__(self):
        return f"ServerSettings({self})"


solver_settings = SolverSettings()
setup_settings = SetupSettings()
server_settings = ServerSettings()


def get_solver_settings() -> SolverSettings:
    return solver_settings


def get_setup_settings() -> SetupSettings:
    return setup_settings


if __name__ == "__main__":
    logger.info("🚲 Solver settings loaded: {}", repr(solver_settings))
    logger.info("💺 Setup settings loaded: {}", repr(setup_settings))
    logger.info("🌐 Server settings loaded: {}", repr(server_settings))
