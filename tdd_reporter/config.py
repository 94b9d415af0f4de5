"""Configuration shared by all reporters."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROJECT_ROOT_ENV = "TDD_REPORTER_PROJECT_ROOT"
DEFAULT_DATA_DIR = Path(".claude") / "tdd-guard" / "data"
TEST_RESULTS_FILENAME = "test.json"


class Config(BaseModel):
    """Where results for a project are stored."""

    model_config = ConfigDict(frozen=True)

    project_root: Path = Field(default_factory=Path.cwd)
    data_dir: Path = DEFAULT_DATA_DIR

    @field_validator("project_root")
    @classmethod
    def _require_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError("Project root must be an absolute path")
        return value

    @property
    def test_results_path(self) -> Path:
        """Location of the latest test results file."""
        return self.project_root / self.data_dir / TEST_RESULTS_FILENAME
