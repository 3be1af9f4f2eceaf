from pathlib import Path
from typing import Dict, List
from pydantic import BaseModel, Field


class RunReport(BaseModel):
    """
    Summary of a completed interpreter run.
    """
    instructions: int = 0
    commands_run: int = 0
    ignored: List[str] = Field(default_factory=list)
    fetch_failures: List[str] = Field(default_factory=list)
    variables: Dict[str, str] = Field(default_factory=dict)
    workdir: Path

    @property
    def succeeded(self) -> bool:
        """True when every fetch also succeeded; failed RUNs never produce a report."""
        return not self.fetch_failures
