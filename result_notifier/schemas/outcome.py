from pydantic import BaseModel


class FailureRecord(BaseModel):
    model_config = {"frozen": True}

    test_name: str
    message: str = ""  # raw exception / error message


class RunOutcome(BaseModel):
    """Result of a finished test run, as handed over by the test engine."""
    model_config = {"frozen": True}

    total: int
    success: bool
    failure_count: int = 0
    error_count: int = 0
    failures: list[FailureRecord] = []
    errors: list[FailureRecord] = []

    @property
    def failed_count(self) -> int:
        return self.failure_count + self.error_count
