"""Poll cycle bookkeeping types."""

from dataclasses import dataclass, asdict


@dataclass
class CycleReport:
    fetched: int = 0
    pull_requests: int = 0
    presented: int = 0
    acknowledged: int = 0
    failed: int = 0
    aborted: bool = False   # notification list could not be fetched

    def to_dict(self) -> dict:
        return asdict(self)
