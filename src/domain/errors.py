"""Error taxonomy shared by configuration, placement and export."""


class AllRgbError(Exception):
    """Base class for all application errors."""


class ConfigurationError(AllRgbError, ValueError):
    """Settings are inconsistent or cannot be parsed; raised before the run starts."""


class InvariantViolation(AllRgbError, RuntimeError):
    """Placement bookkeeping is broken; the run must abort."""


class ExportFailure(AllRgbError, OSError):
    """A checkpoint image could not be written. Recoverable."""

    def __init__(self, checkpoint_id: int, path: str, reason: str) -> None:
        super().__init__(f'checkpoint {checkpoint_id} -> {path}: {reason}')
        self.checkpoint_id = checkpoint_id
        self.path = path
        self.reason = reason
