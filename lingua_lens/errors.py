"""Exception hierarchy shared across the translation assistant."""


class LinguaLensError(Exception):
    """Base class for all application errors."""


class FlowError(LinguaLensError):
    """A flow could not produce a result from the generative backend."""

    def __init__(self, flow_name: str, message: str):
        super().__init__(f"{flow_name}: {message}")
        self.flow_name = flow_name


class FlowInputError(FlowError):
    """The input handed to a flow did not match its schema."""


class FlowOutputError(FlowError):
    """The backend answered, but the answer was empty or unparsable."""


class StorageError(LinguaLensError):
    """A key-value store read, write or delete failed."""


class CapabilityBusyError(LinguaLensError):
    """A capability was triggered while its previous call is still in flight."""

    def __init__(self, capability: str):
        super().__init__(f"'{capability}' is already in progress")
        self.capability = capability
