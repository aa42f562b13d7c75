class ConfigurationError(ValueError):
    """Rejected simulation parameters. Raised before any run state exists."""


class InvariantViolation(AssertionError):
    """Internal consistency check failed during a run.

    Carries whatever diagnostic context was known when the check fired.
    """

    def __init__(self, message, policy=None, frame=None, instruction=None):
        self.policy = policy
        self.frame = frame
        self.instruction = instruction
        details = []
        if policy is not None:
            details.append(f"policy={policy}")
        if frame is not None:
            details.append(f"frame={frame}")
        if instruction is not None:
            details.append(f"instruction={instruction}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)
