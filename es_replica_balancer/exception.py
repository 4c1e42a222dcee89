from click import ClickException


class RebalanceError(ClickException):
    """
    Base class for all errors which stop a rebalancing run.
    """

    STANDARD_MESSAGE = "Rebalancing failed"

    def __init__(self, message: str = None):
        if not message:
            message = self.STANDARD_MESSAGE
        super().__init__(message)


class FetchError(RebalanceError):
    STANDARD_MESSAGE = "Failed to retrieve or decode a response from the cluster"


class NotAcknowledgedError(RebalanceError):
    STANDARD_MESSAGE = "Request was not acknowledged"


class NoEligibleNodesError(RebalanceError):
    STANDARD_MESSAGE = "No eligible data nodes available as placement target"


class InconsistentTopologyError(RebalanceError):
    STANDARD_MESSAGE = "Shard listing references nodes missing from the node listing"

    def __init__(self, message: str = None, nodes=None):
        self.nodes = sorted(nodes or [])
        if not message and self.nodes:
            message = f"{self.STANDARD_MESSAGE}: {', '.join(self.nodes)}"
        super().__init__(message)
