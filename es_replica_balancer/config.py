import dataclasses


@dataclasses.dataclass
class EnvironmentConfiguration:
    """
    Manage information about the balancer environment.
    """

    strict_topology: bool = False
    runtime_errors: str = "raise"


# The global balancer environment.
CONFIG = EnvironmentConfiguration()


def configure(
    strict_topology: bool = False,
    runtime_errors: str = "raise",
):
    """
    Configure the balancer environment.

    `strict_topology` makes snapshot building fail on replicas hosted by nodes
    missing from the node listing. `runtime_errors` is either "raise" or
    "ignore"; with "ignore", a failed run does not set a non-zero exit code.
    """
    if runtime_errors not in ["raise", "ignore"]:
        raise ValueError(f"Unknown value for runtime_errors: {runtime_errors}")
    CONFIG.strict_topology = strict_topology
    CONFIG.runtime_errors = runtime_errors
