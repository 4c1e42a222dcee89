# ruff: noqa: E402
try:
    from importlib.metadata import PackageNotFoundError, version
except (ImportError, ModuleNotFoundError):  # pragma:nocover
    from importlib_metadata import PackageNotFoundError, version  # type: ignore[assignment,no-redef,unused-ignore]

__appname__ = "es-replica-balancer"

try:
    __version__ = version(__appname__)
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

from .cluster.client import ElasticsearchClient
from .config import configure
from .rebalance.core import run_rebalance

__all__ = [
    "ElasticsearchClient",
    "configure",
    "run_rebalance",
]
