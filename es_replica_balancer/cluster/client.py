"""
HTTP client for the Elasticsearch `_cat` and `_cluster/reroute` APIs
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from dotenv import load_dotenv

from es_replica_balancer.exception import FetchError, NotAcknowledgedError
from es_replica_balancer.model import AllocateEmptyPrimary, RerouteRequest

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "localhost:9200"
DEFAULT_TIMEOUT = 10.0

NODE_COLUMNS = ["ip", "node.role", "name"]
SHARD_COLUMNS = ["index", "shard", "prirep", "state", "docs", "node", "store", "ip", "unassigned.reason"]


class ElasticsearchClient:
    """Client for reading cluster listings and submitting reroute commands"""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        load_dotenv()

        endpoint = endpoint or os.getenv("ES_ENDPOINT") or DEFAULT_ENDPOINT
        if timeout is None:
            value = os.getenv("ES_TIMEOUT", DEFAULT_TIMEOUT)
            try:
                timeout = float(value)
            except ValueError as ex:
                raise ValueError(f"Invalid value for ES_TIMEOUT, expected seconds: {value!r}") from ex

        # Accept both `host:port` and full URLs.
        if not endpoint.startswith(("http://", "https://")):
            endpoint = f"http://{endpoint}"
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.endpoint}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url(path)
        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as ex:
            raise FetchError(f"Request failed: {ex}") from ex

        if response.status_code != requests.codes.ok:
            raise FetchError(f"Cluster responded with HTTP {response.status_code}: {response.text[:200]}")

        try:
            return response.json()
        except ValueError as ex:
            raise FetchError(f"Failed to decode response: {ex}") from ex

    def _cat(self, what: str, columns: List[str]) -> List[Dict[str, Any]]:
        data = self._request("GET", f"_cat/{what}", params={"h": ",".join(columns), "format": "json"})
        if not isinstance(data, list):
            raise FetchError(f"Failed to decode response: Expected list from _cat/{what}, got {type(data).__name__}")
        return data

    def list_nodes(self) -> List[Dict[str, Any]]:
        """Get raw node records from `_cat/nodes`"""
        return self._cat("nodes", NODE_COLUMNS)

    def list_shards(self) -> List[Dict[str, Any]]:
        """Get raw shard records from `_cat/shards`"""
        return self._cat("shards", SHARD_COLUMNS)

    def submit_reroute(self, index: str, shard: int, node: str) -> Dict[str, Any]:
        """
        Allocate a shard copy as empty primary on `node`, accepting data loss.

        Raises `NotAcknowledgedError` when the cluster does not acknowledge the command.
        """
        request = RerouteRequest(commands=[AllocateEmptyPrimary(index=index, shard=shard, node=node)])
        data = self._request("POST", "_cluster/reroute", json=request.to_dict())
        if not isinstance(data, dict) or data.get("acknowledged") is not True:
            raise NotAcknowledgedError(f"Reroute of shard {index}/{shard} to node {node} was not acknowledged")
        return data

    def test_connection(self) -> bool:
        try:
            self._request("GET", "")
            return True
        except FetchError:
            return False
