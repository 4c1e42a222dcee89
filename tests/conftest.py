# Copyright (c) 2021-2023, Crate.io Inc.
# Distributed under the terms of the AGPLv3 license, see LICENSE.
import os
import typing as t
from unittest.mock import Mock

import pytest
import responses

from es_replica_balancer.cluster.client import ElasticsearchClient
from es_replica_balancer.config import configure

ES_URL = "http://localhost:9200"


def node_record(name: str, role: str = "dim", ip: str = "10.0.0.1") -> t.Dict[str, str]:
    """Create a record like `_cat/nodes?format=json` returns it"""
    return {"ip": ip, "node.role": role, "name": name}


def shard_record(
    index: str,
    shard: t.Union[int, str],
    prirep: str = "r",
    node: t.Optional[str] = None,
    state: t.Optional[str] = None,
    docs: t.Optional[str] = None,
    reason: t.Optional[str] = None,
) -> t.Dict[str, t.Optional[str]]:
    """Create a record like `_cat/shards?format=json` returns it"""
    if state is None:
        state = "STARTED" if node else "UNASSIGNED"
    if docs is None and node:
        docs = "42"
    if reason is None and not node:
        reason = "NODE_LEFT"
    return {
        "index": index,
        "shard": str(shard),
        "prirep": prirep,
        "state": state,
        "docs": docs,
        "store": "1.2mb" if node else None,
        "ip": "10.0.0.1" if node else None,
        "node": node,
        "unassigned.reason": reason,
    }


@pytest.fixture(scope="session", autouse=True)
def prune_environment():
    """
    Delete all environment variables starting with `ES_`,
    to prevent leaking from the developer's environment to the test suite.
    """
    envvars = []
    for envvar in os.environ.keys():
        if envvar.startswith("ES_"):
            envvars.append(envvar)
    for envvar in envvars:
        os.environ.pop(envvar, None)


@pytest.fixture(autouse=True)
def reset_configuration():
    """
    Reset the global balancer environment after each test case.
    """
    yield
    configure()


@pytest.fixture
def scenario_nodes() -> t.List[t.Dict[str, str]]:
    """
    Three data nodes and one master-only node.
    """
    return [
        node_record("node-c", ip="10.0.0.3"),
        node_record("node-a", ip="10.0.0.1"),
        node_record("node-b", ip="10.0.0.2"),
        node_record("master-1", role="m", ip="10.0.0.9"),
    ]


@pytest.fixture
def scenario_shards() -> t.List[t.Dict[str, t.Optional[str]]]:
    """
    node-b hosts one replica, node-a and node-c host none. Two replicas are unassigned.
    """
    return [
        shard_record("logs", 0, prirep="p", node="node-a"),
        shard_record("logs", 0, prirep="r", node="node-b"),
        shard_record("metrics", 0, prirep="p", node="node-c"),
        shard_record("metrics", 0, prirep="r"),
        shard_record("metrics", 1, prirep="p", node="node-a"),
        shard_record("metrics", 1, prirep="r"),
    ]


@pytest.fixture
def mock_client():
    """
    A client double which acknowledges every reroute.
    """
    client = Mock(spec=ElasticsearchClient)
    client.submit_reroute.return_value = {"acknowledged": True}
    return client


@pytest.fixture
def es_client() -> ElasticsearchClient:
    return ElasticsearchClient(endpoint="localhost:9200", timeout=1.0)


@pytest.fixture
def mock_cluster(scenario_nodes, scenario_shards):
    """
    Mock the HTTP API of an Elasticsearch cluster with the scenario topology.
    """
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(responses.GET, f"{ES_URL}/_cat/nodes", json=scenario_nodes)
        rsps.add(responses.GET, f"{ES_URL}/_cat/shards", json=scenario_shards)
        rsps.add(responses.POST, f"{ES_URL}/_cluster/reroute", json={"acknowledged": True})
        yield rsps
