import pytest
import requests
import responses
from responses import matchers

from es_replica_balancer.cluster.client import ElasticsearchClient
from es_replica_balancer.exception import FetchError, NotAcknowledgedError
from tests.conftest import ES_URL


def test_client_endpoint_defaults():
    client = ElasticsearchClient()
    assert client.endpoint == "http://localhost:9200"
    assert client.timeout == 10.0


def test_client_endpoint_from_environment(mocker):
    mocker.patch.dict("os.environ", {"ES_ENDPOINT": "es.example.org:9201", "ES_TIMEOUT": "2.5"})
    client = ElasticsearchClient()
    assert client.endpoint == "http://es.example.org:9201"
    assert client.timeout == 2.5


def test_client_timeout_invalid(mocker):
    mocker.patch.dict("os.environ", {"ES_TIMEOUT": "soon"})
    with pytest.raises(ValueError) as ex:
        ElasticsearchClient()
    assert ex.match("Invalid value for ES_TIMEOUT, expected seconds: 'soon'")


def test_client_endpoint_url():
    client = ElasticsearchClient(endpoint="https://es.example.org/", timeout=3)
    assert client.endpoint == "https://es.example.org"
    assert client.url("/_cat/nodes") == "https://es.example.org/_cat/nodes"


@responses.activate
def test_list_nodes(es_client, scenario_nodes):
    responses.add(
        responses.GET,
        f"{ES_URL}/_cat/nodes",
        json=scenario_nodes,
        match=[matchers.query_param_matcher({"h": "ip,node.role,name", "format": "json"})],
    )
    assert es_client.list_nodes() == scenario_nodes


@responses.activate
def test_list_shards(es_client, scenario_shards):
    responses.add(
        responses.GET,
        f"{ES_URL}/_cat/shards",
        json=scenario_shards,
        match=[
            matchers.query_param_matcher(
                {"h": "index,shard,prirep,state,docs,node,store,ip,unassigned.reason", "format": "json"}
            )
        ],
    )
    assert es_client.list_shards() == scenario_shards


@responses.activate
def test_list_nodes_http_error(es_client):
    responses.add(responses.GET, f"{ES_URL}/_cat/nodes", status=503, body="unavailable")
    with pytest.raises(FetchError) as ex:
        es_client.list_nodes()
    assert ex.match("Cluster responded with HTTP 503")


@responses.activate
def test_list_shards_decode_error(es_client):
    responses.add(responses.GET, f"{ES_URL}/_cat/shards", body="<html>")
    with pytest.raises(FetchError) as ex:
        es_client.list_shards()
    assert ex.match("Failed to decode response")


@responses.activate
def test_list_shards_unexpected_type(es_client):
    responses.add(responses.GET, f"{ES_URL}/_cat/shards", json={"error": "nope"})
    with pytest.raises(FetchError) as ex:
        es_client.list_shards()
    assert ex.match("Expected list from _cat/shards, got dict")


@responses.activate
def test_list_nodes_transport_error(es_client):
    responses.add(responses.GET, f"{ES_URL}/_cat/nodes", body=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(FetchError) as ex:
        es_client.list_nodes()
    assert ex.match("Request failed: refused")


@responses.activate
def test_submit_reroute(es_client):
    responses.add(
        responses.POST,
        f"{ES_URL}/_cluster/reroute",
        json={"acknowledged": True, "state": {}},
        match=[
            matchers.json_params_matcher(
                {
                    "commands": [
                        {
                            "allocate_empty_primary": {
                                "index": "logs",
                                "shard": 3,
                                "node": "node-a",
                                "accept_data_loss": True,
                            }
                        }
                    ]
                }
            )
        ],
    )
    assert es_client.submit_reroute("logs", 3, "node-a")["acknowledged"] is True


@responses.activate
def test_submit_reroute_not_acknowledged(es_client):
    responses.add(responses.POST, f"{ES_URL}/_cluster/reroute", json={"acknowledged": False})
    with pytest.raises(NotAcknowledgedError) as ex:
        es_client.submit_reroute("logs", 3, "node-a")
    assert ex.match("Reroute of shard logs/3 to node node-a was not acknowledged")


@responses.activate
def test_submit_reroute_rejected(es_client):
    responses.add(
        responses.POST,
        f"{ES_URL}/_cluster/reroute",
        status=400,
        json={"error": {"type": "illegal_argument_exception"}},
    )
    with pytest.raises(FetchError) as ex:
        es_client.submit_reroute("logs", 3, "node-a")
    assert ex.match("Cluster responded with HTTP 400")


@responses.activate
def test_test_connection(es_client):
    responses.add(responses.GET, f"{ES_URL}/", json={"cluster_name": "testdrive"})
    assert es_client.test_connection() is True

    responses.replace(responses.GET, f"{ES_URL}/", status=500)
    assert es_client.test_connection() is False
