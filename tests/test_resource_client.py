from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.fhir import ResourceClient, parse_json_formatter
from core.errors import TransportError
from core.interfaces.fhir import ResourceFetcher
from tests.conftest import API_HOST

FHIR_ACCEPT = "application/fhir+json; charset=UTF-8"


def test_parse_json_formatter():
    assert parse_json_formatter("") == {}
    assert parse_json_formatter("{not json") == {}
    assert parse_json_formatter(None) == {}
    assert parse_json_formatter('{"id": "1"}') == {"id": "1"}
    assert parse_json_formatter("42") == 42
    assert parse_json_formatter("[1, 2]") == [1, 2]


def test_parse_json_formatter_rejects_non_standard_constants():
    assert parse_json_formatter("NaN") == {}
    assert parse_json_formatter('{"valueQuantity": {"value": -Infinity}}') == {}


def test_parse_json_formatter_deeply_nested_body_is_empty_mapping():
    assert parse_json_formatter("[" * 100000 + "]" * 100000) == {}
    assert parse_json_formatter('{"a": ' * 100000 + "1" + "}" * 100000) == {}


async def test_get_resource_request_shape(config, respx_mock):
    route = respx_mock.get(f"{API_HOST}/Patient/123").respond(text="{}")

    await ResourceClient.from_config(config).get_resource("Patient/123", "tok")

    request = route.calls.last.request
    assert str(request.url) == f"{API_HOST}/Patient/123"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["Accept"] == FHIR_ACCEPT


async def test_get_resources_request_shape(config, respx_mock):
    route = respx_mock.get(f"{API_HOST}/Patient?name=Smith").respond(text="{}")

    await ResourceClient.from_config(config).get_resources("Patient", "name=Smith", "tok")

    request = route.calls.last.request
    assert str(request.url) == f"{API_HOST}/Patient?name=Smith"
    assert request.headers["Authorization"] == "Bearer tok"
    assert request.headers["Accept"] == FHIR_ACCEPT


@pytest.mark.parametrize(
    "body",
    [
        "",
        "{not json",
        "<html>Bad Gateway</html>",
        '{"valueDecimal": NaN}',
        '{"valueDecimal": Infinity}',
        "-Infinity",
        pytest.param("[" * 100000 + "]" * 100000, id="deeply-nested"),
    ],
)
async def test_empty_or_malformed_body_is_empty_mapping(config, respx_mock, body):
    respx_mock.get(f"{API_HOST}/Patient/1").respond(text=body)
    respx_mock.get(f"{API_HOST}/Patient?name=x").respond(text=body)
    client = ResourceClient.from_config(config)

    assert await client.get_resource("Patient/1", "tok") == {}
    assert await client.get_resources("Patient", "name=x", "tok") == {}


async def test_valid_documents_returned_unchanged(config, respx_mock):
    patient = {"resourceType": "Patient", "id": "1", "name": [{"family": "Smith"}]}
    bundle = {"resourceType": "Bundle", "type": "searchset", "entry": [{"resource": patient}]}
    respx_mock.get(f"{API_HOST}/Patient/1").respond(json=patient)
    respx_mock.get(f"{API_HOST}/Patient?name=Smith").respond(json=bundle)
    client = ResourceClient.from_config(config)

    assert await client.get_resource("Patient/1", "tok") == patient
    assert await client.get_resources("Patient", "name=Smith", "tok") == bundle


async def test_non_object_json_is_preserved(config, respx_mock):
    respx_mock.get(f"{API_HOST}/Basic/n").respond(text="[1, 2, 3]")

    assert await ResourceClient.from_config(config).get_resource("Basic/n", "tok") == [1, 2, 3]


async def test_upstream_rejection_follows_body_policy(config, respx_mock):
    outcome = {"resourceType": "OperationOutcome", "issue": [{"severity": "error"}]}
    respx_mock.get(f"{API_HOST}/Patient/404").respond(status_code=404, json=outcome)
    respx_mock.get(f"{API_HOST}/Patient/401").respond(status_code=401, text="")
    client = ResourceClient.from_config(config)

    assert await client.get_resource("Patient/404", "tok") == outcome
    assert await client.get_resource("Patient/401", "tok") == {}


async def test_transport_failure_propagates(config, respx_mock):
    respx_mock.get(f"{API_HOST}/Patient/1").mock(side_effect=httpx.ConnectError("connection refused"))
    respx_mock.get(f"{API_HOST}/Patient?name=x").mock(
        side_effect=httpx.ConnectError("connection refused")
    )
    client = ResourceClient.from_config(config)

    with pytest.raises(TransportError):
        await client.get_resource("Patient/1", "tok")
    with pytest.raises(TransportError):
        await client.get_resources("Patient", "name=x", "tok")


async def test_concurrent_calls_do_not_interfere(config, respx_mock):
    for n in range(5):
        respx_mock.get(f"{API_HOST}/Patient/{n}").respond(json={"resourceType": "Patient", "id": str(n)})
    client = ResourceClient.from_config(config)

    results = await asyncio.gather(*(client.get_resource(f"Patient/{n}", f"tok-{n}") for n in range(5)))

    assert [r["id"] for r in results] == ["0", "1", "2", "3", "4"]


def test_satisfies_resource_fetcher_protocol(config):
    assert isinstance(ResourceClient(config), ResourceFetcher)
