"""Tests for swagger_to_postman.converter.postman."""

from __future__ import annotations

import datetime
import json
from typing import Any

import pytest

from swagger_to_postman.converter.postman import (
    POSTMAN_SCHEMA,
    base_url,
    build_collection,
    collapse_single_child_folders,
)
from swagger_to_postman.models import ConverterOptions, ParsedSpec
from swagger_to_postman.parser.extractor import extract_spec


def _requests(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Flatten folders into the list of request items, depth first."""
    found = []
    for item in items:
        if "request" in item:
            found.append(item)
        else:
            found.extend(_requests(item["item"]))
    return found


def _named(collection: dict[str, Any], name: str) -> dict[str, Any]:
    return next(i for i in _requests(collection["item"]) if i["name"] == name)


@pytest.fixture
def collection(petstore_spec: ParsedSpec) -> dict[str, Any]:
    return build_collection(petstore_spec, ConverterOptions())


class TestCollectionShape:
    def test_info(self, collection: dict[str, Any]) -> None:
        info = collection["info"]
        assert info["name"] == "Petstore API"
        assert info["description"] == "A sample pet store."
        assert info["schema"] == POSTMAN_SCHEMA
        assert len(info["_postman_id"]) == 36

    def test_base_url_variable_uses_server_defaults(self, collection: dict[str, Any]) -> None:
        assert collection["variable"] == [
            {"key": "baseUrl", "value": "https://eu.petstore.example.com/v1", "type": "string"}
        ]

    def test_every_operation_becomes_a_request(self, collection: dict[str, Any]) -> None:
        assert len(_requests(collection["item"])) == 5

    def test_is_json_serializable(self, collection: dict[str, Any]) -> None:
        assert json.loads(json.dumps(collection)) == collection


class TestFolders:
    def test_path_strategy_with_collapsing(self, collection: dict[str, Any]) -> None:
        top = collection["item"]
        assert [i["name"] for i in top] == ["pets", "store/inventory"]
        pets = top[0]["item"]
        assert [i["name"] for i in pets] == ["List all pets", "Create a pet", "{petId}"]

    def test_path_strategy_without_collapsing(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(collapse_folders=False))
        store = result["item"][1]
        assert store["name"] == "store"
        assert store["item"][0]["name"] == "inventory"

    def test_tag_strategy(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions.model_validate({"folderStrategy": "Tags"}))
        names = [i["name"] for i in result["item"]]
        assert names == ["pets", "store", "Delete a pet"]
        assert result["item"][0]["description"] == "Everything about your pets"
        assert len(result["item"][0]["item"]) == 3

    def test_collapse_merges_names_and_keeps_description(self) -> None:
        items = [
            {
                "name": "a",
                "item": [{"name": "b", "description": "inner", "item": [{"name": "r", "request": {}}]}],
            }
        ]
        assert collapse_single_child_folders(items) == [
            {"name": "a/b", "item": [{"name": "r", "request": {}}], "description": "inner"}
        ]


class TestRequests:
    def test_name_fallback_order(self, collection: dict[str, Any]) -> None:
        names = [i["name"] for i in _requests(collection["item"])]
        assert "List all pets" in names
        assert "showPetById" in names

    def test_name_from_url(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(request_name_source="URL"))
        names = {i["name"] for i in _requests(result["item"])}
        assert "{{baseUrl}}/pets/{petId}" in names

    def test_url_with_path_variable(self, collection: dict[str, Any]) -> None:
        url = _named(collection, "showPetById")["request"]["url"]
        assert url["raw"] == "{{baseUrl}}/pets/:petId"
        assert url["host"] == ["{{baseUrl}}"]
        assert url["path"] == ["pets", ":petId"]
        assert url["variable"] == [{"key": "petId", "value": "<long>", "description": "The pet id"}]

    def test_optional_query_is_disabled(self, collection: dict[str, Any]) -> None:
        url = _named(collection, "List all pets")["request"]["url"]
        assert url["query"] == [
            {"key": "limit", "value": "<integer>", "description": "Max items", "disabled": True}
        ]
        assert url["raw"] == "{{baseUrl}}/pets"

    def test_header_parameters_and_accept(self, collection: dict[str, Any]) -> None:
        headers = _named(collection, "List all pets")["request"]["header"]
        assert {"key": "Accept", "value": "application/json"} in headers
        assert {"key": "X-Request-ID", "value": "<uuid>"} in headers

    def test_json_body_from_schema(self, collection: dict[str, Any]) -> None:
        request = _named(collection, "Create a pet")["request"]
        assert request["body"]["mode"] == "raw"
        assert request["body"]["options"] == {"raw": {"language": "json"}}
        assert json.loads(request["body"]["raw"]) == {"name": "<string>", "tag": "<string>"}
        assert {"key": "Content-Type", "value": "application/json"} in request["header"]

    def test_json_body_from_declared_example(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(parameters_resolution="Example"))
        body = _named(result, "Create a pet")["request"]["body"]
        assert json.loads(body["raw"]) == {"name": "Rex", "tag": "dog"}

    def test_tab_indentation(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(indent_character="Tab"))
        body = _named(result, "Create a pet")["request"]["body"]
        assert body["raw"].startswith('{\n\t"name"')

    def test_bearer_auth(self, collection: dict[str, Any]) -> None:
        auth = _named(collection, "Create a pet")["request"]["auth"]
        assert auth["type"] == "bearer"
        assert auth["bearer"][0]["value"] == "{{bearerToken}}"

    def test_api_key_auth(self, collection: dict[str, Any]) -> None:
        auth = _named(collection, "showPetById")["request"]["auth"]
        assert auth["type"] == "apikey"
        assert {"key": "key", "value": "X-API-Key", "type": "string"} in auth["apikey"]
        assert {"key": "in", "value": "header", "type": "string"} in auth["apikey"]

    def test_auth_can_be_disabled(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(include_auth=False))
        assert all("auth" not in i["request"] for i in _requests(result["item"]))

    def test_deprecated_can_be_excluded(self, petstore_spec: ParsedSpec) -> None:
        result = build_collection(petstore_spec, ConverterOptions(include_deprecated=False))
        names = {i["name"] for i in _requests(result["item"])}
        assert "Delete a pet" not in names
        assert len(names) == 4


class TestResponses:
    def test_response_examples(self, collection: dict[str, Any]) -> None:
        responses = _named(collection, "List all pets")["response"]
        assert [(r["code"], r["status"]) for r in responses] == [
            (200, "OK"),
            (500, "Internal Server Error"),
        ]
        body = json.loads(responses[0]["body"])
        assert body[0]["status"] == "available"
        assert body[0]["owner"]["pets"] == [{}]
        assert responses[0]["originalRequest"]["method"] == "GET"
        assert responses[0]["_postman_previewlanguage"] == "json"

    def test_response_without_content(self, collection: dict[str, Any]) -> None:
        response = _named(collection, "Create a pet")["response"][0]
        assert response["code"] == 201
        assert response["name"] == "Created"
        assert response["body"] == ""
        assert response["header"] == []


class TestSwagger2Collection:
    @pytest.fixture
    def swagger2_collection(self, petstore_swagger2_raw: dict[str, Any]) -> dict[str, Any]:
        return build_collection(extract_spec(petstore_swagger2_raw, "2.0"), ConverterOptions())

    def test_base_url(self, swagger2_collection: dict[str, Any]) -> None:
        assert swagger2_collection["variable"][0]["value"] == "https://petstore.swagger.io/v2"

    def test_urlencoded_body(self, swagger2_collection: dict[str, Any]) -> None:
        body = _named(swagger2_collection, "Updates a pet in the store with form data")["request"]["body"]
        assert body["mode"] == "urlencoded"
        assert body["urlencoded"][0] == {"key": "name", "value": "<string>", "description": "Updated name"}

    def test_multipart_body_with_file(self, swagger2_collection: dict[str, Any]) -> None:
        body = _named(swagger2_collection, "uploads an image")["request"]["body"]
        assert body["mode"] == "formdata"
        assert body["formdata"][1] == {"key": "file", "type": "file", "src": []}

    def test_basic_and_oauth2_auth(self, swagger2_collection: dict[str, Any]) -> None:
        assert _named(swagger2_collection, "Find pet by ID")["request"]["auth"]["type"] == "basic"
        assert _named(swagger2_collection, "Add a new pet to the store")["request"]["auth"]["type"] == "oauth2"


class TestBaseUrl:
    def test_no_servers(self) -> None:
        spec = extract_spec({"openapi": "3.0.0", "info": {}, "paths": {}}, "3.0.0")
        assert base_url(spec) == "/"

    def test_relative_server(self) -> None:
        spec = extract_spec({"openapi": "3.0.0", "servers": [{"url": "/api/v3"}], "paths": {}}, "3.0.0")
        assert base_url(spec) == "/api/v3"


class TestEdgeValues:
    def test_path_segment_named_like_tree_internals(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {
                "/_items/list": {"get": {"summary": "List"}},
                "/requests/children": {"get": {"summary": "Nested"}},
            },
        }
        result = build_collection(extract_spec(raw, "3.0.0"), ConverterOptions(collapse_folders=False))
        assert [i["name"] for i in result["item"]] == ["_items", "requests"]
        assert result["item"][0]["item"][0]["name"] == "list"
        assert result["item"][1]["item"][0]["item"][0]["name"] == "Nested"

    def test_dates_are_serialized_as_iso_strings(self) -> None:
        raw = {
            "openapi": "3.0.0",
            "paths": {
                "/events": {
                    "post": {
                        "requestBody": {
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {
                                            "day": {"type": "string", "example": datetime.date(2020, 1, 1)},
                                            "at": {"type": "string", "enum": [datetime.datetime(2021, 2, 3, 4, 5)]},
                                        },
                                    }
                                }
                            }
                        },
                        "responses": {"200": {"description": "ok"}},
                    }
                }
            },
        }
        result = build_collection(
            extract_spec(raw, "3.0.0"), ConverterOptions(parameters_resolution="Example")
        )
        body = _requests(result["item"])[0]["request"]["body"]
        assert json.loads(body["raw"]) == {"day": "2020-01-01", "at": "2021-02-03T04:05:00"}
