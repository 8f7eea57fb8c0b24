import logging
import re

import pytest

from gatewayforge.domain.models import EndpointDescriptor
from gatewayforge.errors import GenerationError, IdentifierCollisionError, ValidationError
from gatewayforge.intake.loader import EXAMPLE_ENDPOINTS, parse_endpoint_rows
from gatewayforge.orchestrator.pipeline import (
    SECTION_HEADER,
    generate_single,
    generate_terraform,
    run_generate,
)

_BLOCK = re.compile(r'^resource "(aws_api_gateway_\w+)" "(\w+)" \{$', re.MULTILINE)


def ep(path, method="GET", target="https://api.example.com/x"):
    return EndpointDescriptor(path=path, method=method, backend_target=target)


def blocks(text):
    return _BLOCK.findall(text)


def names(text, kind):
    return [n for k, n in blocks(text) if k == kind]


def test_single_deep_path_emits_one_resource_per_prefix():
    text = generate_terraform([ep("/a/b/c")])

    assert names(text, "aws_api_gateway_resource") == ["a", "a_b", "a_b_c"]
    assert "parent_id   = aws_api_gateway_resource.a.id" in text
    assert "parent_id   = aws_api_gateway_resource.a_b.id" in text


def test_shared_prefix_emitted_once():
    result = run_generate([ep("/a/b"), ep("/a/c")])

    assert names(result.text, "aws_api_gateway_resource") == ["a", "a_b", "a_c"]
    assert result.resource_count == 3
    assert result.method_count == 2
    assert result.integration_count == 2


def test_same_path_two_verbs():
    text = generate_terraform([ep("/x", "GET"), ep("/x", "POST")])

    assert names(text, "aws_api_gateway_resource") == ["x"]
    assert names(text, "aws_api_gateway_method") == ["x_get", "x_post"]
    assert names(text, "aws_api_gateway_integration") == [
        "x_get_integration",
        "x_post_integration",
    ]


def test_output_starts_with_header_and_orders_phases():
    text = generate_terraform(parse_endpoint_rows(EXAMPLE_ENDPOINTS))
    kinds = [k for k, _ in blocks(text)]

    assert text.startswith(SECTION_HEADER)
    assert text.endswith("}\n\n")
    assert kinds == sorted(
        kinds,
        key=["aws_api_gateway_resource", "aws_api_gateway_method", "aws_api_gateway_integration"].index,
    )
    assert names(text, "aws_api_gateway_resource") == [
        "orders",
        "person",
        "orders_api",
        "person_users",
        "orders_api_create",
        "orders_api_status",
        "person_users_api",
        "person_users_api_auth",
        "person_users_api_profile",
    ]
    assert names(text, "aws_api_gateway_method") == [
        "person_users_api_auth_post",
        "person_users_api_profile_get",
        "person_users_api_profile_put",
        "orders_api_create_post",
        "orders_api_status_get",
    ]


def test_repeated_generation_is_byte_identical():
    endpoints = [ep("/a/b"), ep("/a/c", "DELETE"), ep("/z")]

    first = generate_terraform(endpoints)
    second = generate_terraform(endpoints)

    assert first == second
    assert len(names(second, "aws_api_gateway_resource")) == 4


def test_empty_path_fails_with_validation_cause():
    for bad in ["", "///"]:
        with pytest.raises(GenerationError) as info:
            generate_terraform([ep("/ok"), ep(bad)])

        assert isinstance(info.value.__cause__, ValidationError)
        assert info.value.original_message == "Endpoint must contain at least one path segment"
        assert str(info.value) == (
            "Failed to generate Terraform configuration: "
            "Endpoint must contain at least one path segment"
        )


def test_known_collision_emits_single_resource_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="gatewayforge.orchestrator.pipeline"):
        result = run_generate([ep("/a/b"), ep("/a_b", "POST")])

    # /a_b sits at depth 1 and claims the name; /a/b's resource is skipped
    assert names(result.text, "aws_api_gateway_resource") == ["a", "a_b"]
    assert 'path_part   = "a_b"' in result.text
    assert names(result.text, "aws_api_gateway_method") == ["a_b_get", "a_b_post"]
    assert result.collisions == {"a_b": ["/a_b", "/a/b"]}
    assert "share resource name 'a_b'" in caplog.text


def test_strict_mode_rejects_collisions():
    with pytest.raises(GenerationError) as info:
        generate_terraform([ep("/a/b"), ep("/a_b", "POST")], strict=True)

    assert isinstance(info.value.__cause__, IdentifierCollisionError)
    assert info.value.__cause__.collisions == {"a_b": ["/a_b", "/a/b"]}


def test_custom_rest_api_name():
    text = generate_terraform([ep("/a")], rest_api_name="orders_gw")

    assert "aws_api_gateway_rest_api.this" not in text
    assert "parent_id   = aws_api_gateway_rest_api.orders_gw.root_resource_id" in text


def test_generate_single():
    text = generate_single("/health", "get", "https://svc.example.com/health")

    assert names(text, "aws_api_gateway_resource") == ["health"]
    assert names(text, "aws_api_gateway_method") == ["health_get"]
    assert 'uri                     = "https://svc.example.com/health"' in text


def test_generate_single_bad_method_is_wrapped():
    with pytest.raises(GenerationError):
        generate_single("/health", "FETCH", "https://svc.example.com/health")


def test_duplicate_endpoint_keeps_one_block_each_by_default():
    result = run_generate([ep("/x"), ep("/x")])

    assert names(result.text, "aws_api_gateway_resource") == ["x"]
    assert names(result.text, "aws_api_gateway_method") == ["x_get", "x_get"]
    assert result.collisions == {}


def test_strict_mode_rejects_duplicate_method_names():
    with pytest.raises(GenerationError) as info:
        run_generate([ep("/x"), ep("/x/", "get")], strict=True)

    assert isinstance(info.value.__cause__, IdentifierCollisionError)
    assert info.value.__cause__.collisions == {"x_get": ["GET /x", "GET /x/"]}
    assert "x_get <- GET /x, GET /x/" in str(info.value)


def test_non_iterable_input_is_wrapped():
    with pytest.raises(GenerationError) as info:
        run_generate(None)  # type: ignore[arg-type]

    assert isinstance(info.value.__cause__, TypeError)
