"""
Commerce Gateway Tests
======================

Purpose
-------
Exercises ShopifyGateway against an in-process httpx.MockTransport:
query parameters, headers, error statuses and the CPF/CNPJ scan.
"""

# -----------------------------------------------------------------------------
# Libraries
# -----------------------------------------------------------------------------

# Standard libraries
import asyncio

# Third-party libraries
import httpx
import pytest

# Local modules
from storefront_support.commerce_gateway import (
    CommerceGatewayError,
    ShopifyGateway,
    match_tax_id,
)


def make_gateway(handler, store_url="https://shop.example.com", token="tok"):
    return ShopifyGateway(store_url, token, "2024-10", transport=httpx.MockTransport(handler))


# ----------------------------
# Unit Test: Order Number
# ----------------------------
def test_find_by_order_number_builds_query(shipped_order):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"orders": [shipped_order]})

    gateway = make_gateway(handler)
    order = asyncio.run(gateway.find_by_order_number("#17545"))

    assert order["name"] == "#17545"
    request = seen[0]
    assert request.url.path == "/admin/api/2024-10/orders.json"
    assert request.url.params["name"] == "#17545"
    assert request.url.params["status"] == "any"
    assert request.url.params["limit"] == "1"
    assert request.headers["X-Shopify-Access-Token"] == "tok"


def test_find_by_order_number_not_found():
    gateway = make_gateway(lambda request: httpx.Response(200, json={"orders": []}))
    assert asyncio.run(gateway.find_by_order_number("17545")) is None


def test_error_status_raises():
    gateway = make_gateway(lambda request: httpx.Response(401, text="unauthorized"))
    with pytest.raises(CommerceGatewayError):
        asyncio.run(gateway.find_by_order_number("17545"))


def test_unconfigured_gateway_makes_no_calls():
    def handler(request):
        raise AssertionError("no request expected")

    gateway = make_gateway(handler, store_url="", token="")
    assert asyncio.run(gateway.find_by_email("maria@example.com")) == []
    assert asyncio.run(gateway.find_by_order_number("17545")) is None


# ----------------------------
# Unit Test: Email
# ----------------------------
def test_find_by_email_returns_list(shipped_order):
    def handler(request):
        assert request.url.params["email"] == "maria@example.com"
        assert request.url.params["limit"] == "5"
        return httpx.Response(200, json={"orders": [shipped_order, shipped_order]})

    gateway = make_gateway(handler)
    assert len(asyncio.run(gateway.find_by_email("maria@example.com"))) == 2


# ----------------------------
# Unit Test: Tax ID Scan
# ----------------------------
def test_find_by_tax_id_scans_recent_orders():
    orders = [
        {"name": "#1", "note": "nothing here"},
        {"name": "#2", "note_attributes": [{"name": "CPF", "value": "123.456.789-01"}]},
    ]

    def handler(request):
        assert request.url.params["order"] == "created_at desc"
        assert "created_at_min" in request.url.params
        return httpx.Response(200, json={"orders": orders})

    gateway = make_gateway(handler)
    assert asyncio.run(gateway.find_by_tax_id("12345678901"))["name"] == "#2"


def test_find_by_tax_id_scans_for_cnpj():
    orders = [
        {"name": "#1", "note_attributes": [{"name": "CPF", "value": "123.456.789-01"}]},
        {"name": "#2", "billing_address": {"company": "ACME LTDA 12.345.678/0001-90"}},
    ]
    gateway = make_gateway(lambda request: httpx.Response(200, json={"orders": orders}))

    order = asyncio.run(gateway.find_by_tax_id("12345678000190"))
    assert order["name"] == "#2"


def test_find_by_tax_id_rejects_wrong_length():
    def handler(request):
        raise AssertionError("no request expected")

    gateway = make_gateway(handler)
    assert asyncio.run(gateway.find_by_tax_id("12345")) is None


@pytest.mark.parametrize(
    "order, where",
    [
        ({"note_attributes": [{"name": "documento", "value": "12345678901"}]}, "note_attributes"),
        ({"tags": "vip, 123.456.789-01"}, "tags"),
        ({"billing_address": {"company": "CPF 123.456.789-01"}}, "address"),
        ({"note": "cpf: 123 456 789 01"}, "note"),
        ({"custom": {"doc": "12345678901"}}, "full scan"),
        ({"note": "other 98765432100"}, None),
    ],
)
def test_match_tax_id(order, where):
    assert match_tax_id(order, "12345678901") == where
