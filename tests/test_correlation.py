"""Tests for correlation ID generation and injection."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from sqs_message_bus.correlation import UUID4Generator, inject_correlation_id


class FrozenRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: int
    correlation_id: str | None = None


class AliasedRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(alias="OrderId")
    cid: str | None = Field(default=None, alias="CorrelationId")


class NoCorrelation(BaseModel):
    order_id: int


class Capable:
    def __init__(self) -> None:
        self.seen: str | None = None

    def set_correlation_id(self, correlation_id: str) -> None:
        self.seen = correlation_id


@dataclass(frozen=True)
class FrozenData:
    CorrelationId: str = ""


def test_uuid4_generator_returns_unique_ids() -> None:
    gen = UUID4Generator()
    ids = {gen.next_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(ids)


def test_frozen_pydantic_model_is_copied() -> None:
    original = FrozenRequest(order_id=1, correlation_id="from-body")
    injected = inject_correlation_id(original, "from-attribute")
    assert injected.correlation_id == "from-attribute"
    assert injected.order_id == 1
    assert original.correlation_id == "from-body"


def test_pydantic_field_aliased_correlation_id() -> None:
    injected = inject_correlation_id(AliasedRequest(OrderId=1), "cid-1")
    assert injected.cid == "cid-1"


def test_model_without_field_is_untouched() -> None:
    request = NoCorrelation(order_id=1)
    assert inject_correlation_id(request, "cid") is request


def test_capability_method_is_called() -> None:
    request = Capable()
    assert inject_correlation_id(request, "cid-2") is request
    assert request.seen == "cid-2"


def test_dict_keys_are_overwritten_only_when_present() -> None:
    assert inject_correlation_id({"CorrelationId": "old"}, "new") == {
        "CorrelationId": "new"
    }
    assert inject_correlation_id({"a": 1}, "new") == {"a": 1}


def test_frozen_dataclass_attribute_is_set() -> None:
    injected = inject_correlation_id(FrozenData(CorrelationId="old"), "new")
    assert injected.CorrelationId == "new"


def test_scalars_are_returned_unchanged() -> None:
    assert inject_correlation_id("raw body", "cid") == "raw body"
    assert inject_correlation_id(5, "cid") == 5
