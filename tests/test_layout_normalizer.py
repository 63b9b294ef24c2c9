import json
from copy import deepcopy

import pytest

from storefront_layout.layout.aliases import EMPTY_ALIAS_TABLE
from storefront_layout.layout.normalizer import (
    RUNTIME_ROOT_PROPS,
    DropReasonEnum,
    DroppedBlock,
    FallbackReasonEnum,
    ResolvedBlock,
    decode_layout,
    inspect_layout,
    is_renderable,
    normalize_layout,
    resolve_block,
)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "not json",
        "{\"content\": [",
        b"\xff\xfe",
        42,
        3.5,
        True,
        [],
        "[]",
        "\"a string\"",
        {},
        {"content": "nope"},
        {"content": []},
        {"content": [], "zones": {}, "root": {"props": {}}},
        {"content": [None, 3, "x", {"props": {}}, {"type": ""}, {"type": 7}]},
        {"content": [{"type": "NotACatalogBlock", "props": {}}]},
        {"zones": "nope"},
        {"zones": {"main": "nope"}},
    ],
)
def test_unusable_input_falls_back_to_family_default(catalog_family, raw):
    document = catalog_family.normalize(raw)

    assert document == catalog_family.default_document
    assert is_renderable(document)


def test_empty_json_document_returns_default(catalog_family):
    raw = '{"content":[],"zones":{},"root":{"props":{}}}'

    report = catalog_family.inspect(raw)

    assert report.used_default
    assert report.fallback == FallbackReasonEnum.not_renderable
    assert report.document == catalog_family.default_document


def test_fallback_reasons(catalog_family):
    assert catalog_family.inspect("{oops").fallback == FallbackReasonEnum.undecodable
    assert catalog_family.inspect(b"\xff").fallback == FallbackReasonEnum.undecodable
    assert catalog_family.inspect("[1, 2]").fallback == FallbackReasonEnum.not_an_object
    assert catalog_family.inspect(None).fallback == FallbackReasonEnum.not_an_object
    assert catalog_family.inspect({"content": []}).fallback == FallbackReasonEnum.not_renderable


def test_fallback_returns_independent_copies(catalog_family):
    first = catalog_family.normalize(None)
    first["content"][0]["props"]["showLogo"] = False
    first["content"].clear()

    second = catalog_family.normalize(None)

    assert second == catalog_family.default_document
    assert second["content"]


def test_legacy_sticky_navbar_is_renamed_and_migrated(catalog_family):
    raw = json.dumps({"content": [{"type": "StickyNavbar", "props": {"sticky": False}}], "root": {"props": {}}})

    document = catalog_family.normalize(raw)

    assert document["content"] == [
        {
            "type": "StoreNavbar",
            "props": {"fixed": False, "reserveSpace": True, "id": "puck-storenavbar-1"},
        }
    ]
    assert document["zones"] == {}
    assert document["root"] == {"props": {}}


def test_legacy_product_grid_becomes_product_catalog(catalog_family):
    document = catalog_family.normalize({"content": [{"type": "ProductGrid", "props": {"id": "grid"}}]})

    assert document["content"] == [{"type": "ProductCatalog", "props": {"id": "grid"}}]


def test_disallowed_and_malformed_blocks_are_dropped_individually(catalog_family):
    raw = {
        "content": [
            {"type": "StoreHeader", "props": {"id": "header"}},
            "garbage",
            {"props": {"id": "no-type"}},
            {"type": "Spacer", "props": {"id": "spacer"}},
            {"type": "StoreFooter", "props": {"id": "footer"}},
        ],
    }

    report = catalog_family.inspect(raw)

    assert not report.used_default
    assert [block["props"]["id"] for block in report.document["content"]] == ["header", "footer"]
    assert [(record.index, record.reason) for record in report.dropped] == [
        (1, DropReasonEnum.not_an_object),
        (2, DropReasonEnum.missing_type),
        (3, DropReasonEnum.disallowed_type),
    ]
    assert report.dropped[2].block_type == "Spacer"


def test_non_object_props_become_empty_props_with_id(catalog_family):
    document = catalog_family.normalize({"content": [{"type": "StoreHeader", "props": ["a"]}]})

    assert document["content"] == [{"type": "StoreHeader", "props": {"id": "puck-storeheader-1"}}]


def test_zones_are_normalized_like_content(catalog_family):
    raw = {
        "content": [],
        "zones": {
            "header-zone": [{"type": "HeaderStore", "props": {"id": "h"}}, {"type": "Bogus"}],
            "broken-zone": {"not": "a list"},
        },
    }

    report = catalog_family.inspect(raw)

    assert not report.used_default
    assert report.document["content"] == []
    assert report.document["zones"] == {
        "header-zone": [{"type": "StoreHeader", "props": {"id": "h"}}],
        "broken-zone": [],
    }
    assert report.dropped[0].zone == "header-zone"


def test_non_object_zones_become_empty(catalog_family):
    document = catalog_family.normalize({"content": [{"type": "StoreFooter", "props": {"id": "f"}}], "zones": []})

    assert document["zones"] == {}


def test_runtime_root_props_are_stripped(catalog_family):
    raw = {
        "content": [{"type": "StoreFooter", "props": {"id": "f"}}],
        "root": {
            "title": "Home",
            "props": {
                "themePrimary": "#000000",
                "store": {"id": "s"},
                "products": [{"id": "p"}],
                "isPreview": True,
                "isEditor": True,
                "previewOffset": 64,
            },
        },
    }

    document = catalog_family.normalize(raw)

    assert document["root"] == {"title": "Home", "props": {"themePrimary": "#000000"}}
    assert not set(RUNTIME_ROOT_PROPS) & set(document["root"]["props"])


def test_unknown_document_and_block_keys_are_preserved(catalog_family):
    raw = {
        "content": [{"type": "StoreFooter", "props": {"id": "f"}, "readOnly": {"title": True}}],
        "version": 3,
    }

    document = catalog_family.normalize(raw)

    assert document["version"] == 3
    assert document["content"][0]["readOnly"] == {"title": True}


def test_text_and_bytes_inputs_match_object_input(catalog_family):
    raw = {"content": [{"type": "StoreHeader", "props": {"id": "h", "variant": "banner"}}]}
    text = json.dumps(raw)

    assert catalog_family.normalize(text) == catalog_family.normalize(raw)
    assert catalog_family.normalize(text.encode("utf-8")) == catalog_family.normalize(raw)


def test_input_is_not_mutated(catalog_family):
    raw = {
        "content": [{"type": "StickyNavbar", "props": {"sticky": True}}, {"type": "ProductList"}],
        "root": {"props": {"isEditor": True}},
    }
    snapshot = deepcopy(raw)

    catalog_family.normalize(raw)

    assert raw == snapshot


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "garbage",
        {"content": [{"type": "StickyNavbar", "props": {"sticky": False}}, {"type": "ProductGrid"}]},
        {
            "content": [
                {"type": "StoreHeader", "props": {"id": "x"}},
                {"type": "StoreFooter", "props": {"id": "x"}},
            ],
            "zones": {"side": [{"type": "StoreFeatures", "props": {"id": 12}}, {"type": "Nope"}]},
            "root": {"props": {"store": {}, "themeFont": "inter"}},
        },
        {"content": [{"type": "StoreHeader", "props": {"id": "puck-storeheader-1"}}, {"type": "StoreHeader"}]},
    ],
)
def test_normalization_is_idempotent(catalog_family, raw):
    once = catalog_family.normalize(raw)

    assert catalog_family.normalize(once) == once
    assert catalog_family.normalize(json.dumps(once)) == once


def test_resolve_block_tagged_outcomes():
    assert resolve_block("x") == DroppedBlock(reason=DropReasonEnum.not_an_object)
    assert resolve_block({"type": None}) == DroppedBlock(reason=DropReasonEnum.missing_type)
    assert resolve_block({"type": "Spacer"}, {"StoreHeader"}) == DroppedBlock(
        reason=DropReasonEnum.disallowed_type, block_type="Spacer"
    )

    resolved = resolve_block({"type": "CatalogGrid", "props": {"columns": 3}}, {"ProductCatalog"})

    assert resolved == ResolvedBlock(block_type="ProductCatalog", props={"columns": 3}, extra={})


def test_missing_or_empty_allowed_set_means_no_restriction():
    assert isinstance(resolve_block({"type": "Anything"}, None), ResolvedBlock)
    assert isinstance(resolve_block({"type": "Anything"}, set()), ResolvedBlock)


def test_alias_table_is_scoped_per_call():
    resolved = resolve_block({"type": "StickyNavbar", "props": {"sticky": True}}, alias_table=EMPTY_ALIAS_TABLE)

    assert resolved == ResolvedBlock(block_type="StickyNavbar", props={"sticky": True}, extra={})


def test_default_document_must_be_an_object():
    with pytest.raises(ValueError):
        normalize_layout({"content": []}, None)


def test_unrestricted_normalization_with_plain_default():
    default = {"content": [{"type": "Heading", "props": {"id": "d"}}], "zones": {}, "root": {"props": {}}}

    document = normalize_layout({"content": [{"type": "Custom"}]}, default, alias_table=EMPTY_ALIAS_TABLE)

    assert document["content"] == [{"type": "Custom", "props": {"id": "puck-custom-1"}}]


def test_decode_layout():
    assert decode_layout('{"a": 1}') == ({"a": 1}, True)
    assert decode_layout(b'{"a": 1}') == ({"a": 1}, True)
    assert decode_layout({"a": 1}) == ({"a": 1}, True)
    assert decode_layout("{") == (None, False)
    assert decode_layout(b"\xff") == (None, False)


def test_inspect_reports_reassigned_ids(catalog_family):
    report = inspect_layout(
        {"content": [{"type": "StoreHeader", "props": {"id": " "}}]},
        catalog_family.default_document,
        catalog_family.allowed_types,
        alias_table=catalog_family.alias_table,
    )

    assert len(report.reassigned_ids) == 1
    assert report.reassigned_ids[0].previous == ""
    assert report.reassigned_ids[0].assigned == "puck-storeheader-1"


def test_oversized_integer_id_does_not_break_normalization(catalog_family):
    raw = {"content": [{"type": "StoreHeader", "props": {"id": 10**5000}}]}

    assert catalog_family.normalize(raw)["content"] == [{"type": "StoreHeader", "props": {"id": "puck-storeheader-1"}}]
    assert catalog_family.sanitize_for_storage(raw)["content"][0]["props"]["id"] == "puck-storeheader-1"
    injected = catalog_family.inject_context(raw, {"isEditor": True})
    assert injected["content"][0]["props"]["id"] == "puck-storeheader-1"


def test_non_integral_and_boolean_ids_are_preserved(catalog_family):
    raw = {
        "content": [
            {"type": "StoreHeader", "props": {"id": 1.5}},
            {"type": "StoreFooter", "props": {"id": True}},
        ]
    }

    document = catalog_family.normalize(raw)

    assert [block["props"]["id"] for block in document["content"]] == ["1.5", "true"]
    assert catalog_family.normalize(document) == document
