from __future__ import annotations

import pytest

from core.catalog import MAX_BUTTONS, build_catalog
from core.menu import DEFAULT_MENU, default_catalog
from core.models import Presentation
from core.router import ReplyRouter


def _minimal(entries: list[dict]) -> dict:
    return {"default": {"body": "hi"}, "entries": entries}


def test_default_menu_is_closed() -> None:
    catalog = default_catalog()
    assert catalog.dangling_references() == []


def test_every_option_routes_to_a_defined_entry() -> None:
    catalog = default_catalog()
    router = ReplyRouter(catalog)
    for entry in catalog.entries():
        for option_id in entry.option_ids():
            assert router.route(option_id).matched, option_id


def test_interactive_entries_have_options() -> None:
    for entry in default_catalog().entries():
        if entry.presentation is Presentation.PLAIN:
            assert entry.options == ()
        else:
            assert entry.options
        if entry.presentation is Presentation.BUTTONS:
            assert len(entry.options) <= MAX_BUTTONS


def test_dangling_reference_is_reported() -> None:
    catalog = build_catalog(
        _minimal(
            [
                {
                    "triggers": ["start"],
                    "presentation": "buttons",
                    "body": "pick",
                    "options": [{"id": "missing", "label": "Missing"}],
                }
            ]
        )
    )
    assert catalog.dangling_references() == [("start", "missing")]


def test_entries_collapse_aliases() -> None:
    catalog = default_catalog()
    distinct = catalog.entries()
    assert len(distinct) == len({id(entry) for entry in distinct})
    assert catalog.default is distinct[-1]
    assert len(catalog) == len(catalog.keys())


def test_triggers_are_trimmed_and_case_sensitive() -> None:
    catalog = build_catalog(_minimal([{"triggers": [" Menu "], "body": "menu"}]))
    assert "Menu" in catalog
    assert "menu" not in catalog


def test_build_rejects_missing_default() -> None:
    with pytest.raises(ValueError, match="default"):
        build_catalog({"entries": []})


def test_build_rejects_duplicate_trigger() -> None:
    with pytest.raises(ValueError, match="Duplicate trigger"):
        build_catalog(_minimal([{"triggers": ["a"], "body": "one"}, {"triggers": ["a"], "body": "two"}]))


def test_build_rejects_too_many_buttons() -> None:
    options = [{"id": f"o{i}", "label": f"O{i}"} for i in range(MAX_BUTTONS + 1)]
    with pytest.raises(ValueError, match="at most"):
        build_catalog(_minimal([{"triggers": ["a"], "presentation": "buttons", "body": "b", "options": options}]))


def test_build_rejects_interactive_entry_without_options() -> None:
    with pytest.raises(ValueError, match="at least one option"):
        build_catalog(_minimal([{"triggers": ["a"], "presentation": "list", "body": "b"}]))


def test_build_rejects_unknown_presentation() -> None:
    with pytest.raises(ValueError, match="Unsupported presentation"):
        build_catalog(_minimal([{"triggers": ["a"], "presentation": "carousel", "body": "b"}]))


def test_build_rejects_options_on_plain_entry() -> None:
    with pytest.raises(ValueError, match="Plain entries"):
        build_catalog(_minimal([{"triggers": ["a"], "body": "b", "options": [{"id": "x", "label": "X"}]}]))


def test_list_rows_keep_descriptions() -> None:
    catalog = build_catalog(DEFAULT_MENU)
    prices = catalog.lookup("prices")
    assert prices is not None
    assert prices.options[0].description == "50/month - basic bot"
    assert prices.section_title == "Available plans"
