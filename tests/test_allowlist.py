from __future__ import annotations

import itertools

import pytest

from fleetpanel.allowlist import AllowList, AllowListEditor, AllowListParams
from fleetpanel.core.exceptions import EditorClosedError

pytestmark = [pytest.mark.unit]

UNIVERSE = ("n1", "n2", "e2")
SUBSETS = [
    frozenset(combo)
    for size in range(len(UNIVERSE) + 1)
    for combo in itertools.combinations(UNIVERSE, size)
]


def _editor(catalog=("n1", "n2", "e2"), allowed=("n1",), provider="gcp") -> AllowListEditor:
    return AllowListEditor(AllowListParams(catalog=tuple(catalog), allowed=frozenset(allowed), provider_name=provider))


class TestAllowListValue:
    def test_edits_return_new_values(self):
        original = AllowList.of(UNIVERSE, ["n1"])
        added = original.add("n2")
        assert original.allowed == {"n1"}
        assert added.allowed == {"n1", "n2"}
        assert added.options == original.options

    def test_remove_absent_is_noop(self):
        value = AllowList.of(UNIVERSE, ["n1"])
        assert value.remove("e2") == value

    def test_toggle(self):
        value = AllowList.of(UNIVERSE, [])
        assert value.toggle("n2", True).allowed == {"n2"}
        assert value.toggle("n2", True).toggle("n2", False) == value

    @pytest.mark.parametrize(("options", "allowed"), list(itertools.product(SUBSETS, repeat=2)))
    def test_all_selected_iff_set_equal(self, options: frozenset[str], allowed: frozenset[str]):
        assert AllowList(options=options, allowed=allowed).all_selected is (options == allowed)

    @pytest.mark.parametrize(("options", "allowed"), list(itertools.product(SUBSETS, repeat=2)))
    def test_toggle_all(self, options: frozenset[str], allowed: frozenset[str]):
        value = AllowList(options=options, allowed=allowed)
        assert value.toggle_all(False).allowed == frozenset()
        assert value.toggle_all(True).allowed == options
        assert value.toggle_all(True).all_selected


class TestEditor:
    def test_opened_state(self):
        editor = _editor()
        assert editor.provider_name == "gcp"
        assert editor.catalog == ("n1", "n2", "e2")
        assert editor.options == {"n1", "n2", "e2"}
        assert editor.allowed == {"n1"}
        assert not editor.is_all_selected()

    def test_toggle_then_confirm(self):
        editor = _editor()
        editor.toggle("n2", True)
        editor.toggle("n1", False)
        assert editor.confirm() == {"n2"}
        assert editor.closed

    def test_select_all_and_clear(self):
        editor = _editor()
        editor.toggle_select_all(True)
        assert editor.is_all_selected()
        editor.toggle_select_all(False)
        assert editor.allowed == frozenset()
        assert not editor.is_all_selected()

    def test_empty_catalog_and_allowed_is_all_selected(self):
        assert _editor(catalog=(), allowed=()).is_all_selected()

    def test_allowed_outside_catalog_is_kept(self):
        editor = _editor(allowed=("n1", "legacy"))
        editor.toggle_select_all(True)
        assert editor.allowed == {"n1", "n2", "e2"}

        editor = _editor(allowed=("n1", "n2", "e2", "legacy"))
        assert not editor.is_all_selected()
        assert "legacy" in editor.confirm()

    def test_cancel_returns_nothing(self):
        editor = _editor()
        editor.toggle("n2", True)
        assert editor.cancel() is None
        assert editor.closed

    @pytest.mark.parametrize("close", ["confirm", "cancel"])
    def test_closed_editor_rejects_edits(self, close: str):
        editor = _editor()
        getattr(editor, close)()
        with pytest.raises(EditorClosedError):
            editor.toggle("n2", True)
        with pytest.raises(EditorClosedError):
            editor.toggle_select_all(True)
        with pytest.raises(EditorClosedError):
            editor.confirm()

    def test_snapshot_is_not_shared(self):
        allowed = frozenset({"n1"})
        params = AllowListParams(catalog=("n1", "n2"), allowed=allowed, provider_name="gcp")
        editor = AllowListEditor(params)
        editor.toggle("n2", True)
        assert params.allowed == {"n1"}
