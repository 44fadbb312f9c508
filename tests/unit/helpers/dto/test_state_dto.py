"""Unit tests for statekeeper.helpers.dto.state_dto.

Tests cover:
- Severity weights and usability of AppState
- combine() ordering rules
- Name parsing for AppState and HaState
- Facet protocol detection
"""

from __future__ import annotations

import itertools

import pytest

from statekeeper.helpers.dto.state_dto import (
    AnnotatedAppStateFacet,
    AppState,
    AppStateFacet,
    FacetSnapshot,
    HaState,
)


class TestAppStateScale:
    """Tests for AppState weights and usability."""

    @pytest.mark.unit
    def test_weights_are_strictly_ordered(self) -> None:
        """READY < WARNING < INITIALIZING < FAULTY."""
        assert AppState.READY.weight == 1
        assert AppState.WARNING.weight == 2
        assert AppState.INITIALIZING.weight == 3
        assert AppState.FAULTY.weight == 4

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("state", "usable"),
        [
            (AppState.READY, True),
            (AppState.WARNING, True),
            (AppState.INITIALIZING, False),
            (AppState.FAULTY, False),
        ],
    )
    def test_usable_flag(self, state: AppState, usable: bool) -> None:
        assert state.usable is usable

    @pytest.mark.unit
    def test_str_is_bare_name(self) -> None:
        """Status reports rely on str() giving the plain name."""
        assert str(AppState.WARNING) == "WARNING"
        assert f"{AppState.FAULTY}" == "FAULTY"


class TestAppStateCombine:
    """Tests for AppState.combine()."""

    @pytest.mark.unit
    def test_combine_never_lowers_weight(self) -> None:
        for a, b in itertools.product(AppState, repeat=2):
            combined = a.combine(b)
            assert combined.weight >= max(a.weight, b.weight)
            assert combined in (a, b)

    @pytest.mark.unit
    def test_combine_is_idempotent(self) -> None:
        for state in AppState:
            assert state.combine(state) is state

    @pytest.mark.unit
    def test_ready_is_neutral(self) -> None:
        for state in AppState:
            assert AppState.READY.combine(state) is state
            assert state.combine(AppState.READY) is state

    @pytest.mark.unit
    def test_faulty_is_absorbing(self) -> None:
        for state in AppState:
            assert AppState.FAULTY.combine(state) is AppState.FAULTY
            assert state.combine(AppState.FAULTY) is AppState.FAULTY

    @pytest.mark.unit
    def test_combine_is_commutative(self) -> None:
        for a, b in itertools.product(AppState, repeat=2):
            assert a.combine(b) is b.combine(a)

    @pytest.mark.unit
    def test_combine_with_none_keeps_self(self) -> None:
        assert AppState.WARNING.combine(None) is AppState.WARNING

    @pytest.mark.unit
    def test_initializing_outweighs_warning(self) -> None:
        assert AppState.WARNING.combine(AppState.INITIALIZING) is AppState.INITIALIZING


class TestParsing:
    """Tests for name parsing."""

    @pytest.mark.unit
    def test_app_state_parse_known_names(self) -> None:
        for state in AppState:
            assert AppState.parse(state.name) is state

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "ready", "FOO", " READY"])
    def test_app_state_parse_rejects_unknown(self, name: str) -> None:
        """Parsing is exact; callers trim before parsing."""
        with pytest.raises(ValueError):
            AppState.parse(name)

    @pytest.mark.unit
    def test_ha_state_parse(self) -> None:
        assert HaState.parse("MASTER") is HaState.MASTER
        assert HaState.parse("BACKUP") is HaState.BACKUP
        assert HaState.parse("FAULT") is HaState.FAULT

    @pytest.mark.unit
    def test_ha_state_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            HaState.parse("SLAVE")

    @pytest.mark.unit
    def test_ha_state_values_and_health(self) -> None:
        assert [s.value for s in HaState] == [1, 2, 3]
        assert HaState.MASTER.healthy
        assert HaState.BACKUP.healthy
        assert not HaState.FAULT.healthy


class TestFacetProtocols:
    """Tests for runtime facet protocol checks."""

    @pytest.mark.unit
    def test_plain_facet_is_not_annotated(self) -> None:
        class Plain:
            def get_app_state(self) -> AppState:
                return AppState.READY

        assert isinstance(Plain(), AppStateFacet)
        assert not isinstance(Plain(), AnnotatedAppStateFacet)

    @pytest.mark.unit
    def test_annotated_facet_detected(self) -> None:
        class Annotated:
            def get_app_state(self) -> AppState:
                return AppState.READY

            def get_app_state_annotation(self) -> str | None:
                return "fine"

        assert isinstance(Annotated(), AnnotatedAppStateFacet)

    @pytest.mark.unit
    def test_facet_snapshot_defaults_to_empty_annotation(self) -> None:
        snapshot = FacetSnapshot(name="main", state=AppState.READY)
        assert snapshot.annotation == ""
