"""Tests for StoreState and LinkRecord"""

import pytest

from keyclaim.keyclaim_error import KeyclaimError, StateConflictError
from keyclaim.link_record import LinkRecord
from keyclaim.store_state import StoreState


class TestStoreState:

    def test_add_link_updates_both_maps(self):
        state = StoreState()

        record = state.add_link("promo1", "AB12CD34", {"coins": 100})

        assert state.links == {"promo1": record}
        assert state.keys == {"AB12CD34": "promo1"}
        assert record.claimed is False
        assert state.find_inconsistencies() == []

    def test_add_link_rejects_duplicates(self):
        state = StoreState()
        state.add_link("promo1", "AB12CD34", {"coins": 100})

        with pytest.raises(StateConflictError):
            state.add_link("promo1", "ZZ99YY88", {"coins": 100})
        with pytest.raises(StateConflictError):
            state.add_link("promo2", "AB12CD34", {"coins": 100})

        assert state.keys == {"AB12CD34": "promo1"}

    def test_missing_index_entry_is_reported(self):
        state = StoreState(links={"promo1": LinkRecord(key="AB12CD34", reward={})})

        assert state.find_inconsistencies() == [
            "link promo1 has key AB12CD34 indexed to None"
        ]

    def test_missing_record_is_reported(self):
        state = StoreState(keys={"AB12CD34": "promo1"})

        assert state.find_inconsistencies() == [
            "key AB12CD34 points at missing link promo1"
        ]

    def test_mismatched_key_is_reported(self):
        state = StoreState(
            links={"promo1": LinkRecord(key="AB12CD34", reward={})},
            keys={"AB12CD34": "promo1", "ZZ99YY88": "promo1"},
        )

        assert state.find_inconsistencies() == [
            "key ZZ99YY88 points at link promo1 which has key AB12CD34"
        ]


class TestLinkRecord:

    def test_mark_claimed_sets_claim_fields(self):
        record = LinkRecord(key="AB12CD34", reward={"coins": 100})

        record.mark_claimed("U1")

        assert record.claimed is True
        assert record.claimed_by == "U1"
        assert record.claimed_at is not None
        assert record.claimed_at >= record.created_at

    def test_mark_claimed_twice_is_refused(self):
        record = LinkRecord(key="AB12CD34", reward={"coins": 100})
        record.mark_claimed("U1")
        claimed_at = record.claimed_at

        with pytest.raises(StateConflictError):
            record.mark_claimed("U2")

        assert record.claimed_by == "U1"
        assert record.claimed_at == claimed_at

    def test_conflicts_are_keyclaim_errors(self):
        state = StoreState()
        state.add_link("promo1", "AB12CD34", {"coins": 100})

        with pytest.raises(KeyclaimError, match="promo1 already has a key"):
            state.add_link("promo1", "ZZ99YY88", {"coins": 100})
