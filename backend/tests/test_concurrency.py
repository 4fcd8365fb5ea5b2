"""Concurrency gate and natural-key uniqueness."""
from dataclasses import dataclass
from typing import Optional

from craftify.domain.common.concurrency import GateOutcome, authorize, etag_for, record_etag
from craftify.domain.common.records import next_version
from craftify.domain.common.uniqueness import check_available, fold_key, keys_equal


@dataclass(frozen=True)
class Rec:
    id: str
    key: Optional[str]
    version: int = 0

    @property
    def identity(self):
        return self.id

    @property
    def natural_key(self):
        return self.key


# ------------------------------------------------------------------
# Gate
# ------------------------------------------------------------------
def test_etag_is_weak_validator_of_version():
    assert etag_for(0) == 'W/"0"'
    assert record_etag(Rec("a", "x", version=12)) == 'W/"12"'


def test_authorize_outcomes():
    rec = Rec("a", "x", version=3)
    assert authorize(rec, None) is GateOutcome.MISSING
    assert authorize(rec, "   ") is GateOutcome.MISSING
    assert authorize(rec, 'W/"2"') is GateOutcome.STALE
    assert authorize(rec, '"3"') is GateOutcome.STALE
    assert authorize(rec, 'W/"3"') is GateOutcome.OK
    assert authorize(rec, ' W/"3" ') is GateOutcome.OK


def test_next_version_bumps_by_one_and_leaves_original_untouched():
    rec = Rec("a", "x", version=4)
    bumped = next_version(rec, key="y")
    assert bumped.version == 5
    assert bumped.key == "y"
    assert rec.version == 4 and rec.key == "x"


# ------------------------------------------------------------------
# Uniqueness
# ------------------------------------------------------------------
def test_fold_key():
    assert fold_key("  Widgets ") == "widgets"
    assert fold_key("   ") is None
    assert fold_key(None) is None


def test_keys_equal_never_matches_missing_keys():
    assert keys_equal("ABC", "abc")
    assert not keys_equal(None, None)
    assert not keys_equal("", "")


def test_check_available_is_case_insensitive():
    records = [Rec("1", "Widgets"), Rec("2", "Gadgets")]
    assert not check_available(records, "widgets")
    assert not check_available(records, " GADGETS ")
    assert check_available(records, "Sprockets")


def test_check_available_can_exclude_own_identity():
    records = [Rec("1", "Widgets"), Rec("2", "Gadgets")]
    assert check_available(records, "WIDGETS", exclude_identity="1")
    assert not check_available(records, "gadgets", exclude_identity="1")
