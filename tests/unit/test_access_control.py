"""
Unit tests for owner-only operations.

Tests cover:
1. Owner assignment
2. Allow-list management
3. Auction timing
4. Rejected calls leave state untouched
"""

import threading

import pytest

from gavel.core.clock import AuctionWindow, ChainClock
from gavel.core.errors import AuctionError, Forbidden
from gavel.core.ledger import AuctionLedger, AuctionPhase
from gavel.crypto import generate_keypair, to_checksum_address


OWNER = "0x" + "a1" * 20
UNAUTHORIZED = "0x" + "b2" * 20
BIDDER1 = "0x" + "c3" * 20
BIDDER2 = "0x" + "d4" * 20

T0 = 1_700_000_000
DAY = 60 * 60 * 24


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return ChainClock(T0)


@pytest.fixture
def ledger(clock):
    return AuctionLedger(OWNER, clock=clock)


# =============================================================================
# Owner Tests
# =============================================================================


class TestOwner:
    """Tests for owner assignment."""

    def test_owner_is_set(self, ledger):
        """Owner should be the construction argument, checksummed."""
        assert ledger.owner == to_checksum_address(OWNER)
        assert ledger.owner.lower() == OWNER

    def test_owner_is_normalized(self, clock):
        """Owner given in mixed case is matched case-insensitively."""
        ledger = AuctionLedger("0x" + "A1" * 20, clock=clock)
        assert ledger.owner == to_checksum_address(OWNER)
        ledger.authorize("0x" + "a1" * 20, BIDDER1)
        assert ledger.allowed_buyers(BIDDER1)

    def test_checksummed_owner_round_trips(self, clock):
        """A checksummed owner comes back exactly as given."""
        owner = generate_keypair().checksum_address
        ledger = AuctionLedger(owner, clock=clock)
        assert ledger.owner == owner
        assert ledger.stats()["owner"] == owner
        ledger.authorize(owner.lower(), BIDDER1)
        assert ledger.allowed_buyers(BIDDER1)

    def test_owner_is_read_only(self, ledger):
        """Owner cannot be reassigned."""
        with pytest.raises(AttributeError):
            ledger.owner = BIDDER1

    def test_invalid_owner_rejected(self):
        """Malformed owner address is a programming error."""
        with pytest.raises(ValueError):
            AuctionLedger("not-an-address")


# =============================================================================
# Allow-list Tests
# =============================================================================


class TestAuthorize:
    """Tests for authorize()."""

    def test_non_owner_forbidden(self, ledger):
        """Authorizing from a non-owner address fails with FORBIDDEN."""
        with pytest.raises(Forbidden) as exc:
            ledger.authorize(BIDDER1, BIDDER1)
        assert "FORBIDDEN" in str(exc.value)
        assert not ledger.allowed_buyers(BIDDER1)

    def test_owner_can_authorize(self, ledger):
        """Owner adds a buyer to the allow-list."""
        ledger.authorize(OWNER, BIDDER1)
        assert ledger.allowed_buyers(BIDDER1) is True
        assert ledger.allowed_buyers(BIDDER2) is False

    def test_authorize_is_idempotent(self, ledger):
        """Re-authorizing succeeds and changes nothing."""
        ledger.authorize(OWNER, BIDDER1)
        ledger.authorize(OWNER, BIDDER1)
        assert ledger.allowed_buyers(BIDDER1)
        assert ledger.stats()["allowed_buyers"] == 1

    def test_forbidden_is_auction_error(self, ledger):
        """All rejections share the AuctionError base."""
        with pytest.raises(AuctionError):
            ledger.authorize(UNAUTHORIZED, BIDDER1)


# =============================================================================
# Timing Tests
# =============================================================================


class TestAuctionTiming:
    """Tests for set_auction_timing()."""

    def test_non_owner_forbidden(self, ledger):
        """Setting timing from a non-owner address fails with FORBIDDEN."""
        with pytest.raises(Forbidden, match="FORBIDDEN"):
            ledger.set_auction_timing(BIDDER1, T0 + DAY, T0 + 2 * DAY)
        assert ledger.window is None

    def test_owner_sets_window(self, ledger):
        """Owner sets the window."""
        ledger.set_auction_timing(OWNER, T0 + DAY, T0 + 2 * DAY)
        assert ledger.window == AuctionWindow(T0 + DAY, T0 + 2 * DAY)

    def test_window_can_be_replaced(self, ledger):
        """A later call overwrites the window."""
        ledger.set_auction_timing(OWNER, T0 + DAY, T0 + 2 * DAY)
        ledger.set_auction_timing(OWNER, T0, T0 + 10)
        assert ledger.window == AuctionWindow(T0, T0 + 10)

    def test_negative_timestamp_rejected(self, ledger):
        """Timestamps must be unsigned."""
        with pytest.raises(ValueError):
            ledger.set_auction_timing(OWNER, -1, T0)
        assert ledger.window is None


# =============================================================================
# Phase Tests
# =============================================================================


class TestPhase:
    """Tests for the derived auction phase."""

    def test_unconfigured(self, ledger):
        assert ledger.phase() == AuctionPhase.UNCONFIGURED

    def test_phase_follows_clock(self, ledger, clock):
        """Phase moves TIMING_SET -> OPEN -> CLOSED as time passes."""
        ledger.set_auction_timing(OWNER, T0 + DAY, T0 + 2 * DAY)
        assert ledger.phase() == AuctionPhase.TIMING_SET

        clock.increase_to(T0 + DAY)
        assert ledger.phase() == AuctionPhase.OPEN

        clock.increase_to(T0 + 2 * DAY - 1)
        assert ledger.phase() == AuctionPhase.OPEN

        clock.increase_to(T0 + 2 * DAY)
        assert ledger.phase() == AuctionPhase.CLOSED

    def test_explicit_timestamp(self, ledger):
        ledger.set_auction_timing(OWNER, T0 + DAY, T0 + 2 * DAY)
        assert ledger.phase(now=T0 + DAY + 5) == AuctionPhase.OPEN


# =============================================================================
# Locking Tests
# =============================================================================


def _read_while_locked(ledger, read):
    """Run `read` in a thread while the ledger lock is held; return its result."""
    results = []
    worker = threading.Thread(target=lambda: results.append(read()))

    with ledger._lock:
        worker.start()
        worker.join(timeout=0.2)
        blocked = worker.is_alive()

    worker.join(timeout=5)
    return blocked, results


class TestReadLocking:
    """Getters wait for in-flight calls instead of reading mid-update."""

    def test_allowed_buyers_waits_for_lock(self, ledger):
        ledger.authorize(OWNER, BIDDER1)
        blocked, results = _read_while_locked(ledger, lambda: ledger.allowed_buyers(BIDDER1))
        assert blocked
        assert results == [True]

    def test_phase_waits_for_lock(self, ledger):
        ledger.set_auction_timing(OWNER, T0, T0 + DAY)
        blocked, results = _read_while_locked(ledger, ledger.phase)
        assert blocked
        assert results == [AuctionPhase.OPEN]
