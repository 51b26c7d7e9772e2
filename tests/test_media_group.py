"""Tests for MediaGroupAggregator

Album photos arrive as separate events; the first one starts a one-shot timer and
the group is saved as a single post when the timer fires with more than one photo.
"""

import asyncio

import pytest

from errors import StoreError
from utils.media_group import MediaGroupAggregator

DELAY = 0.05


class FakeStore:
    def __init__(self):
        self.posts = []

    async def commit(self, photo_paths, caption):
        self.posts.append((list(photo_paths), caption))
        return len(self.posts)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def aggregator(store):
    return MediaGroupAggregator(commit=store.commit, delay=DELAY)


class TestStandalonePhoto:
    async def test_commits_immediately(self, aggregator, store):
        post_id = await aggregator.observe_photo(None, "p1.jpg", "solo")

        assert post_id == 1
        assert store.posts == [(["p1.jpg"], "solo")]
        assert aggregator.pending_count == 0

    async def test_missing_caption_becomes_empty(self, aggregator, store):
        await aggregator.observe_photo(None, "p1.jpg", None)

        assert store.posts == [(["p1.jpg"], "")]

    async def test_on_committed_receives_post_id(self, aggregator):
        seen = []

        async def on_committed(post_id):
            seen.append(post_id)

        await aggregator.observe_photo(None, "p1.jpg", "", on_committed=on_committed)

        assert seen == [1]

    async def test_store_error_reaches_caller(self):
        async def failing_commit(photo_paths, caption):
            raise StoreError("disk full")

        aggregator = MediaGroupAggregator(commit=failing_commit, delay=DELAY)

        with pytest.raises(StoreError):
            await aggregator.observe_photo(None, "p1.jpg", "")


class TestMediaGroup:
    async def test_group_committed_once_in_arrival_order(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", "cap")
        await asyncio.sleep(DELAY / 5)
        await aggregator.observe_photo("G1", "p2.jpg", None)
        await aggregator.observe_photo("G1", "p3.jpg", None)

        assert store.posts == []
        await aggregator.drain()

        assert store.posts == [(["p1.jpg", "p2.jpg", "p3.jpg"], "cap")]
        assert aggregator.pending("G1") is None

    async def test_first_caption_wins(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", "first")
        await aggregator.observe_photo("G1", "p2.jpg", "second")
        await aggregator.drain()

        assert store.posts == [(["p1.jpg", "p2.jpg"], "first")]

    async def test_caption_from_later_photo_when_first_has_none(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", None)
        await aggregator.observe_photo("G1", "p2.jpg", "late")
        await aggregator.observe_photo("G1", "p3.jpg", "later")
        await aggregator.drain()

        assert store.posts == [(["p1.jpg", "p2.jpg", "p3.jpg"], "late")]

    async def test_single_photo_group_is_not_committed(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", "cap")
        await aggregator.drain()

        assert store.posts == []
        # Left in memory uncommitted
        assert aggregator.pending("G1").photo_paths == ["p1.jpg"]

    async def test_single_photo_group_committed_with_flush_single(self, store):
        aggregator = MediaGroupAggregator(commit=store.commit, delay=DELAY, flush_single=True)

        await aggregator.observe_photo("G1", "p1.jpg", "cap")
        await aggregator.drain()

        assert store.posts == [(["p1.jpg"], "cap")]
        assert aggregator.pending("G1") is None

    async def test_only_first_event_schedules_check(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", "cap")
        await aggregator.observe_photo("G1", "p2.jpg", None)

        assert len(aggregator._tasks) == 1
        await aggregator.drain()
        assert len(store.posts) == 1

    async def test_photo_after_deadline_starts_fresh_group(self, aggregator, store):
        await aggregator.observe_photo("G1", "p1.jpg", "one")
        await aggregator.observe_photo("G1", "p2.jpg", None)
        await aggregator.drain()

        await aggregator.observe_photo("G1", "p3.jpg", "two")
        await aggregator.observe_photo("G1", "p4.jpg", None)
        await aggregator.drain()

        assert store.posts == [
            (["p1.jpg", "p2.jpg"], "one"),
            (["p3.jpg", "p4.jpg"], "two"),
        ]

    async def test_groups_are_independent(self, aggregator, store):
        await aggregator.observe_photo("G1", "a1.jpg", "a")
        await aggregator.observe_photo("G2", "b1.jpg", "b")
        await aggregator.observe_photo("G1", "a2.jpg", None)
        await aggregator.observe_photo("G2", "b2.jpg", None)
        await aggregator.drain()

        assert sorted(store.posts) == [
            (["a1.jpg", "a2.jpg"], "a"),
            (["b1.jpg", "b2.jpg"], "b"),
        ]

    async def test_completion_check_for_removed_group_is_noop(self, aggregator, store):
        await aggregator._complete("missing")

        assert store.posts == []

    async def test_on_committed_from_first_event(self, aggregator):
        seen = []

        async def first(post_id):
            seen.append(("first", post_id))

        async def second(post_id):
            seen.append(("second", post_id))

        await aggregator.observe_photo("G1", "p1.jpg", "cap", on_committed=first)
        await aggregator.observe_photo("G1", "p2.jpg", None, on_committed=second)
        await aggregator.drain()

        assert seen == [("first", 1)]


class TestFailures:
    async def test_commit_failure_is_logged_and_group_dropped(self):
        async def failing_commit(photo_paths, caption):
            raise StoreError("locked")

        aggregator = MediaGroupAggregator(commit=failing_commit, delay=DELAY)
        await aggregator.observe_photo("G1", "p1.jpg", "cap")
        await aggregator.observe_photo("G1", "p2.jpg", None)

        await aggregator.drain()

        assert aggregator.pending("G1") is None

    async def test_callback_failure_does_not_undo_commit(self, aggregator, store):
        async def broken(post_id):
            raise RuntimeError("telegram down")

        await aggregator.observe_photo("G1", "p1.jpg", "cap", on_committed=broken)
        await aggregator.observe_photo("G1", "p2.jpg", None)
        await aggregator.drain()

        assert store.posts == [(["p1.jpg", "p2.jpg"], "cap")]

    async def test_standalone_callback_failure_does_not_undo_commit(self, aggregator, store):
        async def broken(post_id):
            raise RuntimeError("telegram down")

        post_id = await aggregator.observe_photo(None, "p1.jpg", "solo", on_committed=broken)

        assert post_id == 1
        assert store.posts == [(["p1.jpg"], "solo")]
