import pytest

from entity_normalizer.errors import ConflictingEntityError, UnknownMergeStrategyError
from entity_normalizer.normalizers import (
    FirstWriteWins,
    LastWriteWins,
    StrictMerge,
    get_merge_strategy,
    normalize,
)

# the same author seen twice with a stale and a fresh nickname
STALE_THEN_FRESH = [
    {"id": 1, "author": {"id": 7, "nick": "old", "bio": "hi"}},
    {"id": 2, "author": {"id": 7, "nick": "new", "avatar": "a.png"}},
]


def test_default_is_last_write_wins(blog_registry):
    out = normalize(STALE_THEN_FRESH, ["posts"], registry=blog_registry)
    assert out.entities["authors"]["7"] == {"id": 7, "nick": "new", "bio": "hi", "avatar": "a.png"}


def test_first_write_wins(blog_registry):
    out = normalize(STALE_THEN_FRESH, ["posts"], registry=blog_registry, merge_strategy="first_write_wins")
    assert out.entities["authors"]["7"] == {"id": 7, "nick": "old", "bio": "hi", "avatar": "a.png"}


def test_strict_raises_on_conflict(blog_registry):
    with pytest.raises(ConflictingEntityError) as e:
        normalize(STALE_THEN_FRESH, ["posts"], registry=blog_registry, merge_strategy="strict")
    assert e.value.schema_name == "authors"
    assert e.value.entity_id == 7
    assert e.value.field == "nick"


def test_strict_accepts_agreeing_duplicates(blog_registry, posts, normalized_posts):
    out = normalize(posts, ["posts"], registry=blog_registry, merge_strategy=StrictMerge())
    assert out.entities == normalized_posts["entities"]


def test_custom_strategy_object(blog_registry):
    class KeepLongestNick:
        def merge(self, schema_name, entity_id, existing, incoming):
            merged = {**existing, **incoming}
            merged["nick"] = max(existing.get("nick", ""), incoming.get("nick", ""), key=len)
            return merged

    data = [
        {"id": 1, "author": {"id": 7, "nick": "longer"}},
        {"id": 2, "author": {"id": 7, "nick": "short"}},
    ]
    out = normalize(data, ["posts"], registry=blog_registry, merge_strategy=KeepLongestNick())
    assert out.entities["authors"]["7"]["nick"] == "longer"


def test_merge_does_not_mutate_inputs():
    existing = {"id": 1, "a": 1}
    incoming = {"id": 1, "a": 2}
    for strategy in (LastWriteWins(), FirstWriteWins()):
        strategy.merge("x", 1, existing, incoming)
    assert existing == {"id": 1, "a": 1}
    assert incoming == {"id": 1, "a": 2}


def test_lookup_by_name():
    assert isinstance(get_merge_strategy("last_write_wins"), LastWriteWins)
    assert isinstance(get_merge_strategy(" Strict "), StrictMerge)
    assert isinstance(get_merge_strategy(None), LastWriteWins)


def test_unknown_names_rejected():
    with pytest.raises(UnknownMergeStrategyError):
        get_merge_strategy("newest")
    with pytest.raises(UnknownMergeStrategyError):
        get_merge_strategy(object())


def test_int_and_str_ids_share_a_row(blog_registry):
    data = [{"id": 1, "body": "int"}, {"id": "1", "body": "str"}]
    out = normalize(data, ["posts"], registry=blog_registry)
    assert out.entities["posts"] == {"1": {"id": "1", "body": "str"}}


def test_strict_flags_int_and_str_ids(blog_registry):
    data = [{"id": 1, "body": "int"}, {"id": "1", "body": "str"}]
    with pytest.raises(ConflictingEntityError) as e:
        normalize(data, ["posts"], registry=blog_registry, merge_strategy="strict")
    assert e.value.field == "id"
