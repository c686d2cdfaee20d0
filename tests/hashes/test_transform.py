from __future__ import annotations

import logging

import pytest

from mapstep.errors import ContainerTypeError
from mapstep.hashes.ordered_hash import OrderedHash
from mapstep.hashes.transform import NO_CHANGE
from mapstep.protocol import Break, Enumerator


def test_merge_resolves_collisions_against_running_copy(sample_hash: OrderedHash[str, int]) -> None:
    merged = sample_hash.merge(
        {"bat": 3, "bar": 4},
        {"bam": 5, "bat": 6},
        resolver=lambda key, old, new: old + new,
    )

    assert merged == {"foo": 0, "bar": 5, "baz": 2, "bat": 9, "bam": 5}
    assert list(merged) == ["foo", "bar", "baz", "bat", "bam"]


def test_merge_without_resolver_lets_later_arguments_win() -> None:
    merged = OrderedHash({"a": 1}).merge({"a": 2})

    assert merged == {"a": 2}
    assert OrderedHash({"a": 1}).merge({"a": 2}, {"a": 3, "b": 4}) == {"a": 3, "b": 4}


def test_merge_only_resolves_keys_already_present(sample_hash: OrderedHash[str, int]) -> None:
    calls: list[tuple[str, int, int]] = []

    def resolve(key: str, old: int, new: int) -> int:
        calls.append((key, old, new))
        return new

    sample_hash.merge({"bar": 10, "new": 7}, resolver=resolve)

    assert calls == [("bar", 1, 10)]


def test_merge_leaves_receiver_and_arguments_untouched(sample_hash: OrderedHash[str, int]) -> None:
    other = OrderedHash({"bar": 4})
    plain = {"baz": 5}

    merged = sample_hash.merge(other, plain)

    assert merged is not sample_hash
    assert isinstance(merged, OrderedHash)
    assert sample_hash.to_dict() == {"foo": 0, "bar": 1, "baz": 2}
    assert other.to_dict() == {"bar": 4}
    assert plain == {"baz": 5}


def test_merge_without_arguments_returns_independent_copy(sample_hash: OrderedHash[str, int]) -> None:
    merged = sample_hash.merge()
    merged["foo"] = 99

    assert sample_hash["foo"] == 0


def test_merge_names_offending_argument(sample_hash: OrderedHash[str, int]) -> None:
    calls: list[str] = []

    with pytest.raises(ContainerTypeError, match=r"argument 2 .*\(list given\)") as excinfo:
        sample_hash.merge(
            {"foo": 1},
            [("bar", 2)],
            resolver=lambda key, old, new: calls.append(key),
        )

    assert isinstance(excinfo.value, TypeError)
    assert excinfo.value.position == 2
    assert calls == []


def test_merge_logs_summary(
    sample_hash: OrderedHash[str, int], caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.DEBUG, logger="mapstep.hashes.transform")

    sample_hash.merge({"bar": 1}, {"bat": 2}, resolver=lambda key, old, new: new)

    record = next(r for r in caplog.records if r.getMessage() == "merged containers")
    assert record.data == {"sources": 2, "resolved_collisions": 1, "result_size": 4}


def test_delete_returns_value_or_fallback() -> None:
    container = OrderedHash({"a": 1})

    assert container.delete("b") is None
    assert container.delete("b", lambda key: f"missing {key}") == "missing b"
    assert container.delete("a", lambda key: "unused") == 1
    assert container.to_dict() == {}


def test_delete_fallback_can_break_out() -> None:
    container = OrderedHash({"a": 1})

    def give_up(key: str) -> int:
        raise Break(-1)

    assert container.delete("b", give_up) == -1
    assert container.to_dict() == {"a": 1}


def test_transforms_on_empty_container_perform_zero_iterations() -> None:
    empty: OrderedHash[str, int] = OrderedHash()
    calls: list[str] = []

    def predicate(key: str, value: int) -> bool:
        calls.append(key)
        return True

    assert empty.select(predicate) == {}
    assert empty.reject(predicate) == {}
    assert empty.select_(predicate) is NO_CHANGE
    assert empty.reject_(predicate) is NO_CHANGE
    assert empty.merge({}) == {}
    assert empty.merge({}, resolver=lambda key, old, new: calls.append(key)) == {}
    assert calls == []


def test_select_and_reject_build_new_containers(sample_hash: OrderedHash[str, int]) -> None:
    selected = sample_hash.select(lambda key, value: value > 0)
    rejected = sample_hash.reject(lambda key, value: value > 0)

    assert selected == {"bar": 1, "baz": 2}
    assert rejected == {"foo": 0}
    assert selected is not sample_hash
    assert sample_hash.size() == 3


def test_select_is_a_fixed_point(sample_hash: OrderedHash[str, int]) -> None:
    def odd(key: str, value: int) -> bool:
        return value % 2 == 1

    once = sample_hash.select(odd)

    assert once.select(odd) == once


def test_select_uses_snapshot_values(sample_hash: OrderedHash[str, int]) -> None:
    def bump(key: str, value: int) -> bool:
        sample_hash["baz"] = 100
        return True

    selected = sample_hash.select(bump)

    assert selected == {"foo": 0, "bar": 1, "baz": 2}
    assert sample_hash["baz"] == 100


def test_reject_in_place_returns_receiver_when_changed() -> None:
    container = OrderedHash({"a": 1, "b": 2})

    result = container.reject_(lambda key, value: value > 1)

    assert result is container
    assert container.to_dict() == {"a": 1}


def test_in_place_filters_return_no_change_sentinel() -> None:
    container = OrderedHash({"a": 1, "b": 2})

    assert container.reject_(lambda key, value: False) is NO_CHANGE
    assert container.select_(lambda key, value: True) is NO_CHANGE
    assert NO_CHANGE is not None
    assert not NO_CHANGE
    assert container.to_dict() == {"a": 1, "b": 2}


def test_select_in_place_keeps_matching_entries(sample_hash: OrderedHash[str, int]) -> None:
    result = sample_hash.select_(lambda key, value: key.startswith("b"))

    assert result is sample_hash
    assert list(sample_hash) == ["bar", "baz"]


def test_in_place_filter_deletes_only_after_the_walk(sample_hash: OrderedHash[str, int]) -> None:
    sizes: list[int] = []

    def drop_everything(key: str, value: int) -> bool:
        sizes.append(sample_hash.size())
        return True

    sample_hash.reject_(drop_everything)

    assert sizes == [3, 3, 3]
    assert sample_hash.size() == 0


def test_keep_if_and_delete_if_always_return_receiver() -> None:
    container = OrderedHash({"a": 1, "b": 2})

    assert container.keep_if(lambda key, value: True) is container
    assert container.delete_if(lambda key, value: value == 2) is container
    assert container.to_dict() == {"a": 1}


def test_filters_return_enumerators_without_callback(sample_hash: OrderedHash[str, int]) -> None:
    for method in ("select", "reject", "select_", "reject_", "keep_if", "delete_if"):
        enum = getattr(sample_hash, method)()
        assert isinstance(enum, Enumerator)
        assert enum.method == method
        assert list(enum) == [("foo", 0), ("bar", 1), ("baz", 2)]


def test_filter_enumerator_each_applies_operation(sample_hash: OrderedHash[str, int]) -> None:
    selected = sample_hash.select().each(lambda key, value: value >= 1)
    changed = sample_hash.reject_().each(lambda key, value: key == "foo")

    assert selected == {"bar": 1, "baz": 2}
    assert changed is sample_hash
    assert sample_hash.to_dict() == {"bar": 1, "baz": 2}


def test_break_inside_in_place_filter_skips_deletion(sample_hash: OrderedHash[str, int]) -> None:
    def stop(key: str, value: int) -> bool:
        if key == "bar":
            raise Break("stopped")
        return True

    assert sample_hash.reject_(stop) == "stopped"
    assert sample_hash.size() == 3
