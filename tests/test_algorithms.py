import itertools

import pytest

from packopt.algorithms import (
    build_reachability_table,
    select_minimal_total,
    solve,
    validate_pack_sizes,
)
from packopt.errors import InvalidPackSizes, InvalidQuantity, Infeasible
from packopt.models import PackResult, ReachabilityTable

DEFAULT_SIZES = [250, 500, 1000, 2000, 5000]


def _brute_force(order_quantity, pack_sizes):
    """Smallest total >= order, then fewest packs for that total."""
    largest = max(pack_sizes)
    bound = order_quantity + largest
    best = None
    ranges = [range(bound // size + 1) for size in pack_sizes]
    for counts in itertools.product(*ranges):
        total = sum(c * s for c, s in zip(counts, pack_sizes))
        if total < order_quantity or total > bound:
            continue
        key = (total, sum(counts))
        if best is None or key < best:
            best = key
    return best


@pytest.mark.parametrize(
    "quantity, total_items, total_packs, packs",
    [
        (1, 250, 1, [(250, 1)]),
        (250, 250, 1, [(250, 1)]),
        (251, 500, 1, [(500, 1)]),
        (501, 750, 2, [(500, 1), (250, 1)]),
        (12001, 12250, 4, [(5000, 2), (2000, 1), (250, 1)]),
    ],
)
def test_reference_orders(quantity, total_items, total_packs, packs):
    result = solve(quantity, DEFAULT_SIZES)

    assert result.order_quantity == quantity
    assert result.total_items == total_items
    assert result.total_packs == total_packs
    assert [(p.pack_size, p.quantity) for p in result.packs] == packs
    assert result.waste == total_items - quantity


def test_to_dict_matches_wire_shape():
    result = solve(501, DEFAULT_SIZES)

    assert result.to_dict() == {
        "orderQuantity": 501,
        "totalItems": 750,
        "totalPacks": 2,
        "packs": [{"packSize": 500, "quantity": 1}, {"packSize": 250, "quantity": 1}],
        "waste": 249,
    }


@pytest.mark.parametrize(
    "pack_sizes",
    [
        [3, 5],
        [4, 7, 9],
        [6, 10, 15],
        [23, 31, 53],
        [2, 3, 7, 11],
    ],
)
def test_matches_brute_force(pack_sizes):
    for quantity in range(1, 40):
        result = solve(quantity, pack_sizes)
        expected_total, expected_packs = _brute_force(quantity, pack_sizes)

        assert result.total_items == expected_total
        assert result.total_packs == expected_packs
        assert result.total_items >= quantity
        assert sum(p.pack_size * p.quantity for p in result.packs) == result.total_items
        assert result.total_packs == sum(p.quantity for p in result.packs)
        assert result.waste == result.total_items - quantity


def test_packs_sorted_descending_without_empty_entries():
    result = solve(59, [2, 3, 7, 11])

    sizes = [p.pack_size for p in result.packs]
    assert sizes == sorted(sizes, reverse=True)
    assert len(set(sizes)) == len(sizes)
    assert all(p.quantity > 0 for p in result.packs)


def test_exact_multiple_has_no_waste():
    result = solve(3000, DEFAULT_SIZES)

    assert result.total_items == 3000
    assert result.waste == 0
    assert result.packs == [PackResult(2000, 1), PackResult(1000, 1)]


def test_single_pack_size_rounds_up():
    result = solve(1001, [100])

    assert result.total_items == 1100
    assert result.total_packs == 11
    assert result.packs == [PackResult(100, 11)]


def test_tie_on_pack_count_prefers_larger_packs():
    # 12 = 6 + 6 = 10 + 2, both two packs
    result = solve(12, [2, 6, 10])

    assert result.total_packs == 2
    assert result.packs == [PackResult(10, 1), PackResult(2, 1)]


def test_result_does_not_depend_on_catalog_order():
    forward = solve(12001, [250, 500, 1000, 2000, 5000])
    backward = solve(12001, [5000, 2000, 1000, 500, 250])
    shuffled = solve(12001, (1000, 250, 5000, 500, 2000))

    assert forward.to_dict() == backward.to_dict() == shuffled.to_dict()


def test_caller_catalog_is_not_mutated():
    sizes = [250, 5000, 500, 2000, 1000]
    snapshot = list(sizes)

    solve(12001, sizes)

    assert sizes == snapshot


def test_accepts_sets_and_generators():
    assert solve(501, {250, 500}).total_items == 750
    assert solve(501, (s for s in [250, 500])).total_items == 750


@pytest.mark.parametrize("quantity", [0, -1, -100])
def test_non_positive_quantity_is_rejected(quantity):
    with pytest.raises(InvalidQuantity):
        solve(quantity, DEFAULT_SIZES)


@pytest.mark.parametrize("quantity", [1.5, "10", None, True])
def test_non_integer_quantity_is_rejected(quantity):
    with pytest.raises(InvalidQuantity):
        solve(quantity, DEFAULT_SIZES)


@pytest.mark.parametrize(
    "pack_sizes",
    [
        [],
        None,
        [0, 250],
        [-250, 500],
        [250, 250, 500],
        [250, 2.5],
        [250, "500"],
        [True],
    ],
)
def test_invalid_pack_sizes_are_rejected(pack_sizes):
    with pytest.raises(InvalidPackSizes):
        solve(100, pack_sizes)


def test_quantity_is_checked_before_pack_sizes():
    with pytest.raises(InvalidQuantity):
        solve(0, [])


def test_validate_pack_sizes_returns_sorted_copy():
    assert validate_pack_sizes([500, 250, 1000]) == (1000, 500, 250)


def test_reachability_table_invariants():
    table = build_reachability_table(20, (7, 3))

    assert table[0].min_packs == 0
    assert table[0].predecessor is None
    for total in range(1, len(table)):
        entry = table[total]
        if entry.min_packs is None:
            continue
        assert entry.predecessor + entry.pack_used == total
        assert entry.min_packs == table[entry.predecessor].min_packs + 1

    # 1, 2, 4, 5, 8, 11 are not sums of 3s and 7s
    for total in (1, 2, 4, 5, 8, 11):
        assert not table.is_reachable(total)
    assert table[14].min_packs == 2
    assert table[20].min_packs == 4


def test_select_minimal_total_raises_when_nothing_reachable():
    table = ReachabilityTable(9)

    with pytest.raises(Infeasible):
        select_minimal_total(table, 5)


def test_validate_pack_sizes_enforces_max_size():
    assert validate_pack_sizes([100, 50], max_size=100) == (100, 50)
    with pytest.raises(InvalidPackSizes, match="must not exceed 100"):
        validate_pack_sizes([101, 50], max_size=100)


def test_pack_results_are_hashable():
    assert len({PackResult(250, 1), PackResult(250, 1), PackResult(500, 1)}) == 2
