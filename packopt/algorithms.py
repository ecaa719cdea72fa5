# packopt/algorithms.py

import logging
from collections import Counter
from packopt.errors import InvalidQuantity, InvalidPackSizes, Infeasible
from packopt.models import ReachabilityTable, PackResult, PackingResult

logger = logging.getLogger(__name__)


def is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_quantity(order_quantity) -> int:
    if not is_integer(order_quantity):
        raise InvalidQuantity(f"Order quantity must be an integer, got {order_quantity!r}")
    if order_quantity <= 0:
        raise InvalidQuantity("Order quantity must be positive")
    return order_quantity


def validate_pack_sizes(pack_sizes, max_size: int | None = None) -> tuple:
    """
    Checks a pack-size catalog and returns a private copy sorted largest first.
    The caller's collection is only read, never reordered.
    max_size, when given, bounds every size so the search ceiling stays bounded.
    """
    if pack_sizes is None:
        raise InvalidPackSizes("At least one pack size is required")

    sizes = list(pack_sizes)
    if not sizes:
        raise InvalidPackSizes("At least one pack size is required")

    for size in sizes:
        if not is_integer(size) or size <= 0:
            raise InvalidPackSizes("All pack sizes must be positive integers")
        if max_size is not None and size > max_size:
            raise InvalidPackSizes(f"Pack sizes must not exceed {max_size}")

    if len(set(sizes)) != len(sizes):
        raise InvalidPackSizes("All pack sizes must be unique")

    return tuple(sorted(sizes, reverse=True))


def build_reachability_table(ceiling: int, pack_sizes: tuple) -> ReachabilityTable:
    """
    Phase 1: Dynamic programming over every sum from 0 to the ceiling.
    Records the fewest packs that reach each sum exactly.

    pack_sizes must be sorted largest first. Updates only happen on a strict
    improvement, so when two combinations tie on pack count the one found
    first, i.e. the one using larger packs, is kept.
    """
    table = ReachabilityTable(ceiling)

    for total in range(ceiling + 1):
        if not table.is_reachable(total):
            continue
        for pack_size in pack_sizes:
            # Pruning: anything past the ceiling is never selected
            if total + pack_size <= ceiling:
                table.relax(total, pack_size)

    return table


def select_minimal_total(table: ReachabilityTable, order_quantity: int) -> int:
    """
    Phase 2: The smallest reachable sum that covers the order.
    """
    for total in range(order_quantity, table.ceiling + 1):
        if table.is_reachable(total):
            return total

    raise Infeasible(
        f"No combination of packs reaches between {order_quantity} and {table.ceiling} items"
    )


def backtrace_packs(table: ReachabilityTable, total: int) -> Counter:
    """
    Phase 3: Follows predecessor links back to 0, counting packs per size.
    """
    counts = Counter()
    current = total
    while current > 0:
        entry = table[current]
        counts[entry.pack_used] += 1
        current = entry.predecessor
    return counts


def solve(order_quantity: int, pack_sizes) -> PackingResult:
    """
    Finds the packs to ship for an order:
      1. at least order_quantity items,
      2. as little waste as possible,
      3. then as few packs as possible, preferring larger packs on a tie.

    Raises InvalidQuantity, InvalidPackSizes or Infeasible.
    """
    order_quantity = validate_quantity(order_quantity)
    sizes = validate_pack_sizes(pack_sizes)

    # Shipping only the largest pack lands below order_quantity + largest,
    # so the optimum always lies inside this ceiling.
    ceiling = order_quantity + sizes[0]

    table = build_reachability_table(ceiling, sizes)
    best_total = select_minimal_total(table, order_quantity)
    counts = backtrace_packs(table, best_total)

    packs = [PackResult(size, counts[size]) for size in sizes if counts[size] > 0]
    result = PackingResult(order_quantity, best_total, packs)

    logger.debug("Solved order %d over %s with ceiling %d: %r",
                 order_quantity, sizes, ceiling, result)
    return result
