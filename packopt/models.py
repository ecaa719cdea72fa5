from typing import NamedTuple, Optional


# --- ReachabilityEntry: one row of the DP table ---
class ReachabilityEntry(NamedTuple):
    """
    Best known way to reach a given sum exactly.
    min_packs is None while the sum is unreachable.
    """
    min_packs: Optional[int]
    predecessor: Optional[int]
    pack_used: Optional[int]


# --- ReachabilityTable: the DP table for sums 0..ceiling ---
class ReachabilityTable:
    """
    Minimum pack counts for every integer sum from 0 up to the search ceiling,
    with the predecessor links needed to rebuild the combination.

    Stored as three parallel lists rather than one object per sum, so large
    ceilings stay affordable.
    """
    def __init__(self, ceiling: int):
        self.ceiling = ceiling
        self.min_packs = [None] * (ceiling + 1)
        self.predecessor = [None] * (ceiling + 1)
        self.pack_used = [None] * (ceiling + 1)
        self.min_packs[0] = 0

    def is_reachable(self, total: int) -> bool:
        return self.min_packs[total] is not None

    def relax(self, total: int, pack_size: int) -> bool:
        """
        Offers the path total -> total + pack_size. The target is only updated
        when the new pack count is strictly lower than the recorded one.
        """
        target = total + pack_size
        candidate = self.min_packs[total] + 1
        current = self.min_packs[target]
        if current is None or candidate < current:
            self.min_packs[target] = candidate
            self.predecessor[target] = total
            self.pack_used[target] = pack_size
            return True
        return False

    def __getitem__(self, total: int) -> ReachabilityEntry:
        return ReachabilityEntry(
            self.min_packs[total], self.predecessor[total], self.pack_used[total]
        )

    def __len__(self):
        return self.ceiling + 1

    def __repr__(self):
        reachable = sum(1 for packs in self.min_packs if packs is not None)
        return f"ReachabilityTable(Ceiling={self.ceiling}, Reachable={reachable})"


# --- Class: PackResult ---
class PackResult:
    """
    How many packs of one size are shipped.
    """
    def __init__(self, pack_size: int, quantity: int):
        self.pack_size = pack_size
        self.quantity = quantity

    @property
    def items(self) -> int:
        return self.pack_size * self.quantity

    def to_dict(self) -> dict:
        return {"packSize": self.pack_size, "quantity": self.quantity}

    # Larger packs sort first in a PackingResult, so ordering is by size
    def __lt__(self, other):
        return self.pack_size < other.pack_size

    def __eq__(self, other):
        if not isinstance(other, PackResult):
            return NotImplemented
        return (self.pack_size, self.quantity) == (other.pack_size, other.quantity)

    def __hash__(self):
        return hash((self.pack_size, self.quantity))

    def __repr__(self):
        return f"{self.quantity}x{self.pack_size}"


# --- Class: PackingResult ---
class PackingResult:
    """
    The chosen shipment for an order: which packs, how many items in total,
    and how much is shipped beyond what was asked for.
    """
    def __init__(self, order_quantity: int, total_items: int, packs: list[PackResult]):
        self.order_quantity = order_quantity
        self.total_items = total_items
        self.packs = sorted(packs, reverse=True)

    @property
    def total_packs(self) -> int:
        return sum(p.quantity for p in self.packs)

    @property
    def waste(self) -> int:
        return self.total_items - self.order_quantity

    def to_dict(self) -> dict:
        """Wire shape consumed by the HTTP layer and the UI."""
        return {
            "orderQuantity": self.order_quantity,
            "totalItems": self.total_items,
            "totalPacks": self.total_packs,
            "packs": [p.to_dict() for p in self.packs],
            "waste": self.waste,
        }

    def __repr__(self):
        breakdown = " + ".join(repr(p) for p in self.packs)
        return (f"PackingResult(Order={self.order_quantity}, Items={self.total_items}, "
                f"Packs={self.total_packs} [{breakdown}], Waste={self.waste})")
