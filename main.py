# main.py

from packopt.controller import PackMaster
from packopt.config import DEFAULT_PACK_SIZES
from packopt.errors import PackOptimizerError

# Get the single controller instance (creates and seeds the database if needed)
wm = PackMaster()

print("\n--- 1. DEFAULT CATALOG ---")
print(f"Pack sizes: {sorted(wm.get_pack_sizes())} (version {wm.catalog_version})")

print("\n--- 2. OPTIMIZATION RUNS ---")
# Expected: 1 -> 1x250, 250 -> 1x250, 251 -> 1x500,
#           501 -> 1x500 + 1x250, 12001 -> 2x5000 + 1x2000 + 1x250
for quantity in (1, 250, 251, 501, 12001):
    result = wm.optimize(quantity)
    print(f"  {result}")

print("\n--- 3. REJECTED ORDER ---")
try:
    wm.optimize(0)
except PackOptimizerError as e:
    print(f"  !! {type(e).__name__}: {e}")

print("\n--- 4. CATALOG UPDATE ---")
# Odd sizes make the waste/pack-count trade-off visible
wm.update_pack_sizes([23, 31, 53])
print(f"Pack sizes: {sorted(wm.get_pack_sizes())} (version {wm.catalog_version})")
print(f"  {wm.optimize(50000)}")

# Put the defaults back for the next run
wm.update_pack_sizes(DEFAULT_PACK_SIZES)

print("\n--- FINAL AUDIT TRAIL ---")
for entry in wm.recent_optimizations(limit=5):
    print(f"  [{entry.status}] order={entry.order_quantity} items={entry.total_items} "
          f"packs={entry.total_packs} catalog=v{entry.catalog_version}")
