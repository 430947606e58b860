"""
================================
Plotting a sweep over p
================================

This example runs the sweep for several values of p, writes the
``daubechies_{p}_scaling_convergence.csv`` files, and reads them back to
show the winning scheme and its error for each p.

The sweep runs as one Dask task per p.
"""

from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from daubinterp import run_sweep

outdir = Path("sweep_output")
ps = [2, 3, 4, 5, 6]

best = run_sweep(ps, outdir=outdir, reference_levels=12, scheduler="threads")

fig, ax = plt.subplots(figsize=(10, 6))
for p in ps:
    table = pd.read_csv(outdir / f"daubechies_{p}_scaling_convergence.csv", index_col="r")
    winner = best[p].iloc[-1]
    ax.semilogy(table.index, table[winner], "o-", label=f"p = {p}: {winner}")

ax.set_title("Error of the best interpolator at the finest level")
ax.set_xlabel("Refinement level r (dx = 2^-r)")
ax.set_ylabel("Sup-norm error")
ax.legend()
ax.grid(True, linestyle="--", alpha=0.6)
fig.savefig(outdir / "best_interpolators.png")
