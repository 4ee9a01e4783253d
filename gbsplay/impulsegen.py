"""Generation of band-limited step impulse tables."""

from __future__ import annotations

import math
import sys
from typing import Sequence

IMPULSE_HEIGHT = 1 << 24

DEFAULT_N_SHIFT = 7
DEFAULT_W_SHIFT = 5
DEFAULT_CUTOFF = 1.0


def _sinc(x: float) -> float:
    a = math.pi * x
    if a == 0.0:
        return 1.0
    return math.sin(a) / a


def _blackman(n: float, m: float) -> float:
    return 0.42 - 0.5 * math.cos(2 * n * math.pi / m) + 0.08 * math.cos(4 * n * math.pi / m)


def gen_impulsetab(w_shift: int, n_shift: int, cutoff: float) -> list[int]:
    """Return ``2**n_shift`` impulses of ``2**w_shift`` samples, row after row.

    Every row sums to ``IMPULSE_HEIGHT``.
    """
    width = 1 << w_shift
    count = 1 << n_shift
    m = width // 2
    height = float(IMPULSE_HEIGHT)

    def row(j: float, scale: float) -> list[int]:
        return [
            round(scale * height * _sinc((i - j) * cutoff) * _blackman(i - j + width // 2, width))
            for i in range(-m + 1, m + 1)
        ]

    table = [0] * width
    table[m - 1] = IMPULSE_HEIGHT

    for j_l in range(1, count):
        j = j_l / count
        div = height
        dcorr = cutoff
        attempts = 0
        while True:
            corr = IMPULSE_HEIGHT - sum(row(j, dcorr))
            dcorr *= 1.0 + corr / div
            div *= 1.3
            if corr == 0 or attempts >= 20:
                break
            attempts += 1

        values = row(j, dcorr)
        values[m] += IMPULSE_HEIGHT - sum(values)
        table.extend(values)

    return table


def render_impulse_header(w_shift: int, n_shift: int, cutoff: float) -> str:
    """Render the impulse table as a C header text."""
    table = gen_impulsetab(w_shift, n_shift, cutoff)
    w_mask = (1 << w_shift) - 1
    parts = [
        f"#define IMPULSE_N_SHIFT {n_shift}\n",
        f"#define IMPULSE_W_SHIFT {w_shift}\n",
        "static const int32_t base_impulse[] = {",
    ]
    for index, value in enumerate(table):
        if index & w_mask == 0:
            parts.append("\n\t")
        parts.append(f"{value:9d},")
    parts.append("\n};\n")
    return "".join(parts)


def main(argv: Sequence[str] | None = None) -> int:
    """Write the default impulse table header to standard output."""
    sys.stdout.write(render_impulse_header(DEFAULT_W_SHIFT, DEFAULT_N_SHIFT, DEFAULT_CUTOFF))
    return 0


if __name__ == "__main__":
    sys.exit(main())