"""Block digit silhouettes "0".."9" on a 660 x 1100 canvas.

Coordinates are in the authoring frame (y grows downward) and every glyph
fills the full canvas width, so all extruded digits share the same depth.
"""

from __future__ import annotations

from typing import Sequence

from digitspin.outline import Outline

VIEWBOX = (660.0, 1100.0)

Loop = Sequence[tuple[float, float]]

DIGIT_LOOPS: tuple[tuple[Loop, ...], ...] = (
    # 0
    (
        ((0, 1100), (0, 0), (660, 0), (660, 1100)),
        ((220, 880), (220, 220), (440, 220), (440, 880)),
    ),
    # 1
    (
        (
            (220, 220), (220, 880), (0, 880), (0, 1100), (660, 1100),
            (660, 880), (440, 880), (440, 0), (0, 0), (0, 220),
        ),
    ),
    # 2
    (
        (
            (220, 660), (660, 660), (660, 0), (0, 0), (0, 220), (440, 220),
            (440, 440), (0, 440), (0, 1100), (660, 1100), (660, 880), (220, 880),
        ),
    ),
    # 3
    (
        (
            (0, 1100), (660, 1100), (660, 0), (0, 0), (0, 220), (440, 220),
            (440, 440), (220, 440), (220, 660), (440, 660), (440, 880), (0, 880),
        ),
    ),
    # 4
    (
        (
            (440, 440), (220, 440), (220, 0), (0, 0), (0, 660),
            (440, 660), (440, 1100), (660, 1100), (660, 0), (440, 0),
        ),
    ),
    # 5
    (
        (
            (220, 440), (660, 440), (660, 1100), (0, 1100), (0, 880), (440, 880),
            (440, 660), (0, 660), (0, 0), (660, 0), (660, 220), (220, 220),
        ),
    ),
    # 6
    (
        ((0, 1100), (0, 0), (660, 0), (660, 220), (220, 220), (220, 440), (660, 440), (660, 1100)),
        ((220, 880), (220, 660), (440, 660), (440, 880)),
    ),
    # 7
    (
        ((660, 1100), (660, 0), (0, 0), (0, 220), (440, 220), (440, 1100)),
    ),
    # 8
    (
        ((660, 0), (660, 1100), (0, 1100), (0, 0)),
        ((220, 880), (220, 660), (440, 660), (440, 880)),
        ((440, 220), (440, 440), (220, 440), (220, 220)),
    ),
    # 9
    (
        ((660, 0), (660, 1100), (0, 1100), (0, 880), (440, 880), (440, 660), (0, 660), (0, 0)),
        ((440, 220), (440, 440), (220, 440), (220, 220)),
    ),
)


def digit_outline(digit: int) -> Outline:
    if not 0 <= digit < len(DIGIT_LOOPS):
        raise ValueError(f"digit must be in 0..{len(DIGIT_LOOPS) - 1}, got {digit}.")
    loops = [[(float(x), float(y)) for x, y in loop] for loop in DIGIT_LOOPS[digit]]
    return Outline(loops=loops, name=str(digit))


def digit_outlines() -> list[Outline]:
    return [digit_outline(d) for d in range(len(DIGIT_LOOPS))]


__all__ = ["VIEWBOX", "DIGIT_LOOPS", "digit_outline", "digit_outlines"]
