"""Instruction compilation for coloring page generation.

The instruction sent alongside the photo is a fixed directive with two
slots: one phrase describing the outline weight and one describing the level
of detail.  Both phrases come from fixed tables keyed by the option enums, so
the same options always produce the same instruction.

Template Structure::

    Transform this image into a black and white coloring book page.
    The output should have clean, simple, and [Thickness Phrase].
    It should be [Detail Phrase].
    Remove all shading, gradients, and colors.
    Focus on creating clear, distinct lines suitable for coloring.
    The final image should be purely line art.

Usage
-----
::

    instruction = build_instruction(
        StyleOptions(LineThickness.BOLD, DetailLevel.LOW)
    )
"""

from __future__ import annotations

from coloringpage.core.models import DetailLevel, LineThickness, StyleOptions

# ---------------------------------------------------------------------------
# Fixed phrase tables.
# ---------------------------------------------------------------------------

THICKNESS_PHRASES: dict[LineThickness, str] = {
    LineThickness.THIN: "thin and delicate outlines",
    LineThickness.MEDIUM: "bold outlines",
    LineThickness.BOLD: "extra bold and thick outlines",
}

DETAIL_PHRASES: dict[DetailLevel, str] = {
    DetailLevel.LOW: "with simple details, suitable for young children",
    DetailLevel.MEDIUM: "with a moderate amount of detail",
    DetailLevel.HIGH: "with intricate and fine details, suitable for adults",
}

# Every enum member must have a phrase.
if set(THICKNESS_PHRASES) != set(LineThickness) or set(DETAIL_PHRASES) != set(DetailLevel):
    raise RuntimeError("Phrase tables do not cover every style option")


def build_instruction(options: StyleOptions) -> str:
    """Compile the generation instruction for the given style options.

    Args:
        options: Line thickness and detail level, as enum members or their
            string values.  Values outside the enums are a caller error and
            raise ``ValueError``.

    Returns:
        The instruction text, one sentence per line.
    """
    thickness = THICKNESS_PHRASES[LineThickness(options.line_thickness)]
    detail = DETAIL_PHRASES[DetailLevel(options.detail_level)]

    lines = [
        "Transform this image into a black and white coloring book page.",
        f"The output should have clean, simple, and {thickness}.",
        f"It should be {detail}.",
        "Remove all shading, gradients, and colors.",
        "Focus on creating clear, distinct lines suitable for coloring.",
        "The final image should be purely line art.",
    ]
    return "\n".join(lines)
