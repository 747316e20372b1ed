"""
Translation recipes.

A recipe is the text that says how one pseudo-instruction expands: one
basic-instruction template per line, in emission order. For example the
large-immediate form of ``li`` is

    lui RG1, VH2
    addi RG1, RG1, VL2

Placeholder syntax is not checked here; unknown markers simply survive
substitution as literal text.
"""

from typing import Optional


def build_translation_list(recipe: Optional[str]) -> Optional[tuple[str, ...]]:
    """
    Split a recipe into its ordered template lines.

    Empty lines are dropped, so a trailing newline (as left by the table
    loader in front of a COMPACT section) does not create an empty template.

    Args:
        recipe: Newline-separated template lines, or None

    Returns:
        Tuple of template lines, or None when the recipe is empty or absent.
        None means "no translation defined", which callers must keep apart
        from a translation that happens to be empty.
    """
    if not recipe:
        return None
    lines = tuple(line for line in recipe.split("\n") if line)
    return lines or None
