def raw_contribution_level(count: int) -> int:
    """Map a single account's daily count to a heatmap level in range 0..4."""

    if count <= 0:
        return 0
    if count <= 3:
        return 1
    if count <= 6:
        return 2
    if count <= 9:
        return 3
    return 4


def merged_contribution_level(count: int) -> int:
    """Map a count summed across accounts to a heatmap level in range 0..4.

    Merged days run higher than single-account days, so the buckets are
    wider to keep the top level from saturating.
    """

    if count <= 0:
        return 0
    if count <= 5:
        return 1
    if count <= 10:
        return 2
    if count <= 15:
        return 3
    return 4
