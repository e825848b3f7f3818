"""
Progress Bar Utilities
"""

import tqdm


def create_progress_bar(total: int, desc: str, unit: str = "img", verbose: int = 30) -> tqdm.tqdm | None:
    """
    Create a tqdm progress bar for batch operations.

    Args:
        total: Total number of items to process.
        desc: Description for the progress bar.
        unit: Unit label for items.
        verbose: Verbosity level (only create if <= 17, i.e. -vv or louder).

    Returns:
        tqdm progress bar instance, or None when output should stay quiet.
    """
    if verbose > 17 or total <= 1:
        return None
    return tqdm.tqdm(total=total, desc=desc, unit=unit, leave=False)
