"""
Formatting utilities.
"""


def format_percent(value: float, decimals: int = 0) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value.
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    return f"{value:.{decimals}f}%"


def format_step_position(index: int, total: int) -> str:
    """
    Format a zero-based step index for display.

    Args:
        index: Zero-based step index.
        total: Number of steps.

    Returns:
        String such as "Step 3 of 23".
    """
    return f"Step {index + 1} of {total}"
