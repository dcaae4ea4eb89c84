"""Date and time formatting utilities."""


def format_age(age_days: int) -> str:
    """
    Format age in days.

    Args:
        age_days: Number of days

    Returns:
        Formatted age string
    """
    return f"{age_days}d"
