"""Text formatting helpers shared by sensors."""

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_bytes(num_bytes: int) -> str:
    """Format a byte count as B, KB, MB or GB (1024 based)."""
    if num_bytes >= GB:
        return f"{num_bytes / GB:.1f} GB"
    elif num_bytes >= MB:
        return f"{num_bytes / MB:.1f} MB"
    elif num_bytes >= KB:
        return f"{num_bytes / KB:.1f} KB"
    return f"{num_bytes} B"


def format_duration(seconds: int) -> str:
    """Format seconds as ``45s``, ``5m 30s`` or ``2h 15m``."""
    seconds = int(seconds)
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        mins, secs = divmod(seconds, 60)
        return f"{mins}m" if secs == 0 else f"{mins}m {secs}s"
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    return f"{hours}h" if mins == 0 else f"{hours}h {mins}m"


def usage_percent(used: int, total: int) -> int:
    """Used share of total as a whole percentage in [0, 100]; 0 when total is 0."""
    if total <= 0:
        return 0
    percent = round(used / total * 100)
    return max(0, min(100, percent))
