import math


def format_duration(seconds: float) -> str:
    """Format seconds as M:SS, or H:MM:SS for an hour or more."""
    if not seconds or seconds < 0:
        seconds = 0
    total = int(math.floor(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def truncate_text(text: str, max_chars: int, marker: str = "...(truncated)") -> str:
    """Cut text for a prompt, marking the cut."""
    if len(text) > max_chars:
        return text[:max_chars] + marker
    return text
