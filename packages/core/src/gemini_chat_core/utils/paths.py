from pathlib import Path

GEMINI_DIR = ".gemini"
CHAT_HISTORY_LOG_NAME = "chat_history.json"


def tildeify_path(p: Path) -> str:
    """Replaces the home directory with a tilde."""
    home = Path.home()
    if p.is_relative_to(home):
        return f"~/{p.relative_to(home)}"
    return str(p)


def get_default_history_log_path() -> Path:
    """Where the last completed conversation is written."""
    return Path.home() / GEMINI_DIR / CHAT_HISTORY_LOG_NAME


def redact_api_key(url: str) -> str:
    """Hides the key query parameter so URLs can be logged."""
    head, sep, query = url.partition("?")
    if not sep:
        return url
    params = [
        "key=***" if param.startswith("key=") else param
        for param in query.split("&")
    ]
    return f"{head}?{'&'.join(params)}"
