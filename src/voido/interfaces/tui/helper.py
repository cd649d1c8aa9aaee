import unicodedata


def _char_width(ch: str) -> int:
    """Calculate the width of a character in the terminal."""
    if len(ch) == 0:
        return 0
    # 制御文字
    if ch < " ":
        return 0
    # 結合文字 (濁点など)
    if unicodedata.combining(ch):
        return 0
    # 東アジア文字幅プロパティ
    # F: full-width, W: wide を2倍にして返す
    if unicodedata.east_asian_width(ch) in ("F", "W"):
        return 2
    return 1


def _clip(s: str, width: int) -> str:
    """Cut ``s`` so that its terminal width fits in ``width`` columns."""
    if width <= 0:
        return ""
    out: list[str] = []
    used = 0
    for ch in s:
        w = _char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)


def _wrap(s: str, width: int) -> list[str]:
    """Hard-wrap ``s`` by terminal width (no word splitting)."""
    if width <= 0:
        return []
    if not s:
        return [""]
    lines: list[str] = []
    rest = s
    while rest:
        chunk = _clip(rest, width)
        if not chunk:
            # 1文字で幅を超える場合も必ず前進する
            chunk = rest[0]
        lines.append(chunk)
        rest = rest[len(chunk) :]
    return lines
