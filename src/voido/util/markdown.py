"""Markdown note source -> plain terminal lines.

Only the subset people actually type into todo notes is handled: headings,
bullet / numbered / task lists, block quotes, fenced code, horizontal rules
and inline emphasis, code and links.
"""

import re

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_BULLET_RE = re.compile(r"^(\s*)[-*+]\s+(.*)$")
_TASK_RE = re.compile(r"^\[([ xX])\]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^(\s*)(\d+)[.)]\s+(.*)$")
_QUOTE_RE = re.compile(r"^\s*>\s?(.*)$")
_FENCE_RE = re.compile(r"^\s*(```|~~~)\s*(\S*)")
_RULE_RE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")

_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]*)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]*)\)")
_CODE_RE = re.compile(r"`([^`]+)`")
_BOLD_RE = re.compile(r"(\*\*|__)(.+?)\1")
_ITALIC_RE = re.compile(r"(?<![\w*])([*_])(?!\s)(.+?)(?<!\s)\1(?![\w*])")
_STRIKE_RE = re.compile(r"~~(.+?)~~")

RULE_WIDTH = 24


def render_inline(text: str) -> str:
    # code spans first so emphasis markers inside them survive
    spans: list[str] = []

    def _stash(m: re.Match[str]) -> str:
        spans.append(m.group(1))
        return f"\x00{len(spans) - 1}\x00"

    out = _CODE_RE.sub(_stash, text)
    out = _IMAGE_RE.sub(lambda m: f"[image: {m.group(1) or m.group(2)}]", out)
    out = _LINK_RE.sub(lambda m: f"{m.group(1)} <{m.group(2)}>" if m.group(2) else m.group(1), out)
    out = _BOLD_RE.sub(r"\2", out)
    out = _STRIKE_RE.sub(r"\1", out)
    out = _ITALIC_RE.sub(r"\2", out)
    return re.sub(r"\x00(\d+)\x00", lambda m: spans[int(m.group(1))], out)


def render_markdown(source: str) -> list[str]:
    """Render Markdown source into display lines (no wrapping)."""
    if not source.strip():
        return []

    lines: list[str] = []
    in_code = False
    fence = ""
    for raw in source.splitlines():
        fm = _FENCE_RE.match(raw)
        if in_code:
            if fm and fm.group(1) == fence:
                in_code = False
                lines.append("")
            else:
                lines.append(f"    {raw}")
            continue
        if fm:
            in_code = True
            fence = fm.group(1)
            if fm.group(2):
                lines.append(f"[{fm.group(2)}]")
            continue

        if not raw.strip():
            # 空行は連続させない
            if lines and lines[-1] != "":
                lines.append("")
            continue

        if _RULE_RE.match(raw):
            lines.append("─" * RULE_WIDTH)
            continue

        if m := _HEADING_RE.match(raw):
            level = len(m.group(1))
            title = render_inline(m.group(2))
            if lines and lines[-1] != "":
                lines.append("")
            lines.append(title.upper() if level == 1 else title)
            lines.append(("=" if level == 1 else "-") * max(1, len(title)))
            continue

        if m := _QUOTE_RE.match(raw):
            lines.append(f"│ {render_inline(m.group(1))}")
            continue

        if m := _BULLET_RE.match(raw):
            indent = " " * len(m.group(1))
            body = m.group(2)
            if t := _TASK_RE.match(body):
                mark = "☑" if t.group(1).lower() == "x" else "☐"
                lines.append(f"{indent}{mark} {render_inline(t.group(2))}")
            else:
                lines.append(f"{indent}• {render_inline(body)}")
            continue

        if m := _NUMBERED_RE.match(raw):
            indent = " " * len(m.group(1))
            lines.append(f"{indent}{m.group(2)}. {render_inline(m.group(3))}")
            continue

        lines.append(render_inline(raw.strip()))

    while lines and lines[-1] == "":
        lines.pop()
    return lines
