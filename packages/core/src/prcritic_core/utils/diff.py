"""Map a unified diff to the new-file lines GitHub will accept comments on."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_HUNK_RE = re.compile(r"^@@ -\d+(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


@dataclass
class DiffIndex:
    """New-file line numbers inside the diff's hunks, keyed by file path.

    With line addressing (side=RIGHT) GitHub accepts added and context lines
    of a hunk; removed lines only exist on the LEFT side.
    """

    lines: dict[str, set[int]] = field(default_factory=dict)

    @property
    def files(self) -> list[str]:
        return list(self.lines)

    def is_addressable(self, path: str, line: int) -> bool:
        return line in self.lines.get(path, ())


def _new_path(header: str) -> str | None:
    path = header[4:].split("\t", 1)[0].strip()
    if path == "/dev/null":
        return None
    return path[2:] if path.startswith("b/") else path


def parse_unified_diff(diff_text: str) -> DiffIndex:
    """Build a DiffIndex from `git diff`-style text covering one or more files.

    Hunk bodies are consumed by their declared lengths so that content lines
    beginning with "+++" or "---" are never mistaken for file headers.
    A malformed @@ header is skipped and its body ignored: no mapping, no crash.
    """
    index = DiffIndex()
    current: str | None = None
    file_line = 0
    old_left = new_left = 0

    for line in diff_text.splitlines():
        if old_left > 0 or new_left > 0:
            if line.startswith("\\"):
                continue  # "\ No newline at end of file"
            if line.startswith("-"):
                old_left -= 1
                continue
            if line.startswith("+"):
                new_left -= 1
            else:
                old_left -= 1
                new_left -= 1
            if current is not None:
                index.lines[current].add(file_line)
            file_line += 1
            continue

        if line.startswith("diff --git"):
            current = None
        elif line.startswith("+++ "):
            current = _new_path(line)
            if current is not None:
                index.lines.setdefault(current, set())
        elif line.startswith("@@"):
            match = _HUNK_RE.match(line)
            if not match:
                continue
            old_left = int(match.group(1)) if match.group(1) is not None else 1
            file_line = int(match.group(2))
            new_left = int(match.group(3)) if match.group(3) is not None else 1

    return index
