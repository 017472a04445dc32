#!/usr/bin/env python3
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from loguru import logger

from override_graph import logs
from override_graph.constants import (
    ALLOWED_COMMENT_MARKERS,
    COMMENT_CHAR,
    COMMENT_CHECK_DEFAULT_PATHS,
    ENCODING_UTF8,
    ESCAPE_CHAR,
    PY_EXTENSION,
    QUOTE_CHARS,
    TRIPLE_QUOTES,
)


def find_comment_start(line: str) -> int | None:
    in_string = None
    escaped = False
    for i, char in enumerate(line):
        if escaped:
            escaped = False
            continue
        if char == ESCAPE_CHAR and in_string:
            escaped = True
            continue
        if char in QUOTE_CHARS:
            if in_string is None:
                in_string = char
            elif in_string == char:
                in_string = None
        elif char == COMMENT_CHAR and in_string is None:
            return i
    return None


def has_allowed_marker(comment: str) -> bool:
    return any(marker in comment for marker in ALLOWED_COMMENT_MARKERS)


def _is_code_line(stripped: str) -> bool:
    return bool(stripped) and not stripped.startswith(
        (COMMENT_CHAR, *TRIPLE_QUOTES)
    )


def check_lines(filepath: str, lines: Iterable[str]) -> list[str]:
    errors = []
    in_multiline_string = False
    seen_code = False

    for lineno, line in enumerate(lines, 1):
        if sum(line.count(q) for q in TRIPLE_QUOTES) % 2 == 1:
            in_multiline_string = not in_multiline_string
        if in_multiline_string:
            continue

        # (H) header comments before the first statement are not checked
        seen_code = seen_code or _is_code_line(line.strip())
        if not seen_code:
            continue

        if (start := find_comment_start(line)) is None:
            continue
        comment = line[start:].strip()
        if not has_allowed_marker(comment):
            errors.append(f"{filepath}:{lineno}: {comment[:60]}")

    return errors


def check_file(filepath: str | Path) -> list[str]:
    with open(filepath, encoding=ENCODING_UTF8) as f:
        return check_lines(str(filepath), f.readlines())


def iter_python_files(paths: Iterable[str | Path]) -> Iterator[Path]:
    for path in map(Path, paths):
        if path.is_dir():
            yield from sorted(path.rglob(f"*{PY_EXTENSION}"))
        elif path.suffix == PY_EXTENSION:
            yield path


def main(argv: list[str] | None = None) -> int:
    paths = argv if argv is not None else sys.argv[1:]
    all_errors = [
        error
        for filepath in iter_python_files(paths or COMMENT_CHECK_DEFAULT_PATHS)
        for error in check_file(filepath)
    ]
    if not all_errors:
        return 0

    logger.error(logs.COMMENTS_FOUND)
    for error in all_errors:
        logger.error(logs.COMMENT_ERROR.format(error=error))
    return 1


if __name__ == "__main__":
    sys.exit(main())
