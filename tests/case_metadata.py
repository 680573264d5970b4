"""
Expectations for the declaration files under tests/cases.

The expected exit status follows the file name:
- test_err_*.apx  -> 2 (errors, nothing generated)
- test_warn_*.apx -> 1 (generated with warnings)
- test_*.apx      -> 0

Diagnostic codes are listed in a comment anywhere in the file:
# EXPECT_CODES: CE1001, CE1005
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

CASES_DIR = Path(__file__).parent / "cases"

_CODES = re.compile(r"^\s*#\s*EXPECT_CODES:\s*(.+)$", re.MULTILINE)


@dataclass
class CaseMetadata:
    path: Path
    expect_exit: int = 0
    expect_codes: List[str] = field(default_factory=list)


def parse_case_metadata(path: Path) -> CaseMetadata:
    name = path.stem
    if name.startswith("test_err_"):
        expect_exit = 2
    elif name.startswith("test_warn_"):
        expect_exit = 1
    else:
        expect_exit = 0

    codes: List[str] = []
    for match in _CODES.finditer(path.read_text(encoding="utf-8")):
        codes.extend(c.strip() for c in match.group(1).split(",") if c.strip())

    return CaseMetadata(path=path, expect_exit=expect_exit, expect_codes=sorted(codes))


def discover_cases() -> List[CaseMetadata]:
    return [parse_case_metadata(p) for p in sorted(CASES_DIR.glob("test_*.apx"))]
