"""
Caller identification for registration diagnostics.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

_PACKAGE_DIR = str(Path(__file__).resolve().parent.parent) + os.sep


@dataclass(frozen=True)
class CallerInfo:
    id: str
    name: str = ""
    file: str = ""
    line: int = 0


UNKNOWN_CALLER = CallerInfo(id="unknown")


def _inside_package(filename: str) -> bool:
    try:
        return str(Path(filename).resolve()).startswith(_PACKAGE_DIR)
    except (OSError, ValueError):
        return False


def describe_caller() -> CallerInfo:
    """
    Describe the first stack frame outside the eventer package.

    Returns UNKNOWN_CALLER when every frame belongs to the package.
    """
    frame = sys._getframe(1)
    while frame is not None and _inside_package(frame.f_code.co_filename):
        frame = frame.f_back
    if frame is None:
        return UNKNOWN_CALLER

    file = frame.f_code.co_filename
    line = frame.f_lineno
    return CallerInfo(
        id=f"{file} +{line}",
        name=frame.f_code.co_name,
        file=file,
        line=line,
    )
