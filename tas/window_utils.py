"""Win32 window helpers for the companion tools (Windows only).

Import this module lazily: pywin32 is only installed on Windows.
"""
from typing import List, Optional, Tuple

import win32con
import win32gui

Size = Tuple[int, int]


def _visible_windows() -> List[int]:
    found: List[int] = []

    def collect(hwnd, _):
        if win32gui.IsWindowVisible(hwnd):
            found.append(hwnd)
        return True

    win32gui.EnumWindows(collect, 0)
    return found


def window_size(hwnd: int) -> Size:
    left, top, right, bottom = win32gui.GetWindowRect(hwnd)
    return right - left, bottom - top


def find_window(title_contains: str) -> Optional[int]:
    """Largest visible top-level window whose title contains title_contains."""
    needle = title_contains.lower()
    best, best_area = None, -1
    for hwnd in _visible_windows():
        try:
            if needle not in win32gui.GetWindowText(hwnd).lower():
                continue
            w, h = window_size(hwnd)
        except win32gui.error:
            continue
        if w * h > best_area:
            best, best_area = hwnd, w * h
    return best


def move_window_to_pos(x: int, y: int, title_contains: str) -> bool:
    """Move the matching window to (x, y) keeping its size.  False if not found."""
    hwnd = find_window(title_contains)
    if hwnd is None:
        return False
    if win32gui.IsIconic(hwnd):
        win32gui.ShowWindow(hwnd, win32con.SW_RESTORE)
    w, h = window_size(hwnd)
    win32gui.SetWindowPos(hwnd, 0, x, y, w, h, win32con.SWP_SHOWWINDOW | win32con.SWP_NOZORDER)
    return True
