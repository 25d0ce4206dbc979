# -*- coding: utf-8 -*-
"""
src/tint/utils/clipboard_manager.py

Puts picked color codes on the system clipboard through 'pyperclip'.
"""

import logging

import pyperclip

logger = logging.getLogger(__name__)

CLIPBOARD_HINT = "On Linux, copying needs 'xclip', 'xsel' or 'wl-clipboard' installed."


def copy_to_clipboard(text: str) -> bool:
    """
    Replaces the clipboard contents with a color code such as '#FF8000'.

    Returns:
        bool: False if no clipboard mechanism is available; the color stays
        in the history either way.
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        logger.warning(f"Could not copy color {text} to the clipboard: {e}. {CLIPBOARD_HINT}")
        return False
    logger.info(f"Copied color {text} to the clipboard.")
    return True
