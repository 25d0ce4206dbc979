# -*- coding: utf-8 -*-
"""
The Utilities Package for Tint.

Wrappers around the system clipboard (pyperclip) and the global hotkey
listener (pynput).
"""
