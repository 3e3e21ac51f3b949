"""
HTTP / WebSocket API パッケージ。
"""

from __future__ import annotations
