"""
定期実行タスク（periodic task）ユーティリティ

一定間隔で実行する asyncio タスクを管理する。

目的:
- 標準 asyncio だけで「毎N秒」を実現する
- 例外が起きてもタスクが死なず、ログに残して継続する
- 停止要求後は次の発火をしない。実行中の1回分は最後まで走らせてから止める
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional


@dataclass
class PeriodicTask:
    """start_periodic_task() が返す、停止可能な定期実行タスク。"""

    name: str
    stop_event: asyncio.Event = field(default_factory=asyncio.Event)
    task: Optional["asyncio.Task[None]"] = None
    ticks: int = 0  # 完了した実行回数（例外で終わった回も数える）


def start_periodic_task(
    tasks: List[PeriodicTask],
    *,
    name: str,
    interval_seconds: float,
    wait_first: bool,
    func: Callable[[], Awaitable[None]],
    logger: logging.Logger,
) -> PeriodicTask:
    """
    定期実行タスクを開始して tasks に登録する。

    Args:
        tasks: 登録先のタスクリスト（stop_periodic_tasks に渡す）。
        name: asyncio タスク名（デバッグ用）。
        interval_seconds: 実行間隔（秒）。
        wait_first: True の場合、最初の実行前に interval だけ待つ。
        func: 1回分の処理（awaitable）。
        logger: 例外ログ出力に使用するロガー。

    Returns:
        作成した PeriodicTask。
    """
    interval = float(interval_seconds)
    if interval <= 0:
        raise ValueError("interval_seconds must be > 0")

    periodic = PeriodicTask(name=str(name))
    stop_event = periodic.stop_event

    async def _wait_interval() -> bool:
        """interval だけ待つ。停止要求が来たら True を返す。"""
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
            return True
        except asyncio.TimeoutError:
            return False

    # --- 定期実行ループ ---
    async def _runner() -> None:
        # --- 初回待機 ---
        if wait_first and await _wait_interval():
            return

        # --- 停止要求が来るまで定期実行 ---
        while not stop_event.is_set():
            try:
                await func()
            except asyncio.CancelledError:
                # --- 強制停止で cancel されたら素直に終了 ---
                raise
            except Exception as exc:  # noqa: BLE001
                # --- 例外は落とさずに記録して継続 ---
                logger.exception("periodic task failed: name=%s error=%s", name, str(exc))
            periodic.ticks += 1

            if await _wait_interval():
                return

    periodic.task = asyncio.create_task(_runner(), name=str(name))
    tasks.append(periodic)
    return periodic


async def stop_periodic_tasks(
    tasks: List[PeriodicTask],
    *,
    logger: logging.Logger,
    timeout_seconds: float = 10.0,
) -> None:
    """
    登録された定期実行タスクを停止する。

    先に停止要求を出して実行中の1回分の完了を待ち、
    timeout_seconds を過ぎても終わらないものだけ cancel する。
    """
    if not tasks:
        return

    # --- 先に停止要求を出して、次の発火を止める ---
    for t in list(tasks):
        t.stop_event.set()

    # --- 実行中の1回分を待つ（終わらなければ cancel） ---
    try:
        running = [t.task for t in tasks if t.task is not None]
        _done, pending = await asyncio.wait(running, timeout=float(timeout_seconds))
        for p in pending:
            p.cancel()
        if pending:
            logger.warning("periodic tasks cancelled after timeout: count=%s", len(pending))
            await asyncio.gather(*pending, return_exceptions=True)
    finally:
        # --- 状態を初期化して二重停止を避ける ---
        tasks.clear()
        logger.info("periodic tasks stopped")
