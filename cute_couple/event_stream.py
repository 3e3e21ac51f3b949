"""
WebSocket向けアプリイベント配信（ファンアウト）

sweetReminder / eventReminder などのアプリケーションイベントを、
接続中の全クライアントへブロードキャストする。

方針:
- 購読者の集合はプロセス内で1つの FanoutChannel が所有する（モジュールグローバルにしない）。
- publish は非ブロッキング。各購読者の有界キューへ put_nowait するだけで、送信は接続側のタスクが行う。
- 配信保証は無い（ACK/再送/取りこぼし分の保存はしない）。publish 後に接続した購読者には届かない。
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

# --- 配信バックプレッシャー設定 ---
# NOTE: キューは有界にして、遅いクライアントでメモリが膨らまないようにする。
_SUBSCRIBER_QUEUE_MAXSIZE = 100


@dataclass
class AppEvent:
    """
    WebSocket配信用のイベント。
    """

    type: str  # イベント種別（sweetReminder, eventReminder等）
    data: Dict[str, Any]  # 配信ペイロード


def serialize_event(event: AppEvent) -> str:
    """
    イベントをJSON文字列にシリアライズする。

    WebSocket送信用の最小ペイロードに整形する。
    """
    return json.dumps(
        {
            "type": event.type,
            "data": event.data,
        },
        ensure_ascii=False,
        separators=(",", ":"),
    )


@dataclass(eq=False)
class Subscription:
    """
    購読ハンドル。

    subscribe() の戻り値で、unsubscribe() に渡す以外は受信キューの読み出しに使う。
    """

    subscription_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    queue: "asyncio.Queue[AppEvent]" = field(
        default_factory=lambda: asyncio.Queue(maxsize=int(_SUBSCRIBER_QUEUE_MAXSIZE))
    )
    loop: Optional[asyncio.AbstractEventLoop] = None  # 受信側のイベントループ（別スレッドからの publish 用）

    async def get(self) -> AppEvent:
        """次のイベントを待って返す。"""
        return await self.queue.get()

    def get_nowait(self) -> AppEvent:
        """届いているイベントを1件返す（無ければ asyncio.QueueEmpty）。"""
        return self.queue.get_nowait()

    def pending(self) -> int:
        """未読イベント数を返す。"""
        return int(self.queue.qsize())

    def _enqueue(self, event: AppEvent) -> None:
        """イベントを non-blocking でキュー投入する（満杯時はドロップ）。"""
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                "event stream subscriber queue full; dropped type=%s subscription_id=%s",
                event.type,
                self.subscription_id,
            )

    def deliver(self, event: AppEvent) -> None:
        """
        イベントを受信キューへ渡す。

        受信側ループと別スレッドから呼ばれた場合は call_soon_threadsafe で渡す。
        """
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None

        target = self.loop
        if target is None or target is current:
            self._enqueue(event)
            return
        try:
            target.call_soon_threadsafe(self._enqueue, event)
        except RuntimeError:
            # --- shutdown レース（loop close 後）は捨てる ---
            return


class FanoutChannel:
    """
    接続中の購読者全員へイベントを配る publish/subscribe バス。

    購読者集合は connect/disconnect/publish が別スレッドから同時に触っても壊れないよう、
    lock で保護する（publish はスナップショットに対して配る）。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Subscription] = {}

    def subscribe(self) -> Subscription:
        """
        購読者を登録してハンドルを返す。

        実行中のイベントループ内で呼ばれた場合は、そのループを受信側として記録する。
        """
        try:
            loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        sub = Subscription(loop=loop)
        with self._lock:
            self._subscribers[sub.subscription_id] = sub
            count = len(self._subscribers)
        logger.info("event stream subscribed subscription_id=%s clients=%s", sub.subscription_id, count)
        return sub

    def unsubscribe(self, handle: Subscription) -> None:
        """購読者を解除する。解除済みハンドルでも何もしない。"""
        with self._lock:
            removed = self._subscribers.pop(handle.subscription_id, None)
            count = len(self._subscribers)
        if removed is not None:
            logger.info(
                "event stream unsubscribed subscription_id=%s clients=%s", handle.subscription_id, count
            )

    def connected_count(self) -> int:
        """接続中の購読者数を返す。"""
        with self._lock:
            return int(len(self._subscribers))

    def publish(self, event_name: str, payload: Dict[str, Any]) -> int:
        """
        呼び出し時点で接続中の全購読者へイベントを配る。

        Returns:
            配った購読者数（0 でもエラーにしない）。
        """
        event = AppEvent(type=str(event_name), data=dict(payload or {}))

        # --- 配信対象は呼び出し時点のスナップショット ---
        with self._lock:
            targets = list(self._subscribers.values())

        # --- 送信ログ（ブロードキャスト） ---
        # NOTE: 宛先が複数になり得るため、接続数だけ記録する。
        logger.info("event stream broadcast type=%s clients=%s", event.type, len(targets))

        for sub in targets:
            sub.deliver(event)
        return len(targets)
