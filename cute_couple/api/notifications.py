"""
WebSocketによるリマインダー通知ストリーミングAPI

sweetReminder / eventReminder をリアルタイムで配信する。
ブラウザクライアントはこのストリームを購読し、トースト表示と通知ログに使う。
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from cute_couple.app_bootstrap.dependencies import get_fanout_channel_dep
from cute_couple.event_stream import FanoutChannel, Subscription, serialize_event


router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


async def _forward_events(websocket: WebSocket, subscription: Subscription) -> None:
    """購読キューのイベントを WebSocket へ送り続ける。"""

    try:
        while True:
            event = await subscription.get()
            await websocket.send_text(serialize_event(event))
    except Exception as exc:  # noqa: BLE001
        # --- 送信失敗（切断済み等）は受信ループ側の切断検知に任せる ---
        logger.debug("notifications websocket sender stopped: %s", str(exc))


@router.websocket("/stream")
async def stream_notifications(
    websocket: WebSocket,
    channel: FanoutChannel = Depends(get_fanout_channel_dep),
) -> None:
    """
    通知をWebSocketでストリーミング配信する。

    接続時に購読登録し、切断時は自動で登録解除する。
    """
    # --- accept 前に購読しておき、接続完了直後の publish も取りこぼさない ---
    subscription = channel.subscribe()
    sender: Optional["asyncio.Task[None]"] = None
    try:
        await websocket.accept()
        sender = asyncio.create_task(_forward_events(websocket, subscription))
        logger.info("notifications websocket connected")

        # --- クライアントメッセージ受信ループ（内容は使わず、切断検知に使う） ---
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("notifications websocket disconnected by client")
    except Exception as exc:  # noqa: BLE001
        logger.warning("notifications websocket terminated by error: %s", str(exc))
    finally:
        channel.unsubscribe(subscription)
        if sender is not None:
            sender.cancel()
        logger.info("notifications websocket disconnected")
