"""cute_couple 起動スクリプト。

開発時の手動起動を想定する。
配布では [cute_couple/entrypoint.py] を使う。
"""

from __future__ import annotations


def main() -> None:
    """uvicorn で FastAPI アプリを起動する。"""

    import uvicorn

    # --- setting.toml から待受ポートを取得する ---
    from cute_couple.config import load_config

    toml_config = load_config()

    # --- 開発用: コード変更を自動でリロードする（app は factory で生成） ---
    uvicorn.run(
        "cute_couple.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=toml_config.port,
        reload=True,
    )


if __name__ == "__main__":
    main()
