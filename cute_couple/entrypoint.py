"""配布向けのエントリポイント。

設計意図:
- 保存先ディレクトリを確実に作成し、起動に必要な前提を揃える
- uvicorn の起動はプログラムから行う（CLI依存を減らす）
"""

from __future__ import annotations


def main() -> None:
    """配布版のサーバー起動処理。"""

    # --- 先にディレクトリを確実に作る（初回起動時の事故防止） ---
    from cute_couple import paths

    paths.get_config_dir()
    paths.get_data_dir()
    paths.get_uploads_dir()
    paths.get_logs_dir()

    # --- 設定ファイルが無い場合は、案内して終了 ---
    config_path = paths.get_default_config_file_path()
    if not config_path.exists():
        print("[cute_couple] config/setting.toml が見つかりません。")
        print("[cute_couple] config/setting.toml.example をコピーして作成してください。")
        print(f"[cute_couple] 期待パス: {config_path}")
        return

    from cute_couple.config import load_config
    from cute_couple.main import create_app

    toml_config = load_config(config_path)
    app = create_app(toml_config)

    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=toml_config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
