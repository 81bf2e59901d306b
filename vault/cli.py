#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from .client.api import VaultApiClient
from .client.controller import (
    Notification,
    NotificationCenter,
    PageController,
    file_label,
    format_file_size,
    preview_kind_for_name,
)

BAR_WIDTH = 30


def _client(args: argparse.Namespace) -> VaultApiClient:
    return VaultApiClient(args.url, timeout=args.timeout)


def _short_cid(cid: str) -> str:
    if len(cid) <= 12:
        return cid
    return f"{cid[:6]}...{cid[-4:]}"


def _print_notification(note: Notification) -> None:
    stream = sys.stderr if note.kind == "error" else sys.stdout
    print(f"\n[{note.kind}] {note.message}", file=stream)


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("vault.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    controller = PageController(_client(args))
    controller.open()
    if not controller.files:
        print("No assets found")
        return 0

    for item in controller.files:
        kind = preview_kind_for_name(item.name)
        if kind == "file":
            kind = file_label(item.name)
        pinned = item.pinned_at.date().isoformat() if item.pinned_at else "-"
        print(f"{item.name}\t{_short_cid(item.content_hash)}\t{format_file_size(item.size_bytes)}\t{pinned}\t{kind}\t{item.access_url}")
    return 0


def _render_progress(controller: PageController) -> None:
    if not controller.is_uploading:
        return
    filled = BAR_WIDTH * controller.upload_progress // 100
    bar = "#" * filled + "-" * (BAR_WIDTH - filled)
    sys.stdout.write(f"\rUploading to IPFS... [{bar}] {controller.upload_progress:3d}%")
    sys.stdout.flush()


def cmd_upload(args: argparse.Namespace) -> int:
    if not os.path.isfile(args.path):
        print(f"File not found: {args.path}", file=sys.stderr)
        return 1

    notifications = NotificationCenter(on_show=_print_notification)
    controller = PageController(_client(args), notifications=notifications, on_change=_render_progress)
    try:
        controller.select_file(args.path, content_type=args.content_type)
        url = controller.upload()
    finally:
        controller.close()

    if url is None:
        return 1
    print(url)
    return 0


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(prog="vaultctl")
    parser.add_argument("--url", default=os.getenv("VAULT_URL", "http://127.0.0.1:8000"),
                        help="base URL of a running vault server")
    parser.add_argument("--timeout", type=float, default=None)
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"))
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.add_argument("--reload", action="store_true")
    p_serve.set_defaults(func=cmd_serve)

    p_list = sub.add_parser("list")
    p_list.set_defaults(func=cmd_list)

    p_upload = sub.add_parser("upload")
    p_upload.add_argument("path")
    p_upload.add_argument("--content-type", default=None)
    p_upload.set_defaults(func=cmd_upload)

    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
