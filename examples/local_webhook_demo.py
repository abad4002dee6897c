#!/usr/bin/env python3
"""
Local webhook demo.

This example demonstrates:
1. A tiny HTTP server standing in for the webhook endpoint
2. The notifier watching a temporary directory
3. File creations, renames, moves and deletions turning into notifications

Usage:
    python examples/local_webhook_demo.py

The demo will:
- Create a temporary directory structure
- Start a local webhook receiver that prints every payload
- Start the notifier in the background
- Create/rename/move/delete files
- Stop after the last notification has been delivered
"""

import json
import sys
import tempfile
import threading
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.folderhook import NotifierConfig, NotifierProcess


class ReceiverHandler(BaseHTTPRequestHandler):
    """Prints every JSON body posted to it."""

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = json.loads(self.rfile.read(length))
        print("[WEBHOOK] Received notification:")
        print(json.dumps(body, indent=2))
        self.send_response(204)
        self.end_headers()

    def log_message(self, format, *args):
        pass


def main():
    server = HTTPServer(("127.0.0.1", 0), ReceiverHandler)
    threading.Thread(target=server.serve_forever, daemon=True).start()
    webhook_url = f"http://127.0.0.1:{server.server_port}/hook"
    print(f"[DEMO] Webhook receiver listening on {webhook_url}")

    with tempfile.TemporaryDirectory() as tmp:
        folder = Path(tmp)
        (folder / "archive").mkdir()

        config = NotifierConfig(
            folder=folder,
            webhook=webhook_url,
            polling_ms=500,
            web_link="https://files.example.com/view?path=",
        )

        with NotifierProcess(config) as notifier:
            notifier.start_async()
            time.sleep(1)

            print("[DEMO] Creating report.txt and notes.md")
            (folder / "report.txt").write_text("quarterly numbers")
            (folder / "notes.md").write_text("# notes")
            time.sleep(1.5)

            print("[DEMO] Renaming notes.md and moving report.txt")
            (folder / "notes.md").rename(folder / "notes-final.md")
            (folder / "report.txt").rename(folder / "archive" / "report.txt")
            time.sleep(1.5)

            print("[DEMO] Deleting notes-final.md")
            (folder / "notes-final.md").unlink()
            time.sleep(1.5)

    server.shutdown()
    print("[DEMO] Done")


if __name__ == "__main__":
    main()
