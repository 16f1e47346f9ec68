#!/usr/bin/env python3
import hashlib
import hmac
import json
import os
import sys
import uuid

import requests

"""
Quick helper to send a fake GitHub webhook delivery to a running bot.

Usage:
  ./scripts/post.py http://localhost:8000/webhook issue_comment '{"action":"created", ...}'
  ./scripts/post.py http://localhost:8000/webhook ping

If the JSON argument is missing, an empty JSON object is sent. When
WEBHOOK_SECRET is set, the body is signed the way GitHub signs it.
"""

def main():
    if len(sys.argv) < 3:
        print("Usage: post.py URL EVENT [JSON]", file=sys.stderr)
        sys.exit(1)
    url, event = sys.argv[1], sys.argv[2]
    data = {}
    if len(sys.argv) >= 4:
        try:
            data = json.loads(sys.argv[3])
        except Exception as e:
            print(f"Invalid JSON: {e}", file=sys.stderr)
            sys.exit(2)
    body = json.dumps(data).encode("utf-8")
    headers = {
        "Content-Type": "application/json",
        "X-GitHub-Event": event,
        "X-GitHub-Delivery": str(uuid.uuid4()),
    }
    secret = os.environ.get("WEBHOOK_SECRET", "")
    if secret:
        digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
        headers["X-Hub-Signature-256"] = f"sha256={digest}"
    try:
        r = requests.post(url, data=body, headers=headers, timeout=15)
        print(f"Status: {r.status_code}")
        print(r.text)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(3)

if __name__ == "__main__":
    main()
