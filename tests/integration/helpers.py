from __future__ import annotations

import base64

VALID_TOKEN = "integration-token"


def basic_authorization(token: str, password: str = "X") -> str:
    credentials = base64.b64encode(f"{token}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {credentials}"
