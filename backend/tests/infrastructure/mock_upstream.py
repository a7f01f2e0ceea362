"""Mock Upstream — scripted stand-in for the employee service behind httpx.MockTransport.

Invariants:
    - Replies queued per (method, path) are consumed in order; the last one repeats
    - Every request is recorded in MockUpstream.calls (method, decoded path, raw path,
      decoded JSON body); routes match on the decoded path
    - Unscripted routes answer 501 so a missing setup fails loudly

Design Decisions:
    - Replies stored as descriptions and built per request: httpx mutates Response objects
      when it binds them to a request, so instances are never reused
    - Builders emit the exact wire shapes (snake_case keys, status sentences)
"""

import json
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

import httpx

HANDLED = "Successfully processed request."
FAILED = "Failed to process request."


@dataclass
class Reply:
    """One scripted upstream response."""
    status_code: int = 200
    json: Any = None
    text: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def build(self) -> httpx.Response:
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json, headers=self.headers)
        return httpx.Response(self.status_code, text=self.text or "", headers=self.headers)


class MockUpstream:
    """Routes requests to queued replies and records every call."""

    def __init__(self):
        self._routes: dict[tuple[str, str], list[Reply]] = {}
        self.calls: list[dict] = []

    def on(self, method: str, path: str, *replies: Reply) -> "MockUpstream":
        self._routes.setdefault((method.upper(), path), []).extend(replies)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append(
            {
                "method": request.method,
                "path": request.url.path,
                "raw_path": request.url.raw_path.decode("ascii"),
                "json": body,
            },
        )
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(
                501, text=f"MockUpstream: no reply for {request.method} {request.url.path}",
            )
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        return reply.build()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, method: str, path: str | None = None) -> list[dict]:
        return [
            c for c in self.calls
            if c["method"] == method and (path is None or c["path"] == path)
        ]


# -- Builder helpers -----------------------------------------------------------


def employee_json(
    name: str,
    salary: int = 100_000,
    age: int = 30,
    title: str = "Engineer",
    id: str | None = None,
) -> dict:
    """Upstream employee record with snake_case wire keys."""
    return {
        "id": id or str(uuid4()),
        "employee_name": name,
        "employee_salary": salary,
        "employee_age": age,
        "employee_title": title,
        "employee_email": f"{name.lower().replace(' ', '.')}@company.com",
    }


def handled(data: Any, status_code: int = 200) -> Reply:
    """Successful envelope (error omitted, as the upstream writes it)."""
    return Reply(status_code, json={"data": data, "status": HANDLED})


def failed(error: str = "Something went wrong", status_code: int = 200) -> Reply:
    """Logical-failure envelope, delivered with a 2xx by default."""
    return Reply(status_code, json={"status": FAILED, "error": error})


def rate_limited(retry_after: int | None = None) -> Reply:
    headers = {"Retry-After": str(retry_after)} if retry_after is not None else {}
    return Reply(429, text="Too Many Requests", headers=headers)


def http_error(status_code: int, text: str = "upstream exploded") -> Reply:
    return Reply(status_code, text=text)
