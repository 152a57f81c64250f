from __future__ import annotations
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError
from threading import Lock
from typing import Dict, List, Optional, Tuple
import asyncio

from core.events import TIMER_EVENTS, TimerNotice
from core.state import state_dump
from core.timing.timer_engine import TimerEngine
from sdk import SDK_CONFIG
from sdk.ids import is_valid_timer_id, new_ulid
from sdk.registry import UnknownStorageError

app = FastAPI(title="lapwatch API")

OPERATIONS = ("start", "stop", "pause", "resume", "toggle", "reset", "lap")
LABELLED = ("start", "resume", "toggle")
WS_PUSH_INTERVAL = 0.25


class TimerCreate(BaseModel):
    id: Optional[str] = None
    show_ms: Optional[bool] = None
    update_interval: Optional[int] = None
    storage: Optional[str] = None  # persist under `id` when set


class OperationBody(BaseModel):
    label: Optional[str] = None


class TimerHub:
    """Engines served by this process, by id."""
    def __init__(self):
        self._engines: Dict[str, TimerEngine] = {}
        self._lock = Lock()

    def create(self, req: TimerCreate) -> Tuple[str, TimerEngine]:
        timer_id = req.id or new_ulid()
        if not is_valid_timer_id(timer_id):
            raise HTTPException(status_code=422, detail=f"invalid timer id {timer_id!r}")
        with self._lock:
            if timer_id in self._engines:
                raise HTTPException(status_code=409, detail=f"timer {timer_id!r} already exists")
            options = SDK_CONFIG.timer_options(
                persist_id=timer_id if req.storage else None,
                storage=req.storage,
                show_ms=req.show_ms,
            )
            overrides = {"update_interval": req.update_interval} if req.update_interval is not None else {}
            try:
                engine = TimerEngine(options, **overrides)
            except UnknownStorageError as exc:
                raise HTTPException(status_code=422, detail=exc.args[0])
            except ValidationError as exc:
                raise HTTPException(status_code=422, detail=exc.errors(include_url=False))
            self._engines[timer_id] = engine
        return timer_id, engine

    def get(self, timer_id: str) -> TimerEngine:
        engine = self._engines.get(timer_id)
        if engine is None:
            raise HTTPException(status_code=404, detail=f"timer {timer_id!r} not found")
        return engine

    def find(self, timer_id: str) -> Optional[TimerEngine]:
        return self._engines.get(timer_id)

    def remove(self, timer_id: str) -> None:
        with self._lock:
            engine = self._engines.pop(timer_id, None)
        if engine is None:
            raise HTTPException(status_code=404, detail=f"timer {timer_id!r} not found")
        engine.close()

    def items(self):
        with self._lock:
            return list(self._engines.items())

    def clear(self) -> None:
        with self._lock:
            engines, self._engines = list(self._engines.values()), {}
        for engine in engines:
            engine.close()


HUB = TimerHub()


@app.post("/timers", status_code=201)
def create_timer(req: TimerCreate):
    timer_id, engine = HUB.create(req)
    return {"id": timer_id, "state": state_dump(engine.snapshot())}


@app.get("/timers")
def list_timers():
    items: List[dict] = []
    for timer_id, engine in HUB.items():
        s = engine.snapshot()
        items.append({"id": timer_id, "status": s.status, "durationString": s.duration_string})
    return {"timers": items}


@app.get("/timers/{timer_id}")
def get_timer(timer_id: str):
    return state_dump(HUB.get(timer_id).snapshot())


@app.post("/timers/{timer_id}/{op}")
def run_operation(timer_id: str, op: str, body: Optional[OperationBody] = None):
    if op not in OPERATIONS:
        raise HTTPException(status_code=404, detail=f"unknown operation {op!r}")
    engine = HUB.get(timer_id)
    args = (body.label,) if body is not None and op in LABELLED else ()
    applied = getattr(engine, op)(*args)
    return {"applied": applied, "state": state_dump(engine.snapshot())}


@app.delete("/timers/{timer_id}", status_code=204)
def delete_timer(timer_id: str):
    HUB.remove(timer_id)


async def _until_disconnect(ws: WebSocket) -> None:
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            return


@app.websocket("/ws/timers/{timer_id}")
async def ws_timer(ws: WebSocket, timer_id: str):
    await ws.accept()
    engine = HUB.find(timer_id)
    if engine is None:
        await ws.send_json({"type": "error", "msg": "not found"})
        await ws.close()
        return

    loop = asyncio.get_running_loop()
    events: asyncio.Queue = asyncio.Queue()
    handlers = {ev: (lambda ev=ev: loop.call_soon_threadsafe(events.put_nowait, ev)) for ev in TIMER_EVENTS}
    for ev, cb in handlers.items():
        engine.on(ev, cb)

    closed = asyncio.ensure_future(_until_disconnect(ws))
    last = state_dump(engine.snapshot())
    try:
        await ws.send_text(TimerNotice(kind="snapshot", timer=timer_id, data=last).model_dump_json())
        while not closed.done():
            try:
                kind = await asyncio.wait_for(events.get(), timeout=WS_PUSH_INTERVAL)
            except asyncio.TimeoutError:
                kind = "snapshot"
            cur = state_dump(engine.snapshot())
            if kind == "snapshot" and cur == last:
                continue
            last = cur
            await ws.send_text(TimerNotice(kind=kind, timer=timer_id, data=cur).model_dump_json())
    except WebSocketDisconnect:
        return
    finally:
        closed.cancel()
        for ev, cb in handlers.items():
            engine.off(ev, cb)
