"""
FloatChat — API service
FastAPI entry point

Endpoints
─────────
GET  /                                     Health check
POST /api/v1/route/analyze                 Route hazard scoring (stateless)
POST /api/v1/route/safety-check            LangGraph safety check + analyst briefing
GET  /api/v1/route/graph                   LangGraph diagram (ASCII)
GET  /api/v1/map/ports                     Maritime hub catalogue
GET  /api/v1/map/regions                   Region view transforms
GET  /api/v1/map/hazards                   Generated hazard zones
GET  /api/v1/map/floats                    Generated ARGO float fleet
GET  /api/v1/map/weather                   Regional weather
POST /api/v1/map/sessions                  Open a map session
GET  /api/v1/map/sessions/{id}             Session snapshot (incl. route analysis)
POST /api/v1/map/sessions/{id}/mode        Switch exploration / routing
POST /api/v1/map/sessions/{id}/port        Select a start / end port
POST /api/v1/map/sessions/{id}/click       Drop a custom route endpoint
POST /api/v1/map/sessions/{id}/region      Focus a region
POST /api/v1/map/sessions/{id}/float       Focus a float
POST /api/v1/map/sessions/{id}/reset       Reset view or route
POST /api/v1/map/sessions/{id}/tick        Advance telemetry one interval
DELETE /api/v1/map/sessions/{id}           Close a map session
POST /api/v1/chat                          Chat reply from the ARGO analyst
POST /api/v1/chat/stream                   Same, streamed as SSE
GET  /api/v1/chat/suggestions              Suggested analyst queries
POST /api/v1/chat/sessions                 Open a server-side chat transcript
GET  /api/v1/chat/sessions/{id}            Chat transcript
POST /api/v1/chat/sessions/{id}/messages   Send a message (error bubble on failure)
DELETE /api/v1/chat/sessions/{id}          Close a chat transcript
GET  /api/v1/telemetry/log                 Simulated data-log lines
"""

import json
import logging
from typing import List, Literal, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from . import config, llm
from .catalog    import PORTS, REGION_CONFIG, find_port, is_region
from .chat       import ChatSession
from .graph      import build_route_safety_agent, initial_route_state
from .prompts    import SUGGESTED_QUERIES
from .route_risk import HazardZone, Point, evaluate_route
from .session    import MapSession
from .simulation import (
    filter_floats,
    generate_floats,
    generate_hazards,
    generate_regional_weather,
    make_rng,
    region_stats,
    telemetry_log_line,
)
from .store      import SessionStore

# ── Logging ───────────────────────────────────────────────────────────────────

config.configure_logging()
log = logging.getLogger("floatchat")

# ── FastAPI app ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="FloatChat",
    description=(
        "ARGO ocean data explorer: route hazard scoring, simulated float "
        "telemetry and an LLM-backed maritime analyst chat."
    ),
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Compile route safety graph once at startup
route_agent = build_route_safety_agent()
log.info("Route safety graph compiled successfully.")

# In-memory map and chat sessions, keyed by session id
_sessions:      "SessionStore[MapSession]"  = SessionStore("map",  config.MAX_SESSIONS)
_chat_sessions: "SessionStore[ChatSession]" = SessionStore("chat", config.MAX_SESSIONS)


# ── Pydantic models ───────────────────────────────────────────────────────────

class PointIn(BaseModel):
    x:     float = Field(ge=0, le=100)
    y:     float = Field(ge=0, le=100)
    label: Optional[str] = None


class HazardIn(BaseModel):
    id:        str
    name:      str
    top:       float
    left:      float
    radius:    float = Field(gt=0)
    intensity: Literal["moderate", "severe", "extreme"]
    type:      Literal["storm", "current", "ice"]


class RouteRequestIn(BaseModel):
    start:      Optional[PointIn] = None
    end:        Optional[PointIn] = None
    start_port: Optional[str] = None
    end_port:   Optional[str] = None
    hazards:    Optional[List[HazardIn]] = None   # None → generated from seed
    seed:       Optional[int] = None


class SafetyCheckIn(RouteRequestIn):
    use_llm: bool = True


class SessionIn(BaseModel):
    mode: Literal["exploration", "routing"] = "exploration"
    seed: Optional[int] = None


class ModeIn(BaseModel):
    mode: Literal["exploration", "routing"]


class PortSelectIn(BaseModel):
    which: Literal["start", "end"]
    name:  str = ""


class ClickIn(BaseModel):
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)


class RegionIn(BaseModel):
    region: str


class FloatSelectIn(BaseModel):
    float_id: str


class ChatMessageIn(BaseModel):
    role:     Literal["user", "model"]
    text:     str
    is_error: bool = False


class ChatRequestIn(BaseModel):
    message: str = Field(min_length=1)
    history: List[ChatMessageIn] = []


class ChatSendIn(BaseModel):
    text: str = Field(min_length=1)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _endpoint(point: Optional[PointIn], port_name: Optional[str], which: str) -> Optional[Point]:
    if port_name:
        port = find_port(port_name)
        if port is None:
            raise HTTPException(status_code=422, detail=f"Unknown {which} port: {port_name}")
        return Point(port.x, port.y)
    if point is None:
        return None
    return Point(point.x, point.y)


def _hazards(request: RouteRequestIn) -> List[HazardZone]:
    if request.hazards is None:
        return generate_hazards(request.seed)
    return [HazardZone(**h.model_dump()) for h in request.hazards]


def _session(session_id: str) -> MapSession:
    session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown map session: {session_id}")
    return session


def _check_region(region: str) -> None:
    if not is_region(region):
        raise HTTPException(status_code=422, detail=f"Unknown region: {region}")


def _snapshot(session_id: str, session: MapSession) -> dict:
    return {"session_id": session_id, **session.snapshot()}


# ── Endpoints: health ─────────────────────────────────────────────────────────

@app.get("/")
def health():
    return {
        "service":        "FloatChat",
        "version":        "1.0.0",
        "status":         "operational",
        "framework":      "LangGraph",
        "llm_configured": bool(config.api_key()),
        "capabilities": [
            "route_hazard_scoring",
            "route_safety_briefing",
            "simulated_float_telemetry",
            "regional_weather",
            "argo_analyst_chat",
        ],
    }


# ── Endpoints: route ──────────────────────────────────────────────────────────

@app.post("/api/v1/route/analyze")
def analyze_route(request: RouteRequestIn):
    """
    Score a straight route against hazard zones. Returns ``analysis: null``
    while either endpoint is unset.
    """
    start   = _endpoint(request.start, request.start_port, "start")
    end     = _endpoint(request.end,   request.end_port,   "end")
    hazards = _hazards(request)

    analysis = evaluate_route(start, end, hazards)
    return {
        "analysis": analysis.to_dict() if analysis else None,
        "hazards":  [h._asdict() for h in hazards],
    }


@app.post("/api/v1/route/safety-check")
def route_safety_check(request: SafetyCheckIn):
    """Run the route safety-check graph: hazard scoring + analyst briefing."""
    log.info(
        f"Safety check: start={request.start_port or request.start} "
        f"end={request.end_port or request.end}"
    )

    state = initial_route_state(
        start      = request.start.model_dump() if request.start else None,
        end        = request.end.model_dump()   if request.end   else None,
        start_port = request.start_port,
        end_port   = request.end_port,
        hazards    = [h.model_dump() for h in request.hazards] if request.hazards is not None else None,
        seed       = request.seed,
        use_llm    = request.use_llm,
    )

    try:
        result = route_agent.invoke(state)
    except Exception as exc:
        log.error(f"Route agent execution error: {exc}")
        raise HTTPException(status_code=500, detail=str(exc))

    if result["status"] == "error":
        raise HTTPException(status_code=400, detail={"errors": result.get("errors", [])})

    log.info(f"Safety check complete: status={result['analysis']['status']}")
    return {
        "status":       result["status"],
        "route_report": result["route_report"],
        "errors":       result.get("errors", []),
    }


@app.get("/api/v1/route/graph")
def get_graph_diagram():
    """Return an ASCII representation of the LangGraph workflow."""
    diagram = """
    FloatChat — Route Safety Check (LangGraph)
    ═══════════════════════════════════════════

    [START]
       │
       ▼
    ┌─────────────────────────────────┐
    │  parse_route_request            │  Resolve ports · validate plane bounds
    └──────────────┬──────────────────┘
                   │ error ──────────────────────────► [END]
                   ▼
    ┌─────────────────────────────────┐
    │  assess_route_hazards           │  11-point sampling vs hazard radii
    └──────────────┬──────────────────┘
                   ▼
    ┌─────────────────────────────────┐
    │  llm_route_briefing             │  Analyst verdict (static fallback)
    └──────────────┬──────────────────┘
                   ▼
    ┌─────────────────────────────────┐
    │  generate_route_report          │  Score · sea state · verdict
    └──────────────┬──────────────────┘
                   ▼
                [END]
    """
    return {"diagram": diagram}


# ── Endpoints: map data ───────────────────────────────────────────────────────

@app.get("/api/v1/map/ports")
def get_ports():
    return {"ports": [p._asdict() for p in PORTS]}


@app.get("/api/v1/map/regions")
def get_regions():
    return {"regions": REGION_CONFIG}


@app.get("/api/v1/map/hazards")
def get_hazards(seed: Optional[int] = Query(None)):
    return {"hazards": [h._asdict() for h in generate_hazards(seed)]}


@app.get("/api/v1/map/floats")
def get_floats(seed: Optional[int] = Query(None), region: str = Query("All")):
    _check_region(region)
    floats = generate_floats(seed)
    return {
        "region":       region,
        "floats":       [f._asdict() for f in filter_floats(floats, region)],
        "region_stats": region_stats(floats),
    }


@app.get("/api/v1/map/weather")
def get_weather(region: str = Query("All"), seed: Optional[int] = Query(None)):
    _check_region(region)
    return {"region": region, "weather": generate_regional_weather(region, seed)._asdict()}


# ── Endpoints: map sessions ───────────────────────────────────────────────────

@app.post("/api/v1/map/sessions")
def create_session(request: SessionIn):
    session    = MapSession(mode=request.mode, seed=request.seed)
    session_id = _sessions.add(session)
    log.info(f"Map session opened: {session_id} mode={request.mode}")
    return _snapshot(session_id, session)


@app.get("/api/v1/map/sessions/{session_id}")
def get_session(session_id: str):
    return _snapshot(session_id, _session(session_id))


@app.delete("/api/v1/map/sessions/{session_id}")
def close_session(session_id: str):
    if _sessions.pop(session_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown map session: {session_id}")
    log.info(f"Map session closed: {session_id}")
    return {"session_id": session_id, "closed": True}


@app.post("/api/v1/map/sessions/{session_id}/mode")
def set_mode(session_id: str, request: ModeIn):
    session = _session(session_id)
    session.set_mode(request.mode)
    return _snapshot(session_id, session)


@app.post("/api/v1/map/sessions/{session_id}/port")
def select_port(session_id: str, request: PortSelectIn):
    session = _session(session_id)
    session.select_port(request.which, request.name)
    return _snapshot(session_id, session)


@app.post("/api/v1/map/sessions/{session_id}/click")
def click_map(session_id: str, request: ClickIn):
    session = _session(session_id)
    accepted = session.click_map(request.x, request.y)
    return {"accepted": accepted, **_snapshot(session_id, session)}


@app.post("/api/v1/map/sessions/{session_id}/region")
def select_region(session_id: str, request: RegionIn):
    _check_region(request.region)
    session = _session(session_id)
    session.select_region(request.region)
    return _snapshot(session_id, session)


@app.post("/api/v1/map/sessions/{session_id}/float")
def select_float(session_id: str, request: FloatSelectIn):
    session = _session(session_id)
    if not session.select_float(request.float_id):
        raise HTTPException(status_code=404, detail=f"Float not selectable: {request.float_id}")
    return _snapshot(session_id, session)


@app.post("/api/v1/map/sessions/{session_id}/reset")
def reset_session(session_id: str):
    session = _session(session_id)
    session.reset()
    return _snapshot(session_id, session)


@app.post("/api/v1/map/sessions/{session_id}/tick")
def tick_session(session_id: str):
    session = _session(session_id)
    session.tick()
    return _snapshot(session_id, session)


# ── Endpoints: chat ───────────────────────────────────────────────────────────

@app.post("/api/v1/chat")
def chat(request: ChatRequestIn):
    """Relay a user message (with prior turns) to the ARGO analyst model."""
    log.info(f"Chat request: {len(request.history)} prior turns")
    try:
        reply = llm.send_message(request.message, request.history)
    except llm.ChatConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except llm.ChatLinkError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return {"role": "model", "text": reply}


@app.post("/api/v1/chat/stream")
async def chat_stream(request: ChatRequestIn):
    """
    Same as /api/v1/chat, streamed token-by-token as SSE
    ``data: {"token": "..."}`` events, terminated by ``data: [DONE]``.
    """
    async def generator():
        try:
            async for token in llm.stream_message(request.message, request.history):
                if token:
                    yield f"data: {json.dumps({'token': token})}\n\n"
        except (llm.ChatConfigurationError, llm.ChatLinkError) as exc:
            yield f"data: {json.dumps({'error': str(exc)})}\n\n"
        yield "data: [DONE]\n\n"

    return StreamingResponse(generator(), media_type="text/event-stream")


@app.get("/api/v1/chat/suggestions")
def get_chat_suggestions():
    return {"suggestions": SUGGESTED_QUERIES}


def _chat_session(session_id: str) -> ChatSession:
    session = _chat_sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown chat session: {session_id}")
    return session


def _transcript(session_id: str, session: ChatSession) -> dict:
    return {
        "session_id":  session_id,
        "messages":    session.transcript(),
        "suggestions": SUGGESTED_QUERIES,
    }


@app.post("/api/v1/chat/sessions")
def create_chat_session():
    """Open a server-side transcript, starting with the ARGO link greeting."""
    session    = ChatSession()
    session_id = _chat_sessions.add(session)
    log.info(f"Chat session opened: {session_id}")
    return _transcript(session_id, session)


@app.get("/api/v1/chat/sessions/{session_id}")
def get_chat_session(session_id: str):
    return _transcript(session_id, _chat_session(session_id))


@app.post("/api/v1/chat/sessions/{session_id}/messages")
def post_chat_message(session_id: str, request: ChatSendIn):
    """
    Append a user message and the analyst reply. An upstream failure is not
    an HTTP error here: the reply is the error bubble with ``is_error: true``.
    """
    session = _chat_session(session_id)
    reply   = session.send(request.text)
    if reply is None:
        raise HTTPException(status_code=422, detail="Message text is blank.")
    return {"reply": reply._asdict(), **_transcript(session_id, session)}


@app.delete("/api/v1/chat/sessions/{session_id}")
def close_chat_session(session_id: str):
    if _chat_sessions.pop(session_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown chat session: {session_id}")
    log.info(f"Chat session closed: {session_id}")
    return {"session_id": session_id, "closed": True}


# ── Endpoints: telemetry ──────────────────────────────────────────────────────

@app.get("/api/v1/telemetry/log")
def get_telemetry_log(count: int = Query(20, ge=1, le=100), seed: Optional[int] = Query(None)):
    rng = make_rng(seed)
    return {"lines": [telemetry_log_line(rng) for _ in range(count)]}


# ── Entry point ───────────────────────────────────────────────────────────────

def run():
    uvicorn.run("floatchat.main:app", host="0.0.0.0", port=config.PORT, reload=False)


if __name__ == "__main__":
    run()
