"""
FloatChat — ARGO ocean data explorer service
  - route_risk  : route hazard scoring on the normalized map plane
  - simulation  : seeded synthetic floats, hazards and weather
  - session     : explicit map overlay state
  - graph/nodes : LangGraph route safety check
  - llm/chat    : hosted-model analyst chat
"""

__version__ = "1.0.0"
