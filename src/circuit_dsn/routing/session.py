"""Summaries of routed Specctra session (``.ses``) files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..dsn import sexpr
from ..dsn.sexpr import SExprList


@dataclass(frozen=True)
class SessionSummary:
    """Counts of what a router produced.

    Attributes:
        session_name: Name given in the ``(session ...)`` header.
        routed_nets: Nets with at least one wire or via, in file order.
        wire_count: Total ``wire`` entries across all nets.
        via_count: Total ``via`` entries across all nets.
    """

    session_name: str
    routed_nets: list[str] = field(default_factory=list)
    wire_count: int = 0
    via_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_name": self.session_name,
            "routed_nets": list(self.routed_nets),
            "routed_net_count": len(self.routed_nets),
            "wire_count": self.wire_count,
            "via_count": self.via_count,
        }


def summarize_session(ses_text: str) -> SessionSummary:
    """Parse session text and count routed nets, wires and vias.

    Args:
        ses_text: Contents of a ``.ses`` file.

    Returns:
        SessionSummary for the file.

    Raises:
        ValueError: If the text is not a ``(session ...)`` expression.
        SExprParseError: If the text is not a valid S-expression.
    """
    root = sexpr.parse(ses_text)
    if not isinstance(root, list) or not root or root[0] != "session":
        raise ValueError("Not a Specctra session file: expected a (session ...) expression")
    session_name = str(root[1]) if len(root) > 1 and not isinstance(root[1], list) else ""

    routed_nets: list[str] = []
    wire_count = 0
    via_count = 0
    routes = sexpr.find_first(root, "routes")
    network_out = sexpr.find_first(routes, "network_out") if routes is not None else None
    nets: list[SExprList] = sexpr.find_children(network_out, "net") if network_out is not None else []
    for net in nets:
        wires = len(sexpr.find_children(net, "wire"))
        vias = len(sexpr.find_children(net, "via"))
        wire_count += wires
        via_count += vias
        if wires or vias:
            routed_nets.append(str(net[1]) if len(net) > 1 else "")

    return SessionSummary(
        session_name=session_name,
        routed_nets=routed_nets,
        wire_count=wire_count,
        via_count=via_count,
    )
