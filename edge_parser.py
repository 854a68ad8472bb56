"""
Edge token parser.

Turns text such as "A->B=4, B-C=2" into Edge records. Each token is parsed
on its own: a malformed token is dropped and never stops the batch.
"""

from enum import Enum
from typing import Iterable, List, Optional
import re

from graph import Edge


class GraphMode(Enum):
    """
    Default direction for the neutral "-" connector.

    The explicit connectors (->, >, →) are directed in either mode.
    """

    DIRECTED = "directed"
    UNDIRECTED = "undirected"


DIRECTED_CONNECTORS = ("->", ">", "→")
NEUTRAL_CONNECTOR = "-"

# Left-most connector wins; at the same position "->" is tried before "-".
_CONNECTOR_RE = re.compile(
    r"(.*?)(" + "|".join(re.escape(c) for c in DIRECTED_CONNECTORS + (NEUTRAL_CONNECTOR,)) + r")(.*)",
    re.DOTALL,
)
# ASCII digits only; int() would also accept other Unicode digits.
_LEADING_INT_RE = re.compile(r"\s*([+-]?[0-9]+)")
_TOKEN_SPLIT_RE = re.compile(r"[,\n]+")

DEFAULT_WEIGHT = 1


def parse_weight(raw: Optional[str]) -> int:
    """
    Leading-integer parse of a weight string.

    Missing, non-numeric and non-positive weights all become 1.
    """
    if not raw:
        return DEFAULT_WEIGHT
    match = _LEADING_INT_RE.match(raw)
    if not match:
        return DEFAULT_WEIGHT
    weight = int(match.group(1))
    return weight if weight > 0 else DEFAULT_WEIGHT


def parse_edge_token(token: str, mode: GraphMode) -> Optional[Edge]:
    """
    Parse one token like "A->B=3" under the given graph mode.

    Returns None when the token has no connector or an empty endpoint.
    """
    if not token:
        return None

    parts = [p.strip() for p in token.split("=")]
    left = parts[0]
    weight = parse_weight(parts[1] if len(parts) > 1 else None)

    match = _CONNECTOR_RE.match(left)
    if not match:
        return None
    raw_from, op, raw_to = match.group(1).strip(), match.group(2), match.group(3).strip()
    if not raw_from or not raw_to:
        return None

    directed = op in DIRECTED_CONNECTORS or mode is GraphMode.DIRECTED
    return Edge(raw_from.upper(), raw_to.upper(), weight, directed)


def split_tokens(text: str) -> List[str]:
    """Split edge text on commas and newlines, dropping blank tokens."""
    return [t.strip() for t in _TOKEN_SPLIT_RE.split(text or "") if t.strip()]


def parse_tokens(tokens: Iterable[str], mode: GraphMode) -> List[Edge]:
    edges: List[Edge] = []
    for token in tokens:
        edge = parse_edge_token(token, mode)
        if edge is not None:
            edges.append(edge)
    return edges


def parse_edges(text: str, mode: GraphMode) -> List[Edge]:
    """Parse a comma/newline separated batch of edge tokens."""
    return parse_tokens(split_tokens(text), mode)
