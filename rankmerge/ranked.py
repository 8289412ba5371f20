from collections.abc import Mapping
from typing import Any, Dict, Iterable, Tuple


def _member(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _score(member: str, value: Any) -> float:
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Score for member '{member}' is not numeric: {value!r}") from e


def _pairs(reply: Any) -> Iterable[Tuple[Any, Any]]:
    if isinstance(reply, Mapping):
        return list(reply.items())

    items = list(reply)
    if not items:
        return []
    if isinstance(items[0], (tuple, list)):
        return items

    # Flat reply: member, score, member, score, ...
    if len(items) % 2:
        raise ValueError(f"Flat sorted-set reply has odd length: {len(items)}")
    return list(zip(items[0::2], items[1::2]))


def ranked_result(reply: Any) -> Dict[str, float]:
    """
    Build an ordered member -> score mapping from a sorted-set reply.

    Accepts a mapping, a sequence of (member, score) pairs as returned by
    `ZRANGE ... WITHSCORES` clients, or a flat member/score list. Bytes are
    decoded as UTF-8 and scores converted to float. A repeated member keeps
    its first position with the last score seen.

    Raises:
        ValueError: On an odd-length flat reply or a non-numeric score
    """
    result: Dict[str, float] = {}
    for raw_member, raw_score in _pairs(reply):
        member = _member(raw_member)
        result[member] = _score(member, raw_score)
    return result

