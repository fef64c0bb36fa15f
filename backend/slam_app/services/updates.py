from typing import Any, Dict, Iterable, Optional


class PartialUpdate:
    """Carries only the fields a caller asked to change.

    A key present with ``None`` clears the field; an absent key leaves it
    untouched.
    """

    def __init__(self, fields: Optional[Dict[str, Any]] = None):
        self.fields = dict(fields or {})

    @classmethod
    def from_payload(cls, payload: Optional[Dict[str, Any]], allowed: Iterable[str]) -> 'PartialUpdate':
        payload = payload or {}
        return cls({k: payload[k] for k in allowed if k in payload})

    def __contains__(self, name: str) -> bool:
        return name in self.fields

    def __bool__(self) -> bool:
        return bool(self.fields)

    def get(self, name: str, default=None):
        return self.fields.get(name, default)

    def only(self, allowed: Iterable[str]) -> 'PartialUpdate':
        allowed = set(allowed)
        return PartialUpdate({k: v for k, v in self.fields.items() if k in allowed})

    def apply_to(self, obj) -> None:
        for name, value in self.fields.items():
            setattr(obj, name, value)

    def __repr__(self):
        return f"PartialUpdate({self.fields!r})"
