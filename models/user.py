from dataclasses import dataclass


@dataclass
class User:
    id: int
    name: str
    color: str = "#888888"
