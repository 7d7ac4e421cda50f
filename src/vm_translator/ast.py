'''
dataclasses de instrucciones VM (unión cerrada) y segmentos de memoria
'''

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# ---- Segmentos ----

class Segment(str, Enum):
    """Segmento de memoria de la VM; el valor es el nombre en el código fuente."""
    LOCAL = "local"
    ARGUMENT = "argument"
    THIS = "this"
    THAT = "that"
    CONSTANT = "constant"
    STATIC = "static"
    POINTER = "pointer"
    TEMP = "temp"

# ---- Instrucciones aritmético-lógicas (sin operandos) ----
# 'line' es solo para diagnósticos y no participa en la igualdad.

@dataclass(frozen=True)
class Add:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Sub:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Neg:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Eq:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Gt:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Lt:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class And:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Or:
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Not:
    line: Optional[int] = field(default=None, compare=False)

# ---- Acceso a memoria ----

@dataclass(frozen=True)
class Push:
    """push <segmento> <índice>"""
    segment: Segment
    index: int
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Pop:
    """pop <segmento> <índice>; 'constant' no es un destino válido."""
    segment: Segment
    index: int
    line: Optional[int] = field(default=None, compare=False)

# ---- Control de flujo ----

@dataclass(frozen=True)
class Label:
    name: str
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Goto:
    name: str
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class IfGoto:
    """Saca el tope de la pila y salta si es distinto de cero."""
    name: str
    line: Optional[int] = field(default=None, compare=False)

# ---- Funciones ----

@dataclass(frozen=True)
class Function:
    name: str
    local_count: int
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Call:
    name: str
    arg_count: int
    line: Optional[int] = field(default=None, compare=False)

@dataclass(frozen=True)
class Return:
    line: Optional[int] = field(default=None, compare=False)

VMInstruction = Union[Add, Sub, Neg, Eq, Gt, Lt, And, Or, Not,
                      Push, Pop, Label, Goto, IfGoto, Function, Call, Return]
