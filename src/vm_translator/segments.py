'''
mapeos segmento↔puntero Hack, validaciones, utilidades de direccionamiento
'''

from __future__ import annotations
from typing import Dict

from .ast import Segment

# Punteros mapeados en memoria para los segmentos con base+desplazamiento
SEGMENT_POINTER: Dict[Segment, str] = {
    Segment.LOCAL: "LCL",
    Segment.ARGUMENT: "ARG",
    Segment.THIS: "THIS",
    Segment.THAT: "THAT",
}

# pointer 0/1 escribe/lee THIS/THAT directamente
POINTER_CELLS = ("THIS", "THAT")

TEMP_BASE = 5
TEMP_SIZE = 8

# Mayor inmediato que admite una instrucción A (15 bits)
MAX_CONSTANT = 32767

_NAME_TO_SEGMENT: Dict[str, Segment] = {s.value: s for s in Segment}

def is_segment(token: str) -> bool:
    """Indica si el token es el nombre de un segmento conocido."""
    return token in _NAME_TO_SEGMENT

def segment_from_name(token: str) -> Segment:
    """Devuelve el Segment de un nombre fuente o lanza ValueError."""
    try:
        return _NAME_TO_SEGMENT[token]
    except KeyError:
        raise ValueError(f"Segmento inválido: {token}") from None

def seg_ptr(segment: Segment) -> str:
    """Nombre del puntero base (LCL, ARG, THIS, THAT) o ValueError si el segmento no tiene."""
    if segment not in SEGMENT_POINTER:
        raise ValueError(f"El segmento '{segment.value}' no tiene puntero base")
    return SEGMENT_POINTER[segment]

def pointer_cell(index: int) -> str:
    if not 0 <= index < len(POINTER_CELLS):
        raise ValueError(f"pointer solo admite índice 0 o 1, no {index}")
    return POINTER_CELLS[index]

def temp_address(index: int) -> int:
    """Dirección absoluta de temp[index] (RAM[5..12])."""
    if not 0 <= index < TEMP_SIZE:
        raise ValueError(f"temp solo admite índices 0..{TEMP_SIZE - 1}, no {index}")
    return TEMP_BASE + index

def static_symbol(namespace: str, index: int) -> str:
    """Símbolo '<unidad>.<índice>'; el ensamblador le asigna una celda libre."""
    return f"{namespace}.{index}"
