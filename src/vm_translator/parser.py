# src/vm_translator/parser.py
from __future__ import annotations
import re
from typing import Callable, Dict, List, Optional, Type

from .lexer import source_lines, split_words
from .ast import (
    Segment, VMInstruction,
    Add, Sub, Neg, Eq, Gt, Lt, And, Or, Not,
    Push, Pop, Label, Goto, IfGoto, Function, Call, Return,
)
from .segments import segment_from_name
from .diagnostics import TranslationError

UINT_RE = re.compile(r"^\d+$")

# Instrucciones sin operandos
NULLARY: Dict[str, Type] = {
    "add": Add, "sub": Sub, "neg": Neg,
    "eq": Eq, "gt": Gt, "lt": Lt,
    "and": And, "or": Or, "not": Not,
    "return": Return,
}

def _expect_arity(mnemonic: str, args: List[str], n: int, form: str) -> None:
    if len(args) < n:
        raise TranslationError.syntax(f"Falta operando en '{mnemonic}'", hint=f"forma: {form}")
    if len(args) > n:
        raise TranslationError.syntax(f"Operandos de más en '{mnemonic}': {' '.join(args[n:])}",
                                      hint=f"forma: {form}")

def _parse_uint(token: str, what: str) -> int:
    if not UINT_RE.match(token):
        raise TranslationError.syntax(f"{what} inválido: '{token}' (se esperaba entero no negativo)")
    return int(token)

def _parse_segment(token: str) -> Segment:
    try:
        return segment_from_name(token)
    except ValueError as ex:
        raise TranslationError.syntax(str(ex)) from None

def _memory(cls: Type, mnemonic: str, args: List[str], line: Optional[int]):
    _expect_arity(mnemonic, args, 2, f"{mnemonic} <segmento> <índice>")
    segment = _parse_segment(args[0])
    index = _parse_uint(args[1], "Índice")
    if cls is Pop and segment is Segment.CONSTANT:
        raise TranslationError.semantic("'constant' no es un destino válido para pop")
    return cls(segment, index, line=line)

def _branch(cls: Type, mnemonic: str, args: List[str], line: Optional[int]):
    _expect_arity(mnemonic, args, 1, f"{mnemonic} <etiqueta>")
    return cls(args[0], line=line)

def _routine(cls: Type, mnemonic: str, args: List[str], line: Optional[int]):
    _expect_arity(mnemonic, args, 2, f"{mnemonic} <nombre> <n>")
    return cls(args[0], _parse_uint(args[1], "Contador"), line=line)

_WITH_OPERANDS: Dict[str, Callable] = {
    "push": lambda m, a, ln: _memory(Push, m, a, ln),
    "pop": lambda m, a, ln: _memory(Pop, m, a, ln),
    "label": lambda m, a, ln: _branch(Label, m, a, ln),
    "goto": lambda m, a, ln: _branch(Goto, m, a, ln),
    "if-goto": lambda m, a, ln: _branch(IfGoto, m, a, ln),
    "function": lambda m, a, ln: _routine(Function, m, a, ln),
    "call": lambda m, a, ln: _routine(Call, m, a, ln),
}

def parse_instruction(line: str, *, lineno: Optional[int] = None,
                      filename: Optional[str] = None) -> VMInstruction:
    """Convierte una línea ya limpia (sin comentario ni espacios de borde) en su instrucción.

    Lanza TranslationError si el mnemónico o el segmento no existen, si falta o sobra
    un operando, si un índice no es entero no negativo, o ante 'pop constant'.
    """
    words = split_words(line)
    if not words:
        raise TranslationError.syntax("Línea vacía", line=lineno, file=filename)
    mnemonic, args = words[0], words[1:]
    try:
        if mnemonic in NULLARY:
            _expect_arity(mnemonic, args, 0, mnemonic)
            return NULLARY[mnemonic](line=lineno)
        if mnemonic in _WITH_OPERANDS:
            return _WITH_OPERANDS[mnemonic](mnemonic, args, lineno)
        raise TranslationError.syntax(f"Instrucción desconocida: '{mnemonic}'")
    except TranslationError as ex:
        raise ex.located(line=lineno, file=filename) from None

def parse(text: str, *, filename: Optional[str] = None) -> List[VMInstruction]:
    """
    Devuelve la lista de instrucciones de una unidad de traducción.

    Reglas:
      - Comentarios: '//' hasta fin de línea.
      - Líneas vacías o solo con comentario se ignoran.
      - El primer error aborta el análisis (TranslationError con línea y archivo).
    """
    return [parse_instruction(core, lineno=lineno, filename=filename)
            for lineno, core in source_lines(text)]
