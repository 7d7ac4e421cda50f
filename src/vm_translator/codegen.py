# src/vm_translator/codegen.py
from __future__ import annotations
from typing import Iterable, List, Optional, Tuple

from .ast import (
    Segment, VMInstruction,
    Add, Sub, Neg, Eq, Gt, Lt, And, Or, Not,
    Push, Pop, Label, Goto, IfGoto, Function, Call, Return,
)
from .segments import seg_ptr, pointer_cell, temp_address, static_symbol, MAX_CONSTANT
from .diagnostics import TranslationError

# ---------------- Constantes del protocolo ----------------

STACK_BASE = 256
ENTRY_POINT = "Sys.init"
FRAME_SIZE = 5          # dirección de retorno + LCL, ARG, THIS, THAT

# Registros de trabajo de return (R13/R14 no pertenecen a ningún segmento)
FRAME_REG = "R13"
RET_REG = "R14"

# ---------------- Secuencias fijas ----------------

def _binary(op: str) -> Tuple[str, ...]:
    return ("@SP", "AM=M-1", "D=M", "A=A-1", f"M={op}")

def _unary(op: str) -> Tuple[str, ...]:
    return ("@SP", "A=M-1", f"M={op}M")

ADD = _binary("D+M")
SUB = _binary("M-D")
AND = _binary("D&M")
OR  = _binary("D|M")
NEG = _unary("-")
NOT = _unary("!")

# D -> *SP, SP++
PUSH_D = ("@SP", "M=M+1", "A=M-1", "M=D")
# SP--, D <- *SP
POP_D = ("@SP", "AM=M-1", "D=M")

JUMPS = {Eq: "JEQ", Gt: "JGT", Lt: "JLT"}

# Instrucciones entre el '@destino' del salto de comparación y su destino:
# @dest, D;Jxx, @SP, A=M-1, M=0
COMPARE_SKIP = 5

RETURN = (
    # frame = LCL
    "@LCL", "D=M", f"@{FRAME_REG}", "M=D",
    # ret = *(frame - 5), antes de que *ARG = pop() pueda pisarla
    f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{RET_REG}", "M=D",
    # *ARG = pop(); SP = ARG + 1
    *POP_D, "@ARG", "A=M", "M=D",
    "@ARG", "D=M+1", "@SP", "M=D",
    # THAT, THIS, ARG, LCL = *(frame-1) .. *(frame-4)
    f"@{FRAME_REG}", "AM=M-1", "D=M", "@THAT", "M=D",
    f"@{FRAME_REG}", "AM=M-1", "D=M", "@THIS", "M=D",
    f"@{FRAME_REG}", "AM=M-1", "D=M", "@ARG", "M=D",
    f"@{FRAME_REG}", "AM=M-1", "D=M", "@LCL", "M=D",
    # goto ret
    f"@{RET_REG}", "A=M", "0;JMP",
)

# ---------------- Generador ----------------

class CodeWriter:
    """Traduce instrucciones VM a ensamblador Hack, una por una.

    Mantiene el estado de una traducción de programa completo:
      - namespace: nombre de la unidad actual, prefijo de los símbolos static.
      - emitted_count: instrucciones no-etiqueta emitidas (= dirección ROM de la siguiente).
      - call_site_counter: sufijo único de las etiquetas de retorno.
    Ambos contadores solo crecen; se comparten entre todas las unidades de un directorio.
    """

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace
        self.asm: List[str] = []
        self.emitted_count = 0
        self.call_site_counter = 0

    # ---- emisión ----

    def _emit(self, instr: str) -> None:
        self.asm.append(instr)
        if not instr.startswith("("):
            self.emitted_count += 1

    def _emit_all(self, instrs: Iterable[str]) -> None:
        for instr in instrs:
            self._emit(instr)

    def _label(self, name: str) -> None:
        self._emit(f"({name})")

    def _address_after(self, n: int) -> int:
        """Dirección ROM de la instrucción n posiciones después de la próxima a emitir."""
        return self.emitted_count + n

    # ---- API pública ----

    def set_namespace(self, namespace: str) -> None:
        """Cambia de unidad de traducción; los contadores no se reinician."""
        self.namespace = namespace

    def translate(self, instruction: VMInstruction) -> None:
        try:
            self._dispatch(instruction)
        except TranslationError as ex:
            raise ex.located(line=instruction.line) from None

    def translate_all(self, instructions: Iterable[VMInstruction]) -> None:
        for instruction in instructions:
            self.translate(instruction)

    def write_bootstrap(self) -> None:
        """SP = 256; call Sys.init 0"""
        self._emit_all((f"@{STACK_BASE}", "D=A", "@SP", "M=D"))
        self._call(ENTRY_POINT, 0)

    # ---- despacho ----

    def _dispatch(self, ins: VMInstruction) -> None:
        if isinstance(ins, Add): self._emit_all(ADD)
        elif isinstance(ins, Sub): self._emit_all(SUB)
        elif isinstance(ins, Neg): self._emit_all(NEG)
        elif isinstance(ins, And): self._emit_all(AND)
        elif isinstance(ins, Or): self._emit_all(OR)
        elif isinstance(ins, Not): self._emit_all(NOT)
        elif isinstance(ins, (Eq, Gt, Lt)): self._compare(JUMPS[type(ins)])
        elif isinstance(ins, Push): self._push(ins.segment, ins.index)
        elif isinstance(ins, Pop): self._pop(ins.segment, ins.index)
        elif isinstance(ins, Label): self._label(ins.name)
        elif isinstance(ins, Goto): self._emit_all((f"@{ins.name}", "0;JMP"))
        elif isinstance(ins, IfGoto): self._emit_all((*POP_D, f"@{ins.name}", "D;JNE"))
        elif isinstance(ins, Function): self._function(ins.name, ins.local_count)
        elif isinstance(ins, Call): self._call(ins.name, ins.arg_count)
        elif isinstance(ins, Return): self._emit_all(RETURN)
        else:
            raise TypeError(f"Instrucción VM no soportada: {ins!r}")

    # ---- aritmética / lógica ----

    def _compare(self, jump: str) -> None:
        # *(SP-2) = -1; si x-y no cumple la condición, se corrige a 0
        self._emit_all(("@SP", "AM=M-1", "D=M", "A=A-1", "D=M-D", "M=-1"))
        self._emit(f"@{self._address_after(COMPARE_SKIP)}")
        self._emit_all((f"D;{jump}", "@SP", "A=M-1", "M=0"))

    # ---- segmentos ----

    def _push(self, segment: Segment, index: int) -> None:
        if segment is Segment.CONSTANT:
            self._emit_all((f"@{self._immediate(index, 'Constante')}", "D=A"))
        elif segment is Segment.TEMP:
            self._emit_all((f"@{self._checked(temp_address, index)}", "D=M"))
        elif segment is Segment.POINTER:
            self._emit_all((f"@{self._checked(pointer_cell, index)}", "D=M"))
        elif segment is Segment.STATIC:
            self._emit_all((f"@{static_symbol(self.namespace, index)}", "D=M"))
        else:
            self._emit_all((f"@{self._immediate(index, 'Índice')}", "D=A",
                            f"@{self._checked(seg_ptr, segment)}", "A=D+M", "D=M"))
        self._emit_all(PUSH_D)

    def _pop(self, segment: Segment, index: int) -> None:
        if segment is Segment.CONSTANT:
            raise TranslationError.semantic("'constant' no es un destino válido para pop")
        if segment is Segment.TEMP:
            target = temp_address
        elif segment is Segment.POINTER:
            target = pointer_cell
        elif segment is Segment.STATIC:
            self._emit_all((*POP_D, f"@{static_symbol(self.namespace, index)}", "M=D"))
            return
        else:
            # D = base+idx; D = dir+valor; A = dir; *dir = valor (sin registro auxiliar)
            base = self._checked(seg_ptr, segment)
            self._emit_all((f"@{self._immediate(index, 'Índice')}", "D=A", f"@{base}", "D=D+M",
                            "@SP", "AM=M-1", "D=D+M", "A=D-M", "M=D-A"))
            return
        self._emit_all((*POP_D, f"@{self._checked(target, index)}", "M=D"))

    @staticmethod
    def _checked(fn, arg):
        try:
            return fn(arg)
        except ValueError as ex:
            raise TranslationError.semantic(str(ex)) from None

    @staticmethod
    def _immediate(value: int, what: str) -> int:
        # una instrucción A solo carga 15 bits
        if value > MAX_CONSTANT:
            raise TranslationError.semantic(
                f"{what} fuera de rango: {value}", hint=f"máximo {MAX_CONSTANT}")
        return value

    # ---- funciones ----

    def _function(self, name: str, local_count: int) -> None:
        self._label(name)
        for _ in range(local_count):
            self._emit_all(("@SP", "M=M+1", "A=M-1", "M=0"))

    def _call(self, name: str, arg_count: int) -> None:
        offset = self._immediate(FRAME_SIZE + arg_count, "Número de argumentos")
        ret_label = f"{name}$ret.{self.call_site_counter}"
        self._emit_all((f"@{ret_label}", "D=A", *PUSH_D))
        for ptr in ("LCL", "ARG", "THIS", "THAT"):
            self._emit_all((f"@{ptr}", "D=M", *PUSH_D))
        # ARG = SP - (5 + nargs); LCL = SP
        self._emit_all((f"@{offset}", "D=A", "@SP", "D=M-D", "@ARG", "M=D"))
        self._emit_all(("@SP", "D=M", "@LCL", "M=D"))
        self._emit_all((f"@{name}", "0;JMP"))
        self._label(ret_label)
        self.call_site_counter += 1


def translate_instructions(instructions: Iterable[VMInstruction], *, namespace: str,
                           writer: Optional[CodeWriter] = None) -> CodeWriter:
    """Traduce una unidad completa con un CodeWriter nuevo o uno existente."""
    if writer is None:
        writer = CodeWriter(namespace)
    else:
        writer.set_namespace(namespace)
    writer.translate_all(instructions)
    return writer
