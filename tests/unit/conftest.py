"""Ensamblador + CPU Hack mínimos para ejecutar la salida del traductor en los tests."""
import pytest

MASK = 0xFFFF

PREDEFINED = {"SP": 0, "LCL": 1, "ARG": 2, "THIS": 3, "THAT": 4,
              "SCREEN": 16384, "KBD": 24576}
PREDEFINED.update({f"R{i}": i for i in range(16)})

COMP = {
    "0": lambda a, d, m: 0,
    "1": lambda a, d, m: 1,
    "-1": lambda a, d, m: -1,
    "D": lambda a, d, m: d,
    "A": lambda a, d, m: a,
    "M": lambda a, d, m: m,
    "!D": lambda a, d, m: ~d,
    "!A": lambda a, d, m: ~a,
    "!M": lambda a, d, m: ~m,
    "-D": lambda a, d, m: -d,
    "-A": lambda a, d, m: -a,
    "-M": lambda a, d, m: -m,
    "D+1": lambda a, d, m: d + 1,
    "A+1": lambda a, d, m: a + 1,
    "M+1": lambda a, d, m: m + 1,
    "D-1": lambda a, d, m: d - 1,
    "A-1": lambda a, d, m: a - 1,
    "M-1": lambda a, d, m: m - 1,
    "D+A": lambda a, d, m: d + a,
    "D+M": lambda a, d, m: d + m,
    "D-A": lambda a, d, m: d - a,
    "D-M": lambda a, d, m: d - m,
    "A-D": lambda a, d, m: a - d,
    "M-D": lambda a, d, m: m - d,
    "D&A": lambda a, d, m: d & a,
    "D&M": lambda a, d, m: d & m,
    "D|A": lambda a, d, m: d | a,
    "D|M": lambda a, d, m: d | m,
}

JUMP = {
    "JGT": lambda v: v > 0, "JEQ": lambda v: v == 0, "JGE": lambda v: v >= 0,
    "JLT": lambda v: v < 0, "JNE": lambda v: v != 0, "JLE": lambda v: v <= 0,
    "JMP": lambda v: True,
}

def signed(x: int) -> int:
    x &= MASK
    return x - 0x10000 if x & 0x8000 else x


class HackMachine:
    def __init__(self, asm):
        self.rom = self._assemble(list(asm))
        self.ram = {}
        self.a = self.d = self.pc = 0

    @staticmethod
    def _assemble(lines):
        symbols = dict(PREDEFINED)
        code = []
        for line in lines:
            if line.startswith("("):
                name = line[1:-1]
                assert name not in symbols, f"etiqueta duplicada: {name}"
                symbols[name] = len(code)
            else:
                code.append(line)
        next_var = 16
        rom = []
        for line in code:
            if line.startswith("@"):
                tok = line[1:]
                if tok.isdigit():
                    rom.append(("A", int(tok)))
                    continue
                if tok not in symbols:
                    symbols[tok] = next_var
                    next_var += 1
                rom.append(("A", symbols[tok]))
            else:
                dest, _, rest = line.rpartition("=")
                comp, _, jump = rest.partition(";")
                assert comp in COMP, f"comp inválido: {line}"
                assert not jump or jump in JUMP, f"salto inválido: {line}"
                rom.append(("C", dest, comp, jump))
        return rom

    def _halted(self) -> bool:
        # '@n; 0;JMP' en la dirección n es el bucle final de los programas Hack
        if self.pc >= len(self.rom):
            return True
        ins = self.rom[self.pc]
        nxt = self.rom[self.pc + 1] if self.pc + 1 < len(self.rom) else None
        return ins == ("A", self.pc) and nxt is not None and nxt[0] == "C" and nxt[3] == "JMP"

    def step(self) -> None:
        ins = self.rom[self.pc]
        if ins[0] == "A":
            self.a = ins[1]
            self.pc += 1
            return
        _, dest, comp, jump = ins
        m = self.ram.get(self.a, 0)
        value = COMP[comp](self.a, self.d, m) & MASK
        addr = self.a
        if "M" in dest:
            self.ram[addr] = value
        if "D" in dest:
            self.d = value
        if "A" in dest:
            self.a = value
        if jump and JUMP[jump](signed(value)):
            self.pc = addr
            return
        self.pc += 1

    def run(self, max_steps: int = 200_000) -> "HackMachine":
        for _ in range(max_steps):
            if self._halted():
                return self
            self.step()
        raise AssertionError("el programa no terminó")

    def peek(self, addr: int) -> int:
        return signed(self.ram.get(addr, 0))

    def stack(self) -> list:
        """Contenido de la pila desde 256 hasta SP (con signo)."""
        return [self.peek(i) for i in range(256, self.ram.get(0, 256))]


@pytest.fixture
def run_hack():
    def _run(asm, ram=None, max_steps: int = 200_000) -> HackMachine:
        machine = HackMachine(asm)
        machine.ram.update({k: v & MASK for k, v in (ram or {}).items()})
        return machine.run(max_steps)
    return _run
