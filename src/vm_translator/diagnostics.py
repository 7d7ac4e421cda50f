'''
clase Diagnostic, helpers y la excepción fatal TranslationError
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Literal

# Severidad de los diagnósticos (en español)
Severity = Literal["error", "advertencia"]

# Clase de error: sintaxis (línea mal formada) o semántica (operación inválida)
ErrorKind = Literal["syntax", "semantic"]

_SEV_TO_LABEL = {
    "error": "ERROR",
    "advertencia": "ADVERTENCIA",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    Abarca errores y advertencias, con ubicación opcional (archivo, línea y columna)
    y un mensaje de ayuda (pista) para orientar la corrección.
    """
    severity: Severity
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    hint: Optional[str] = None
    file: Optional[str] = None

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}"
            if self.col is not None:
                loc += f":{self.col}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        core = f"{sev}: {self.message}"
        if self.hint:
            core += f"  (pista: {self.hint})"
        return loc + core

def error(message: str, *, line: int | None = None, col: int | None = None,
          file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, line, col, hint, file)

def warning(message: str, *, line: int | None = None, col: int | None = None,
            file: str | None = None, hint: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("advertencia", message, line, col, hint, file)


class TranslationError(Exception):
    """Error fatal de traducción.

    No hay recuperación: quien la lanza aborta la traducción completa y el
    programa no produce salida. Lleva el diagnóstico que se muestra al usuario.
    """

    def __init__(self, diagnostic: Diagnostic, kind: ErrorKind = "syntax") -> None:
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic
        self.kind = kind

    @classmethod
    def syntax(cls, message: str, **where) -> "TranslationError":
        return cls(error(message, **where), "syntax")

    @classmethod
    def semantic(cls, message: str, **where) -> "TranslationError":
        return cls(error(message, **where), "semantic")

    def located(self, *, line: int | None = None, file: str | None = None) -> "TranslationError":
        """Copia del error con la ubicación completada (sin pisar la que ya tenga)."""
        d = self.diagnostic
        fixed = Diagnostic(d.severity, d.message,
                           d.line if d.line is not None else line,
                           d.col, d.hint,
                           d.file if d.file is not None else file)
        return TranslationError(fixed, self.kind)
