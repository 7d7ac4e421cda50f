from __future__ import annotations
import argparse, sys
from pathlib import Path
from typing import List

from .parser import parse
from .ast import Function
from .codegen import CodeWriter, translate_instructions, ENTRY_POINT
from .diagnostics import Diagnostic, TranslationError, warning
from .writers import write_asm

VM_SUFFIX = ".vm"
ASM_SUFFIX = ".asm"

def translate_text(text: str, *, namespace: str, writer: CodeWriter | None = None,
                   filename: str | None = None) -> CodeWriter:
    """Parsea y traduce el texto de una unidad. Devuelve el CodeWriter usado."""
    return _translate_unit(parse(text, filename=filename), namespace, writer, filename)

def _translate_unit(instructions, namespace: str, writer: CodeWriter | None,
                    filename: str | None) -> CodeWriter:
    try:
        return translate_instructions(instructions, namespace=namespace, writer=writer)
    except TranslationError as ex:
        raise ex.located(file=filename) from None

def _read(path: Path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def translate_file(path: Path | str) -> List[str]:
    """Una sola unidad, sin bootstrap; los static se califican con el nombre del archivo."""
    path = Path(path)
    writer = translate_text(_read(path), namespace=path.stem, filename=str(path))
    return writer.asm

def vm_files(directory: Path) -> List[Path]:
    # orden por nombre para que la salida sea reproducible
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix == VM_SUFFIX)

def translate_directory(directory: Path | str, *, bootstrap: bool = True,
                        diagnostics: List[Diagnostic] | None = None) -> List[str]:
    """Todas las unidades .vm del directorio con un único CodeWriter.

    El bootstrap va primero y una sola vez; los contadores son globales al programa.
    Si se pasa 'diagnostics', se le agregan las advertencias no fatales.
    """
    directory = Path(directory)
    files = vm_files(directory)
    if not files:
        raise TranslationError.syntax(f"No hay archivos {VM_SUFFIX} en el directorio",
                                      file=str(directory))
    writer = CodeWriter()
    if bootstrap:
        writer.write_bootstrap()
    defines_entry = False
    for path in files:
        instructions = parse(_read(path), filename=str(path))
        _translate_unit(instructions, path.stem, writer, str(path))
        defines_entry = defines_entry or any(
            isinstance(ins, Function) and ins.name == ENTRY_POINT for ins in instructions)
    if bootstrap and not defines_entry and diagnostics is not None:
        diagnostics.append(warning(f"Ninguna unidad define '{ENTRY_POINT}'",
                                   file=str(directory),
                                   hint="el bootstrap salta a una etiqueta inexistente"))
    return writer.asm

def output_path_for(source: Path | str) -> Path:
    """X.vm -> X.asm; directorio D -> D/D.asm"""
    source = Path(source)
    if source.is_dir():
        return source / (source.resolve().name + ASM_SUFFIX)
    return source.with_suffix(ASM_SUFFIX)

def translate_path(source: Path | str, *, bootstrap: bool = True,
                   diagnostics: List[Diagnostic] | None = None) -> List[str]:
    source = Path(source)
    if source.is_dir():
        return translate_directory(source, bootstrap=bootstrap, diagnostics=diagnostics)
    return translate_file(source)

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(prog="vm-translator",
                                 description="Traductor de VM de pila a ensamblador Hack")
    ap.add_argument("source", help="archivo .vm o directorio con archivos .vm")
    ap.add_argument("-o", "--output", help="archivo .asm de salida (por defecto junto a la entrada)")
    ap.add_argument("--no-bootstrap", action="store_true",
                    help="en modo directorio, no emitir SP=256; call Sys.init")
    args = ap.parse_args(argv)

    source = Path(args.source)
    if not source.exists():
        print(f"ERROR: no existe {source}", file=sys.stderr)
        return 2
    out_path = Path(args.output) if args.output else output_path_for(source)

    diags: List[Diagnostic] = []
    try:
        asm = translate_path(source, bootstrap=not args.no_bootstrap, diagnostics=diags)
    except TranslationError as ex:
        print(ex.diagnostic, file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as ex:
        print(f"ERROR: no pude leer {source}: {ex}", file=sys.stderr)
        return 2

    for d in diags:
        print(d, file=sys.stderr)

    try:
        write_asm(asm, str(out_path))
    except OSError as ex:
        print(f"ERROR al escribir salida: {ex}", file=sys.stderr)
        return 3

    print(f"OK: {len(asm)} líneas → {out_path}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
