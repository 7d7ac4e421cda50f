from typing import get_args
from src.vm_translator.diagnostics import error, warning, TranslationError, Severity, _SEV_TO_LABEL

def test_error_str():
    d = error("Segmento inválido: heap", line=12, file="Main.vm", hint="use local, argument, ...")
    s = str(d)
    assert "Main.vm:12:" in s
    assert "ERROR: Segmento inválido: heap" in s
    assert "(pista: use local, argument, ...)" in s

def test_warning_without_location():
    assert str(warning("sin Sys.init")) == "ADVERTENCIA: sin Sys.init"

def test_translation_error_kinds_and_location():
    ex = TranslationError.semantic("pointer solo admite índice 0 o 1, no 2")
    assert ex.kind == "semantic"
    assert ex.diagnostic.line is None

    located = ex.located(line=7, file="Foo.vm")
    assert located.kind == "semantic"
    assert located.diagnostic.line == 7 and located.diagnostic.file == "Foo.vm"
    assert str(located).startswith("Foo.vm:7: ERROR:")

    # la ubicación original no se pisa
    again = located.located(line=99, file="Bar.vm")
    assert again.diagnostic.line == 7 and again.diagnostic.file == "Foo.vm"

def test_every_severity_has_a_label():
    assert set(get_args(Severity)) == set(_SEV_TO_LABEL)
    assert {error("x").severity, warning("x").severity} == set(_SEV_TO_LABEL)
