"""
Agreement pack assembly tests.

Tests:
1-3. Capture order and merged output
4-6. Missing sections fail before any capture
7-9. Temporary title mounts are always cleaned up
"""

import pytest

from interior_quotes.agreement_pack import (
    AGREEMENT_VIEW,
    FALSE_CEILING_VIEW,
    INTERIORS_VIEW,
    AgreementPackAssembler,
    MissingSectionError,
    PackRequest,
    ViewRegistry,
    pack_filename,
)
from interior_quotes.pdf_generator import count_pages, generate_annexure_title_pdf


class _Recorder:
    """Fake renderers and merger that record the capture sequence."""

    def __init__(self):
        self.calls = []

    def view(self, name):
        def render():
            self.calls.append(name)
            return name.encode()
        return render

    def title(self, letter, title, quote_id, client_name):
        self.calls.append(f"title-{letter}")
        return f"title-{letter}".encode()

    def merge(self, buffers):
        return b"|".join(buffers)


def _registry(recorder, views=(AGREEMENT_VIEW, INTERIORS_VIEW, FALSE_CEILING_VIEW)):
    registry = ViewRegistry()
    for name in views:
        registry.mount(name, recorder.view(name))
    return registry


def _assembler(registry, recorder):
    return AgreementPackAssembler(registry, title_renderer=recorder.title, merger=recorder.merge)


# ============================================================
# 1-3. Order and output
# ============================================================

def test_full_pack_order():
    """Agreement, Annexure A title, interiors, Annexure B title, false ceiling."""
    rec = _Recorder()
    pack = _assembler(_registry(rec), rec).assemble(PackRequest(quote_id="QT_251017_AB12"))
    assert rec.calls == ["agreement", "title-A", "interiors", "title-B", "false-ceiling"]
    assert pack.pdf_bytes == b"agreement|title-A|interiors|title-B|false-ceiling"
    assert pack.filename == "AgreementPack_QT_251017_AB12.pdf"


def test_disabled_annexure_is_skipped():
    rec = _Recorder()
    pack = _assembler(_registry(rec), rec).assemble(
        PackRequest(quote_id="Q1", include_interiors=False)
    )
    assert rec.calls == ["agreement", "title-B", "false-ceiling"]
    assert pack.filename == pack_filename("Q1")


def test_real_pdfs_merge_in_order():
    """With real title pages the merged pack has one page per part."""
    registry = ViewRegistry()
    registry.mount(AGREEMENT_VIEW, lambda: generate_annexure_title_pdf("X", "Agreement"))
    registry.mount(INTERIORS_VIEW, lambda: generate_annexure_title_pdf("Y", "Interiors"))
    registry.mount(FALSE_CEILING_VIEW, lambda: generate_annexure_title_pdf("Z", "False Ceiling"))
    pack = AgreementPackAssembler(registry).assemble(PackRequest(quote_id="Q2", client_name="A. Sharma"))
    assert pack.pdf_bytes[:5] == b"%PDF-"
    assert count_pages(pack.pdf_bytes) == 5


# ============================================================
# 4-6. Missing sections
# ============================================================

def test_missing_interiors_raises_before_any_capture():
    rec = _Recorder()
    registry = _registry(rec, views=(AGREEMENT_VIEW, FALSE_CEILING_VIEW))
    with pytest.raises(MissingSectionError) as exc:
        _assembler(registry, rec).assemble(PackRequest(quote_id="Q3"))
    assert exc.value.sections == ["Interiors"]
    assert "Interiors" in str(exc.value)
    assert rec.calls == []


def test_missing_sections_are_all_named():
    rec = _Recorder()
    registry = _registry(rec, views=())
    with pytest.raises(MissingSectionError) as exc:
        _assembler(registry, rec).assemble(PackRequest(quote_id="Q4"))
    assert exc.value.sections == ["Agreement", "Interiors", "False Ceiling"]


def test_missing_view_not_needed_when_annexure_disabled():
    rec = _Recorder()
    registry = _registry(rec, views=(AGREEMENT_VIEW,))
    pack = _assembler(registry, rec).assemble(
        PackRequest(quote_id="Q5", include_interiors=False, include_false_ceiling=False)
    )
    assert pack.pdf_bytes == b"agreement"


# ============================================================
# 7-9. Cleanup
# ============================================================

def test_title_mounts_removed_after_success():
    rec = _Recorder()
    registry = _registry(rec)
    _assembler(registry, rec).assemble(PackRequest(quote_id="Q6"))
    assert sorted(registry.mounted()) == sorted([AGREEMENT_VIEW, INTERIORS_VIEW, FALSE_CEILING_VIEW])


def test_title_mounts_removed_after_failed_capture():
    rec = _Recorder()
    registry = _registry(rec, views=(AGREEMENT_VIEW, FALSE_CEILING_VIEW))

    def broken():
        raise RuntimeError("render failed")

    registry.mount(INTERIORS_VIEW, broken)
    with pytest.raises(RuntimeError, match="render failed"):
        _assembler(registry, rec).assemble(PackRequest(quote_id="Q7"))
    assert "temp-annexure-a" not in registry
    assert "temp-annexure-b" not in registry
    assert rec.calls == ["agreement", "title-A"]


def test_repeated_packs_reuse_mount_points():
    rec = _Recorder()
    registry = _registry(rec)
    assembler = _assembler(registry, rec)
    first = assembler.assemble(PackRequest(quote_id="Q8"))
    second = assembler.assemble(PackRequest(quote_id="Q8"))
    assert first.pdf_bytes == second.pdf_bytes
    assert len(registry.mounted()) == 3
