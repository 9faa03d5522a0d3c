"""
Agreement pack assembly.

One downloadable PDF made of, in this order:

    1. Service agreement
    2. Annexure A title page + interiors quotation        (if enabled)
    3. Annexure B title page + false ceiling quotation    (if enabled)

Source documents are mounted in a ViewRegistry under fixed names. A view is
a zero-argument callable returning PDF bytes. Title pages are mounted on
temporary names only for the duration of their capture and are always
unmounted again, also when a capture fails.

Captures run one after another in pack order; the temporary mount names are
reused by every pack.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List

from .pdf_generator import generate_annexure_title_pdf, merge_pdf_bytes

logger = logging.getLogger(__name__)

AGREEMENT_VIEW = "agreement"
INTERIORS_VIEW = "interiors"
FALSE_CEILING_VIEW = "false-ceiling"

SECTION_NAMES = {
    AGREEMENT_VIEW: "Agreement",
    INTERIORS_VIEW: "Interiors",
    FALSE_CEILING_VIEW: "False Ceiling",
}

# (letter, title, temporary mount name, content view)
ANNEXURES = {
    INTERIORS_VIEW: ("A", "Interiors Quotation", "temp-annexure-a", INTERIORS_VIEW),
    FALSE_CEILING_VIEW: ("B", "False Ceiling Quotation", "temp-annexure-b", FALSE_CEILING_VIEW),
}


class MissingSectionError(RuntimeError):
    """A section the pack needs has no mounted view."""

    def __init__(self, sections: List[str]):
        self.sections = list(sections)
        super().__init__(
            f"Cannot build agreement pack: {', '.join(self.sections)} section not available. "
            "Open the corresponding quotation first."
        )


class ViewRegistry:
    """Named mount points holding document renderers."""

    def __init__(self):
        self._views: Dict[str, Callable[[], bytes]] = {}

    def mount(self, name: str, render: Callable[[], bytes]):
        self._views[name] = render

    def unmount(self, name: str):
        self._views.pop(name, None)

    def is_mounted(self, name: str) -> bool:
        return name in self._views

    def __contains__(self, name) -> bool:
        return self.is_mounted(name)

    def mounted(self) -> List[str]:
        return list(self._views)

    def capture(self, name: str) -> bytes:
        if name not in self._views:
            raise MissingSectionError([SECTION_NAMES.get(name, name)])
        return bytes(self._views[name]())


@dataclass
class PackRequest:
    quote_id: str
    client_name: str = ""
    include_interiors: bool = True
    include_false_ceiling: bool = True


@dataclass
class AgreementPack:
    filename: str
    pdf_bytes: bytes


def pack_filename(quote_id: str) -> str:
    return f"AgreementPack_{quote_id}.pdf"


class AgreementPackAssembler:
    """Captures the mounted views in pack order and merges them."""

    def __init__(self, registry: ViewRegistry, title_renderer=generate_annexure_title_pdf, merger=merge_pdf_bytes):
        self.registry = registry
        self.title_renderer = title_renderer
        self.merger = merger

    def required_views(self, request: PackRequest) -> List[str]:
        views = [AGREEMENT_VIEW]
        if request.include_interiors:
            views.append(INTERIORS_VIEW)
        if request.include_false_ceiling:
            views.append(FALSE_CEILING_VIEW)
        return views

    def check_sections(self, request: PackRequest):
        """Raise MissingSectionError naming every required view that is not mounted."""
        missing = [SECTION_NAMES[v] for v in self.required_views(request) if not self.registry.is_mounted(v)]
        if missing:
            raise MissingSectionError(missing)

    def _capture_title(self, request: PackRequest, annexure: str) -> bytes:
        letter, title, mount_name, _ = ANNEXURES[annexure]
        self.registry.mount(
            mount_name,
            lambda: self.title_renderer(letter, title, request.quote_id, request.client_name),
        )
        try:
            return self.registry.capture(mount_name)
        finally:
            self.registry.unmount(mount_name)

    def assemble(self, request: PackRequest) -> AgreementPack:
        """
        Build the pack.

        Raises MissingSectionError before any capture when a required view is
        not mounted. Errors from a capture propagate; no partial pack is returned.
        """
        self.check_sections(request)

        buffers = []
        try:
            buffers.append(self.registry.capture(AGREEMENT_VIEW))
            logger.debug("Captured agreement for %s", request.quote_id)
            for view in self.required_views(request)[1:]:
                buffers.append(self._capture_title(request, view))
                buffers.append(self.registry.capture(view))
                logger.debug("Captured annexure %s for %s", ANNEXURES[view][0], request.quote_id)
        finally:
            for _, _, mount_name, _ in ANNEXURES.values():
                self.registry.unmount(mount_name)

        pdf_bytes = self.merger(buffers)
        logger.info("Agreement pack %s: %d parts, %d bytes", request.quote_id, len(buffers), len(pdf_bytes))
        return AgreementPack(filename=pack_filename(request.quote_id), pdf_bytes=pdf_bytes)
