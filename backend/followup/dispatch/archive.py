"""Archive Dispatcher — stores the plan document in the archive service."""

from __future__ import annotations

from followup.clients.base import ArchiveService, PdfRenderer
from followup.core.constants import IntentKind, PdfType
from followup.core.logging import get_logger
from followup.dispatch.base import Dispatcher
from followup.messaging import messages
from followup.models import ArchiveDocument, DispatchOutcome

logger = get_logger(__name__)


class ArchiveDispatcher(Dispatcher):
    """
    Renders the plan when no document came with the intent, then archives
    it.  Rendering and archive failures propagate unchanged.
    """

    kind = IntentKind.ARCHIVE_DOCUMENT

    def __init__(self, archive: ArchiveService, pdf_renderer: PdfRenderer) -> None:
        self.archive = archive
        self.pdf_renderer = pdf_renderer

    async def dispatch(self, intent: ArchiveDocument) -> DispatchOutcome:
        log = logger.bind(**intent.fields.log_context())

        document = intent.document
        if document is None:
            document = await self.pdf_renderer.render(
                PdfType.FAGMELDING, intent.fields.to_render_model()
            )

        await self.archive.archive(messages.archive_request(intent.fields, document))
        log.info("Plan archived", document_bytes=len(document))
        return DispatchOutcome.succeeded(self.kind)
