"""
PdfClient — renders plan documents through the PDF generator service.
"""

from __future__ import annotations

from typing import Any

from followup.clients.http import ServiceClient
from followup.core.constants import PdfType


class PdfClient(ServiceClient):
    """POSTs a domain object as JSON and returns the rendered PDF bytes."""

    service_name = "pdf-generator"

    async def render(self, pdf_type: PdfType, domain_object: dict[str, Any]) -> bytes:
        response = await self._request(
            "POST",
            f"/api/v1/genpdf/paop/{pdf_type.pdf_gen_name}",
            json=domain_object,
        )
        return response.content
