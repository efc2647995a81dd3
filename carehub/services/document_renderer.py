"""
Cliente del servicio externo que arma el documento imprimible de una receta.
Solo le mandamos el id; el formato lo resuelve el servicio.
"""
import logging

import httpx

from carehub.core.config import settings
from carehub.core.errors import RendererUnavailable

logger = logging.getLogger(__name__)


async def render_prescription_document(
    prescription_id: str,
    client: httpx.AsyncClient | None = None,
) -> str:
    """Devuelve el HTML imprimible. Cualquier falla del servicio -> 503."""
    if not settings.DOCUMENT_RENDERER_URL:
        raise RendererUnavailable("document renderer not configured")

    owns_client = client is None
    cx = client or httpx.AsyncClient(timeout=settings.DOCUMENT_RENDERER_TIMEOUT)
    try:
        resp = await cx.post(
            settings.DOCUMENT_RENDERER_URL,
            json={"prescriptionId": prescription_id},
        )
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("renderer failed for prescription %s: %s", prescription_id, exc)
        raise RendererUnavailable()
    finally:
        if owns_client:
            await cx.aclose()

    html = data.get("html") if isinstance(data, dict) else None
    if not isinstance(html, str):
        logger.error("renderer returned no html for prescription %s", prescription_id)
        raise RendererUnavailable()
    return html
