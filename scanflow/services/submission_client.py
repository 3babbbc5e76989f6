"""
==============================================================================
Submission Client Module
==============================================================================

Sends finalized scan items to the barcode store.

Submitters:
-----------
- SubmissionClient: HTTP JSON POST to a remote store (requests), run in a
  worker thread with an explicit timeout and optional cancellation
- LocalSubmitter: In-process store backed by ScannedBarcodeService

Outcomes:
---------
    store accepted           -> ServiceResponse (data = rows inserted)
    no answer before timeout -> SubmissionTimeout
    cancel event set         -> SubmissionCancelled
    HTTP error / bad body /
    success=false            -> SubmissionRejected

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

import requests
from pydantic import ValidationError
from sqlalchemy.orm import Session

from scanflow.core.exceptions import (
    submission_cancelled,
    submission_rejected,
    submission_timeout,
)
from scanflow.domain.models import ScanItem
from scanflow.schemas.common import ServiceResponse
from scanflow.schemas.scan import ScanItemPayload
from scanflow.services.scanned_barcode_service import ScannedBarcodeService


# Module logger
logger = logging.getLogger(__name__)


def to_payload(items: Sequence[ScanItem]) -> List[ScanItemPayload]:
    return [ScanItemPayload.from_item(item) for item in items]


class Submitter(Protocol):
    async def submit(
        self,
        items: Sequence[ScanItem],
        cancel: Optional[asyncio.Event] = None,
    ) -> ServiceResponse[int]:
        ...


class SubmissionClient:
    """
    HTTP client for a remote barcode store.

    Attributes:
        url: Store endpoint receiving the JSON array
        timeout: Seconds before the submission is abandoned

    Example:
        >>> client = SubmissionClient("https://store.local/api/scanned-barcodes", 30)
        >>> result = await client.submit(items)
        >>> result.message
        '3 new barcode(s) saved. 0 duplicate/existing value(s) skipped.'
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _post(self, body: list) -> ServiceResponse[int]:
        try:
            response = self._session.post(self.url, json=body, timeout=self.timeout)
        except requests.Timeout as exc:
            raise submission_timeout(self.timeout) from exc
        except requests.RequestException as exc:
            raise submission_rejected(f"Store unreachable: {exc}") from exc

        if not response.ok:
            raise submission_rejected(
                f"Store returned HTTP {response.status_code}",
                status=response.status_code,
            )

        try:
            result = ServiceResponse[int].model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise submission_rejected(f"Malformed store response: {exc}") from exc

        if not result.success:
            raise submission_rejected(
                result.message or "Submission rejected",
                errors=result.errors,
            )
        return result

    async def submit(
        self,
        items: Sequence[ScanItem],
        cancel: Optional[asyncio.Event] = None,
    ) -> ServiceResponse[int]:
        """
        Post items to the store.

        Args:
            items: Items to submit, in submission order
            cancel: Optional event; setting it abandons the submission

        Returns:
            Store response

        Raises:
            SubmissionTimeout, SubmissionCancelled, SubmissionRejected
        """
        body = [
            payload.model_dump(mode="json", by_alias=True)
            for payload in to_payload(items)
        ]
        logger.info(f"📤 Submitting {len(body)} barcode(s) to {self.url}")

        post = asyncio.ensure_future(asyncio.to_thread(self._post, body))
        waiters = {post}
        cancelled = None
        if cancel is not None:
            cancelled = asyncio.ensure_future(cancel.wait())
            waiters.add(cancelled)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=self.timeout, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            post.cancel()
            raise
        finally:
            if cancelled is not None:
                cancelled.cancel()

        if post not in done:
            post.cancel()
            if cancelled is not None and cancelled in done:
                logger.warning("Submission cancelled by caller")
                raise submission_cancelled()
            logger.warning(f"Submission timed out after {self.timeout}s")
            raise submission_timeout(self.timeout)

        result = post.result()
        logger.info(f"✅ Store: {result.message}")
        return result


class LocalSubmitter:
    """Submitter writing straight to the local database."""

    def __init__(self, db: Session) -> None:
        self._service = ScannedBarcodeService(db)

    async def submit(
        self,
        items: Sequence[ScanItem],
        cancel: Optional[asyncio.Event] = None,
    ) -> ServiceResponse[int]:
        if cancel is not None and cancel.is_set():
            raise submission_cancelled()

        result = await asyncio.to_thread(self._service.add_scanned_barcodes, to_payload(items))
        if not result.success:
            raise submission_rejected(result.message or "Submission rejected", errors=result.errors)
        return result
