"""Multi-cut aggregation with per-cut failure isolation."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

from ..storage.store_models import StoredAssetRef
from .cut_errors import AllCutsFailedError, CutError
from .cut_models import CutResult, CutSpec
from .url_composer import compose_url

logger = logging.getLogger(__name__)

Composer = Callable[[StoredAssetRef, CutSpec], str]


def cut_name(cut: CutSpec, position: int) -> str:
    name = (cut.name or "").strip()
    return name or f"cut-{position}"


def aggregate(
    ref: StoredAssetRef,
    cuts: Sequence[CutSpec],
    *,
    composer: Composer = compose_url,
) -> list[CutResult]:
    """Compose every cut, keeping input order.

    A failing cut becomes an unsuccessful :class:`CutResult`; the call itself
    fails with :class:`AllCutsFailedError` only when nothing succeeded.
    """
    results: list[CutResult] = []
    for position, cut in enumerate(cuts, start=1):
        name = cut_name(cut, position)
        duration = _duration(cut)
        try:
            url = composer(ref, cut)
        except CutError as exc:
            reason = exc.reason_code
            logger.info(
                "cuts.compose.failed",
                extra={"position": position, "cut_name": name, "reason": str(exc)},
            )
            results.append(
                CutResult.failed(
                    name=name, duration=duration, reason=reason, details=str(exc)
                )
            )
            continue
        results.append(CutResult.succeeded(name=name, duration=duration, url=url))

    succeeded = sum(1 for result in results if result.success)
    logger.info(
        "cuts.aggregate.done",
        extra={
            "asset_id": ref.identifier,
            "cuts_total": len(results),
            "cuts_succeeded": succeeded,
        },
    )
    if succeeded == 0:
        raise AllCutsFailedError(
            [f"{result.name}: {result.details or result.reason}" for result in results]
        )
    return results


def _duration(cut: CutSpec) -> float:
    length = cut.end - cut.start
    return round(length, 2) if math.isfinite(length) else 0.0
