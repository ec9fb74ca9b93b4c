"""End-to-end ingest run for one brand.

extract -> normalize/score/assign -> enrich -> upsert -> summary + IngestLog.
One bad page, one failed detail lookup or one failed write never aborts the
run; they are counted and reported. Only a missing brand or profile is fatal,
and in that case nothing is written.
"""
from __future__ import annotations

import json
import logging
from typing import Callable, Mapping, Optional

from sqlmodel import Session, select

from burgerlab.models.brands import Brand
from burgerlab.models.ingest_logs import IngestLog, IngestStatus

from . import events as ev
from .events import RunEvents
from .fetch import ExtractionContext
from .matcher import Assignment, assign
from .profiles import SourceProfile, get_profile
from .records import ExtractionResult, IngestSummary
from .upsert import upsert_menu_item, upsert_nutrition

logger = logging.getLogger(__name__)

MAX_LOGGED_ERRORS = 10

ContextFactory = Callable[[SourceProfile], ExtractionContext]


class IngestError(Exception):
    """Fatal precondition failure; the run did not start."""


class BrandNotFound(IngestError):
    pass


class UnknownSource(IngestError):
    pass


def _default_context(profile: SourceProfile) -> ExtractionContext:
    return ExtractionContext()


def _safe_extract(step: Callable[[ExtractionContext], ExtractionResult], ctx: ExtractionContext,
                  label: str, events: RunEvents, summary: IngestSummary) -> ExtractionResult:
    events.emit(ev.EXTRACTION_STARTED, step=label)
    try:
        result = step(ctx)
    except Exception as exc:  # one broken extractor must not end the run
        logger.exception("%s extraction crashed", label)
        result = ExtractionResult(errors=[f"{type(exc).__name__}: {exc}"])
    for message in result.errors:
        events.emit(ev.EXTRACTION_FAILED, step=label, error=message)
        summary.record_error(f"[{label}] {message}")
    events.emit(ev.EXTRACTION_FINISHED, step=label, candidates=len(result.candidates))
    return result


def _unmatched_message(target: str, assignment: Assignment) -> str:
    message = f"{target}: no matching menu found"
    hint = assignment.suggestions.get(target)
    if hint:
        message += f" (closest: '{hint}', score {assignment.best_rejected.get(target, 0):.0f})"
    return message


def _process_target(session: Session, brand: Brand, profile: SourceProfile, ctx: ExtractionContext,
                    target: str, menu: Assignment, nutrition: Assignment,
                    events: RunEvents, summary: IngestSummary) -> None:
    match = menu.get(target)
    if match is None:
        events.emit(ev.MATCH_REJECTED, kind="menu", target=target,
                    best_score=menu.best_rejected.get(target, 0.0),
                    suggestion=menu.suggestions.get(target))
        summary.record_error(_unmatched_message(target, menu))
        return
    events.emit(ev.MATCH_ACCEPTED, kind="menu", target=target,
                candidate=match.candidate.name, score=match.score)

    record = match.candidate
    try:
        record = profile.enrich(ctx, target, record)
    except Exception as exc:  # keep the base record
        events.emit(ev.ENRICH_FAILED, target=target, error=str(exc))
        summary.record_error(f"{target}: detail lookup failed: {exc}")

    facts = None
    nutrition_match = nutrition.get(target)
    if nutrition_match is not None:
        events.emit(ev.MATCH_ACCEPTED, kind="nutrition", target=target,
                    candidate=nutrition_match.candidate.name, score=nutrition_match.score)
        facts = nutrition_match.candidate.nutrition
    if facts is None or facts.is_empty():
        facts = record.nutrition

    try:
        item, created = upsert_menu_item(session, brand.id, target, record, category=profile.category)
        upsert_nutrition(session, item.id, facts)
        session.commit()
    except Exception as exc:
        session.rollback()
        events.emit(ev.UPSERT_FAILED, target=target, error=str(exc))
        summary.record_error(f"{target}: save failed: {exc}")
        return

    if created:
        summary.created += 1
        events.emit(ev.UPSERT_CREATED, target=target, menu_item_id=item.id)
    else:
        summary.updated += 1
        events.emit(ev.UPSERT_UPDATED, target=target, menu_item_id=item.id)


def _write_log(session: Session, brand: Brand, summary: IngestSummary,
               status: Optional[IngestStatus] = None) -> IngestLog:
    if status is None:
        status = IngestStatus.success if summary.success else IngestStatus.partial
    log = IngestLog(
        brand_id=brand.id,
        status=status,
        changed_count=summary.created + summary.updated,
        error=(
            json.dumps(summary.error_details[:MAX_LOGGED_ERRORS], ensure_ascii=False)
            if summary.error_details else None
        ),
    )
    session.add(log)
    session.commit()
    return log


def run_ingest(
    session: Session,
    slug: str,
    *,
    profiles: Optional[Mapping[str, SourceProfile]] = None,
    context_factory: Optional[ContextFactory] = None,
    events: Optional[RunEvents] = None,
) -> IngestSummary:
    brand = session.exec(select(Brand).where(Brand.slug == slug)).first()
    if brand is None:
        raise BrandNotFound(f"Brand '{slug}' not found")
    profile = get_profile(slug, profiles)
    if profile is None:
        raise UnknownSource(f"No scraper registered for brand '{slug}'")

    events = events or RunEvents(slug)
    summary = IngestSummary(brand=slug, total=len(profile.targets))
    factory = context_factory or _default_context

    try:
        with factory(profile) as ctx:
            menu_result = _safe_extract(profile.extract, ctx, "menu", events, summary)
            nutrition_result = _safe_extract(profile.extract_nutrition, ctx, "nutrition", events, summary)

            menu = assign(profile.targets, menu_result.candidates,
                          normalize=profile.normalize, policy=profile.policy)
            nutrition = assign(profile.targets, nutrition_result.candidates,
                               normalize=profile.normalize,
                               policy=profile.nutrition_policy or profile.policy)

            for target in profile.targets:
                _process_target(session, brand, profile, ctx, target, menu, nutrition, events, summary)
    except Exception as exc:
        session.rollback()
        summary.record_error(f"run aborted: {exc}")
        _write_log(session, brand, summary, status=IngestStatus.error)
        raise

    _write_log(session, brand, summary)
    events.emit(ev.RUN_FINISHED, total=summary.total, created=summary.created,
                updated=summary.updated, errors=summary.errors)
    return summary
