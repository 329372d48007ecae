import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mindfit.config import settings
from mindfit.database import get_db
from mindfit.core.auth import get_current_admin
from mindfit.models.admin import AdminNote, MenteeTag
from mindfit.models.checkin import CheckIn
from mindfit.models.user import User
from mindfit.routers.dashboard import projection_response
from mindfit.routers.gamification import earned_badge_responses, load_xp_state, xp_response
from mindfit.schemas.admin import (
    AlertResponse, GlobalStatsResponse, GoalSettings, InsightsResponse,
    MenteeCreate, MenteeDetailResponse, MenteeStatusResponse, NoteCreate,
    NoteResponse, RosterItem, TagCreate, TagResponse, ZoneTimelineItem
)
from mindfit.schemas.checkin import CheckInWithZone
from mindfit.schemas.user import UserResponse
from mindfit.services.achievements import get_earned_badges
from mindfit.services.admin_stats import (
    MenteeStatus, RosterEntry, aggregate_roster, build_alerts, compute_mentee_status
)
from mindfit.services.insights import InsightClient, InsightsUnavailable, get_insight_client
from mindfit.services.progress import overall_progress_percent
from mindfit.services.records import get_checkins, goal_from_user, to_weekly_updates
from mindfit.services.streaks import zone_history
from mindfit.utils.password import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@dataclass
class MenteeRecord:
    user: User
    entry: RosterEntry
    checkin_count: int
    tags: List[str] = field(default_factory=list)


def status_response(status: MenteeStatus) -> MenteeStatusResponse:
    return MenteeStatusResponse(
        status=status.status,
        current_zone=status.current_zone.value,
        days_since_last_update=status.days_since_last_update,
        needs_attention=status.needs_attention,
        attention_reasons=status.attention_reasons
    )


def mentee_status(goal, updates, now: datetime) -> MenteeStatus:
    # Check-ins need a goal, so a mentee without one has no history to judge
    return compute_mentee_status(
        updates if goal is not None else [], goal, now, settings.STALE_CHECKIN_DAYS
    )


async def get_mentee(db: AsyncSession, mentee_id: int) -> User:
    result = await db.execute(
        select(User).where(User.id == mentee_id, User.role == "mentee")
    )
    mentee = result.scalar_one_or_none()
    if not mentee:
        raise HTTPException(404, "Mentee not found")
    return mentee


async def load_roster(db: AsyncSession, now: datetime) -> List[MenteeRecord]:
    users = (await db.execute(
        select(User).where(User.role == "mentee").order_by(User.id)
    )).scalars().all()

    checkins = defaultdict(list)
    rows = await db.execute(select(CheckIn).order_by(CheckIn.user_id, CheckIn.week_number))
    for row in rows.scalars().all():
        checkins[row.user_id].append(row)

    tags = defaultdict(list)
    rows = await db.execute(select(MenteeTag).order_by(MenteeTag.tag_name))
    for tag in rows.scalars().all():
        tags[tag.mentee_id].append(tag.tag_name)

    records = []
    for user in users:
        goal = goal_from_user(user)
        updates = to_weekly_updates(checkins[user.id])
        entry = RosterEntry(
            mentee_id=user.id,
            full_name=user.name or user.email,
            goal=goal,
            updates=updates,
            status=mentee_status(goal, updates, now)
        )
        records.append(MenteeRecord(user, entry, len(updates), tags[user.id]))
    return records


@router.get("/mentees", response_model=List[RosterItem])
async def list_mentees(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    records = await load_roster(db, datetime.now(timezone.utc))

    roster = []
    for record in records:
        goal = record.entry.goal
        updates = record.entry.updates
        current = updates[-1].weight if updates else None
        progress = 0.0
        if goal is not None and current is not None:
            progress = overall_progress_percent(
                goal.initial_weight, current, goal.target_weight, goal.goal_type
            )
        roster.append(RosterItem(
            id=record.user.id,
            name=record.user.name,
            email=record.user.email,
            goal_type=record.user.goal_type,
            current_weight=current,
            progress_percent=round(progress, 1),
            checkin_count=record.checkin_count,
            tags=record.tags,
            status=status_response(record.entry.status)
        ))
    return roster


@router.get("/stats", response_model=GlobalStatsResponse)
async def global_stats(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    records = await load_roster(db, datetime.now(timezone.utc))
    stats = aggregate_roster([r.entry for r in records], settings.INACTIVE_DAYS)
    stats.average_progress = round(stats.average_progress, 1)
    return GlobalStatsResponse(**asdict(stats))


@router.get("/alerts", response_model=List[AlertResponse])
async def list_alerts(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    records = await load_roster(db, datetime.now(timezone.utc))
    return [
        AlertResponse(
            mentee_id=a.mentee_id,
            mentee_name=a.mentee_name,
            priority=a.priority.value,
            message=a.message
        )
        for a in build_alerts([r.entry for r in records], settings.INACTIVE_DAYS, settings.STALE_CHECKIN_DAYS)
    ]


@router.post("/mentees", response_model=UserResponse)
async def create_mentee(
    mentee_in: MenteeCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(User).where(User.email == mentee_in.email))
    if result.scalar_one_or_none():
        raise HTTPException(400, "Email already registered")

    mentee = User(
        email=mentee_in.email,
        name=mentee_in.name,
        hashed_password=hash_password(mentee_in.password),
        role="mentee",
        is_active=True,
        sex=mentee_in.sex,
        age=mentee_in.age,
        height=mentee_in.height,
        phone=mentee_in.phone,
        goal_type=mentee_in.goal_type,
        goal_subtype=mentee_in.goal_subtype,
        initial_weight=mentee_in.initial_weight,
        target_weight=mentee_in.target_weight,
        weekly_variation_percent=mentee_in.weekly_variation_percent
    )
    db.add(mentee)
    await db.commit()
    await db.refresh(mentee)
    logger.info("Admin %s created mentee %s", admin.id, mentee.id)
    return mentee


@router.get("/mentees/{mentee_id}", response_model=MenteeDetailResponse)
async def mentee_detail(
    mentee_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    mentee = await get_mentee(db, mentee_id)
    goal = goal_from_user(mentee)
    rows = await get_checkins(db, mentee.id)
    updates = to_weekly_updates(rows)
    status = mentee_status(goal, updates, datetime.now(timezone.utc))

    zones = zone_history(updates, goal) if goal is not None else {}
    earned = await get_earned_badges(db, mentee.id)
    xp = await load_xp_state(db, mentee.id)

    goal_settings = None
    if goal is not None:
        goal_settings = GoalSettings(
            goal_type=goal.goal_type.value,
            goal_subtype=goal.goal_subtype.value,
            initial_weight=goal.initial_weight,
            target_weight=goal.target_weight,
            weekly_variation_percent=goal.weekly_variation_percent
        )

    return MenteeDetailResponse(
        id=mentee.id,
        name=mentee.name,
        email=mentee.email,
        goal=goal_settings,
        status=status_response(status),
        updates=[CheckInWithZone.from_row(r, zones[r.week_number].value) for r in rows if r.week_number in zones],
        zone_timeline=[
            ZoneTimelineItem(
                week_number=r.week_number,
                zone=zones[r.week_number].value,
                weight=r.weight,
                created_at=r.created_at
            )
            for r in rows if r.week_number in zones
        ],
        projection=projection_response(goal, updates) if goal is not None else None,
        badges=earned_badge_responses(earned),
        xp=xp_response(xp)
    )


@router.put("/mentees/{mentee_id}/goal", response_model=GoalSettings)
async def update_mentee_goal(
    mentee_id: int,
    goal_in: GoalSettings,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    mentee = await get_mentee(db, mentee_id)

    if mentee.initial_weight is not None and goal_in.initial_weight != mentee.initial_weight:
        if await get_checkins(db, mentee.id):
            raise HTTPException(400, "Initial weight cannot change once check-ins exist")

    mentee.goal_type = goal_in.goal_type
    mentee.goal_subtype = goal_in.goal_subtype
    mentee.initial_weight = goal_in.initial_weight
    mentee.target_weight = goal_in.target_weight
    mentee.weekly_variation_percent = goal_in.weekly_variation_percent
    await db.commit()
    logger.info("Admin %s updated goal of mentee %s", admin.id, mentee.id)
    return goal_in


@router.get("/mentees/{mentee_id}/notes", response_model=List[NoteResponse])
async def list_notes(
    mentee_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await get_mentee(db, mentee_id)
    # Private notes are visible to their author only
    result = await db.execute(
        select(AdminNote)
        .where(AdminNote.mentee_id == mentee_id)
        .where(or_(AdminNote.is_private.is_(False), AdminNote.admin_id == admin.id))
        .order_by(AdminNote.created_at.desc(), AdminNote.id.desc())
    )
    return result.scalars().all()


@router.post("/mentees/{mentee_id}/notes", response_model=NoteResponse)
async def create_note(
    mentee_id: int,
    note_in: NoteCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await get_mentee(db, mentee_id)
    note = AdminNote(
        admin_id=admin.id,
        mentee_id=mentee_id,
        note=note_in.note,
        is_private=note_in.is_private,
        created_at=datetime.now(timezone.utc)
    )
    db.add(note)
    await db.commit()
    return note


@router.delete("/notes/{note_id}")
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    note = (await db.execute(select(AdminNote).where(AdminNote.id == note_id))).scalar_one_or_none()
    if not note:
        raise HTTPException(404, "Note not found")
    if note.admin_id != admin.id:
        raise HTTPException(403, "Only the author can delete this note")

    await db.delete(note)
    await db.commit()
    return {"message": "Note deleted"}


@router.get("/mentees/{mentee_id}/tags", response_model=List[TagResponse])
async def list_tags(
    mentee_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await get_mentee(db, mentee_id)
    result = await db.execute(
        select(MenteeTag).where(MenteeTag.mentee_id == mentee_id).order_by(MenteeTag.tag_name)
    )
    return result.scalars().all()


@router.post("/mentees/{mentee_id}/tags", response_model=TagResponse)
async def add_tag(
    mentee_id: int,
    tag_in: TagCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await get_mentee(db, mentee_id)
    tag = MenteeTag(
        mentee_id=mentee_id,
        tag_name=tag_in.tag_name.strip(),
        tag_color=tag_in.tag_color,
        created_at=datetime.now(timezone.utc)
    )
    db.add(tag)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(409, "Tag already assigned to this mentee")
    return tag


@router.delete("/mentees/{mentee_id}/tags/{tag_id}")
async def remove_tag(
    mentee_id: int,
    tag_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(
        select(MenteeTag).where(MenteeTag.id == tag_id, MenteeTag.mentee_id == mentee_id)
    )
    tag = result.scalar_one_or_none()
    if not tag:
        raise HTTPException(404, "Tag not found")

    await db.delete(tag)
    await db.commit()
    return {"message": "Tag removed"}


@router.get("/mentees/{mentee_id}/insights", response_model=InsightsResponse)
async def mentee_insights(
    mentee_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin),
    client: InsightClient = Depends(get_insight_client)
):
    mentee = await get_mentee(db, mentee_id)
    goal = goal_from_user(mentee)
    if goal is None:
        raise HTTPException(400, "Mentee has no goal configuration")

    updates = to_weekly_updates(await get_checkins(db, mentee.id))
    status = mentee_status(goal, updates, datetime.now(timezone.utc))
    try:
        text = await client.admin_insights(mentee.name or mentee.email, goal, status, updates)
    except InsightsUnavailable:
        return InsightsResponse(available=False, insights=None)
    return InsightsResponse(available=True, insights=text)
