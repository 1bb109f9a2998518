"""Repository for prompt history operations"""
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from sqlalchemy import select, delete, func, or_, case
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.prompts import Prompt, Tone, PromptType, DEFAULT_MODEL_NAME

# Wire names (and their snake_case equivalents) that records can be sorted by
SORTABLE_FIELDS = {
    "createdAt": Prompt.created_at,
    "created_at": Prompt.created_at,
    "timestamp": Prompt.created_at,
    "updatedAt": Prompt.updated_at,
    "updated_at": Prompt.updated_at,
    "userId": Prompt.user_id,
    "user_id": Prompt.user_id,
    "originalPrompt": Prompt.original_prompt,
    "original_prompt": Prompt.original_prompt,
    "rewrittenPrompt": Prompt.rewritten_prompt,
    "rewritten_prompt": Prompt.rewritten_prompt,
    "tone": Prompt.tone,
    "type": Prompt.type,
    "isFavorite": Prompt.is_favorite,
    "is_favorite": Prompt.is_favorite,
    "processingTime": Prompt.processing_time,
    "processing_time": Prompt.processing_time,
    "apiCost": Prompt.api_cost,
    "api_cost": Prompt.api_cost,
    "model": Prompt.model,
}

SORT_ORDERS = ("asc", "desc")


class InvalidQueryError(ValueError):
    """Raised when list parameters cannot be turned into a query"""


class PromptRepository:
    """Repository for prompt history operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_prompt(
        self,
        user_id: str,
        original_prompt: str,
        rewritten_prompt: str,
        tone: Tone = Tone.PROFESSIONAL,
        prompt_type: PromptType = PromptType.OTHER,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Prompt:
        """
        Create a new history record

        Word counts are always derived from the prompt texts; any word count
        present in metadata is ignored.

        Args:
            user_id: Owner tag of the record
            original_prompt: Text submitted for rewriting
            rewritten_prompt: Rewritten text
            tone: Tone used for the rewrite
            prompt_type: Content type used for the rewrite
            metadata: Optional processingTime / model / apiCost values

        Returns:
            Created Prompt instance
        """
        metadata = metadata or {}
        prompt = Prompt(
            user_id=user_id,
            original_prompt=original_prompt,
            rewritten_prompt=rewritten_prompt,
            tone=Tone(tone),
            type=PromptType(prompt_type),
            is_favorite=False,
            processing_time=metadata.get("processingTime"),
            model=metadata.get("model") or DEFAULT_MODEL_NAME,
            api_cost=metadata.get("apiCost") or 0.0,
        )
        prompt.refresh_word_counts()

        self.session.add(prompt)
        await self.session.flush()
        return prompt

    async def get_prompt(self, prompt_id: UUID, owner_user_id: Optional[str] = None) -> Optional[Prompt]:
        """Get a record by ID, optionally restricted to its owner"""
        result = await self.session.execute(
            select(Prompt).where(*self._id_filter(prompt_id, owner_user_id))
        )
        return result.scalar_one_or_none()

    async def list_prompts(
        self,
        user_id: str,
        prompt_type: Optional[PromptType] = None,
        tone: Optional[Tone] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        favorites_only: bool = False,
    ) -> Tuple[List[Prompt], int]:
        """
        List one page of a user's records

        Args:
            user_id: Owner whose records are listed
            prompt_type: Only records of this type
            tone: Only records with this tone
            search: Case-insensitive substring matched against either prompt text
            page: 1-indexed page number
            limit: Page size
            sort_by: Field to sort by (see SORTABLE_FIELDS)
            sort_order: 'asc' or 'desc'
            favorites_only: Only favorite records

        Returns:
            Tuple of (records on the page, total number of matching records)
        """
        if page < 1 or limit < 1:
            raise InvalidQueryError("page and limit must be positive integers")

        conditions = [Prompt.user_id == user_id]
        if favorites_only:
            conditions.append(Prompt.is_favorite.is_(True))
        if prompt_type:
            conditions.append(Prompt.type == PromptType(prompt_type))
        if tone:
            conditions.append(Prompt.tone == Tone(tone))
        if search:
            conditions.append(
                or_(
                    Prompt.original_prompt.icontains(search, autoescape=True),
                    Prompt.rewritten_prompt.icontains(search, autoescape=True),
                )
            )

        query = (
            select(Prompt)
            .where(*conditions)
            .order_by(*self._ordering(sort_by, sort_order))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.session.execute(query)
        prompts = list(result.scalars().all())

        count_result = await self.session.execute(
            select(func.count(Prompt.id)).where(*conditions)
        )
        total = count_result.scalar() or 0

        return prompts, total

    async def list_favorites(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> Tuple[List[Prompt], int]:
        """List one page of a user's favorite records"""
        return await self.list_prompts(
            user_id,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            favorites_only=True,
        )

    async def delete_prompt(self, prompt_id: UUID, owner_user_id: Optional[str] = None) -> bool:
        """
        Delete a record, optionally only when owned by owner_user_id

        A missing record and an owner mismatch are indistinguishable: both
        return False.
        """
        result = await self.session.execute(
            delete(Prompt).where(*self._id_filter(prompt_id, owner_user_id))
        )
        await self.session.flush()
        return (result.rowcount or 0) > 0

    async def toggle_favorite(self, prompt_id: UUID, owner_user_id: Optional[str] = None) -> Optional[Prompt]:
        """Flip the favorite flag of a record; None when no record matches"""
        prompt = await self.get_prompt(prompt_id, owner_user_id)
        if prompt is None:
            return None

        prompt.is_favorite = not prompt.is_favorite
        await self.session.flush()
        return prompt

    async def get_user_stats(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Aggregate statistics over a user's records

        The "most used" tone and type are those of the user's earliest record,
        not the most frequent ones.

        Returns:
            Dict of statistics, or None when the user has no records
        """
        result = await self.session.execute(
            select(
                func.count(Prompt.id),
                func.sum(case((Prompt.is_favorite.is_(True), 1), else_=0)),
                func.avg(Prompt.processing_time),
                func.sum(Prompt.api_cost),
            ).where(Prompt.user_id == user_id)
        )
        total, favorites, avg_time, total_cost = result.one()
        if not total:
            return None

        first_result = await self.session.execute(
            select(Prompt.tone, Prompt.type)
            .where(Prompt.user_id == user_id)
            .order_by(Prompt.created_at.asc(), Prompt.id.asc())
            .limit(1)
        )
        first_tone, first_type = first_result.one()

        return {
            "total_prompts": total,
            "favorite_prompts": int(favorites or 0),
            "most_used_tone": first_tone,
            "most_used_type": first_type,
            "average_processing_time": float(avg_time or 0.0),
            "total_api_cost": float(total_cost or 0.0),
        }

    async def get_recent_activity(self, user_id: str, limit: int = 5) -> List[Dict[str, Any]]:
        """Newest records of a user, reduced to id/type/tone/timestamp"""
        result = await self.session.execute(
            select(Prompt.id, Prompt.type, Prompt.tone, Prompt.created_at)
            .where(Prompt.user_id == user_id)
            .order_by(Prompt.created_at.desc(), Prompt.id.desc())
            .limit(limit)
        )
        return [
            {"id": row_id, "prompt_type": prompt_type, "tone": tone, "timestamp": created_at}
            for row_id, prompt_type, tone, created_at in result.all()
        ]

    async def get_popular_tones_and_types(self) -> Dict[str, List[Dict[str, Any]]]:
        """Record counts per tone and per type across all users, most used first"""
        count = func.count(Prompt.id).label("count")

        tone_result = await self.session.execute(
            select(Prompt.tone, count)
            .group_by(Prompt.tone)
            .order_by(count.desc(), Prompt.tone.asc())
        )
        type_result = await self.session.execute(
            select(Prompt.type, count)
            .group_by(Prompt.type)
            .order_by(count.desc(), Prompt.type.asc())
        )

        return {
            "tone_stats": [{"tone": tone, "count": n} for tone, n in tone_result.all()],
            "type_stats": [{"type": prompt_type, "count": n} for prompt_type, n in type_result.all()],
        }

    async def count_prompts(self) -> int:
        """Total number of records across all users"""
        result = await self.session.execute(select(func.count(Prompt.id)))
        return result.scalar() or 0

    @staticmethod
    def _id_filter(prompt_id: UUID, owner_user_id: Optional[str]) -> list:
        conditions = [Prompt.id == prompt_id]
        if owner_user_id:
            conditions.append(Prompt.user_id == owner_user_id)
        return conditions

    @staticmethod
    def _ordering(sort_by: str, sort_order: str) -> list:
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None:
            raise InvalidQueryError(
                f"sortBy must be one of: {', '.join(sorted(SORTABLE_FIELDS))}"
            )
        if sort_order not in SORT_ORDERS:
            raise InvalidQueryError("sortOrder must be 'asc' or 'desc'")

        if sort_order == "desc":
            return [column.desc(), Prompt.id.desc()]
        return [column.asc(), Prompt.id.asc()]
