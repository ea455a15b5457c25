"""Learning resource storage and recommendations."""

from typing import Any, Dict, List
from aiocache import Cache
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
import structlog

from physics_lms.core.config import settings
from physics_lms.models.resource import LearningResource
from physics_lms.schemas.resource import LearningResourceCreate, LearningResourceResponse

logger = structlog.get_logger()


SAMPLE_RESOURCES = [
    LearningResourceCreate(
        title="Introduction to Physics for Engineers",
        description="A comprehensive guide to basic physics concepts for engineering students",
        url="https://example.com/physics-engineers",
        resource_type="ebook",
        module_id=1,
        career_path="engineer",
    ),
    LearningResourceCreate(
        title="Vector Mathematics for Engineers",
        description="Learn how to work with vectors in engineering applications",
        url="https://example.com/vector-math",
        resource_type="video",
        module_id=1,
        career_path="engineer",
    ),
    LearningResourceCreate(
        title="Basic Measurement Techniques",
        description="Precision and accuracy in engineering measurements",
        url="https://example.com/measurement",
        resource_type="article",
        module_id=1,
        career_path="engineer",
    ),
    LearningResourceCreate(
        title="Medical Physics Fundamentals",
        description="Introduction to physics concepts essential for medical professionals",
        url="https://example.com/medical-physics",
        resource_type="ebook",
        module_id=1,
        career_path="doctor",
    ),
    LearningResourceCreate(
        title="Aerodynamics Principles",
        description="Understanding the physics of flight",
        url="https://example.com/aerodynamics",
        resource_type="video",
        module_id=1,
        career_path="pilot",
    ),
]


def recommendations_cache_key(career_path: str, module_id: int) -> str:
    return f"resources:{career_path}:{module_id}"


class ResourceService:
    """Creates learning resources and serves cached per-module recommendations."""

    def __init__(self, db: AsyncSession, cache: Cache):
        self.db = db
        self.cache = cache

    async def create_resource(self, data: LearningResourceCreate) -> Dict[str, Any]:
        resource = LearningResource(**data.model_dump())
        self.db.add(resource)

        try:
            await self.db.commit()
            await self.db.refresh(resource)
        except Exception as e:
            logger.error("Failed to create learning resource", title=data.title, error=str(e))
            await self.db.rollback()
            raise

        await self.cache.delete(recommendations_cache_key(data.career_path, data.module_id))
        return LearningResourceResponse.model_validate(resource).model_dump()

    async def seed_sample_resources(self) -> List[Dict[str, Any]]:
        """Insert the bundled sample resources one by one."""
        results = []
        for data in SAMPLE_RESOURCES:
            results.append(await self.create_resource(data))

        logger.info("Sample resources seeded", count=len(results))
        return results

    async def get_recommended_resources(self, module_id: int, career_path: str) -> List[Dict[str, Any]]:
        """Resources attached to a module, cached for ``CACHE_TTL`` seconds."""
        key = recommendations_cache_key(career_path, module_id)
        cached = await self.cache.get(key)
        if cached is not None:
            return cached

        result = await self.db.execute(
            select(LearningResource)
            .where(
                and_(
                    LearningResource.module_id == module_id,
                    LearningResource.career_path == career_path
                )
            )
            .order_by(LearningResource.title)
            .limit(settings.RECOMMENDED_RESOURCES_LIMIT)
        )
        resources = [
            LearningResourceResponse.model_validate(r).model_dump()
            for r in result.scalars().all()
        ]

        await self.cache.set(key, resources, ttl=settings.CACHE_TTL)
        return resources
