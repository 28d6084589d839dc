"""API router for WriteFlow endpoints."""

from fastapi import APIRouter

from app.api import books, chat, digest, distill, linkedin, narrative, notes, profile, search, tweets

router = APIRouter()

# Library records
router.include_router(books.router, tags=["books"])
router.include_router(notes.router, tags=["notes"])
router.include_router(profile.router, tags=["profile"])

# Reading partner
router.include_router(distill.router, tags=["distill"])
router.include_router(chat.router, tags=["chat"])
router.include_router(search.router, tags=["search"])

# Content studio
router.include_router(tweets.router, tags=["tweets"])
router.include_router(linkedin.router, tags=["linkedin"])

# Library synthesis
router.include_router(narrative.router, tags=["narrative"])
router.include_router(digest.router, tags=["digest"])
