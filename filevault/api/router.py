from fastapi import APIRouter

from filevault.api.auth import router as auth_router
from filevault.api.files import router as files_router
from filevault.api.search import router as search_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(files_router)
router.include_router(search_router)
