from fastapi import APIRouter

from .features.get_rsvp.router import router as get_rsvp_router
from .features.lookup_guest.router import router as lookup_guest_router
from .features.manage_guests.router import router as manage_guests_router
from .features.rsvp_summary.router import router as rsvp_summary_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

# lookup goes first so "/guests/lookup" never reaches the admin "/guests/{guest_id}" routes
router.include_router(lookup_guest_router)
router.include_router(submit_rsvp_router)
router.include_router(get_rsvp_router)
router.include_router(rsvp_summary_router)
router.include_router(manage_guests_router)
