from fastapi import APIRouter
from hrtalent.routers import salary, evaluations, consensus, pdi

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(salary.router, tags=["Salary & Careers"])
api_router.include_router(evaluations.router, tags=["Evaluations"])
api_router.include_router(consensus.router, tags=["Consensus"])
api_router.include_router(pdi.router, tags=["PDI"])
