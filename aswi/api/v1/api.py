"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from aswi.api.v1.endpoints import (accounts, attendance, auth, dashboard,
                                   employees, health, inventory, leave)

api_router = APIRouter()

# Auth (login, logout, profile) and account management
api_router.include_router(auth.router)
api_router.include_router(accounts.router)

# Employee types, employees, attendance ledger
api_router.include_router(employees.router)
api_router.include_router(attendance.router)

# Leave workflow
api_router.include_router(leave.router)

# Dashboards and inventory
api_router.include_router(dashboard.router)
api_router.include_router(inventory.router)

api_router.include_router(health.router)
